"""
README documentation checks.
"""

from pathlib import Path

import pytest

from wlog.periods import PERIOD_KEYWORDS


@pytest.mark.parametrize("keyword", PERIOD_KEYWORDS)
@pytest.mark.unit
def test_readme_documents_period_keywords(keyword):
    """
    Ensure README lists every period keyword.

    Parameters
    ----------
    keyword : str
        Period keyword accepted by the resolver.

    Returns
    -------
    None
        This test asserts README guidance exists.
    """
    readme_path = Path(__file__).resolve().parents[1] / "README.md"

    assert f"`{keyword}`" in readme_path.read_text(encoding="utf-8")
