#!/usr/bin/env python3
"""
Flat-file work log with period reports.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

__version__ = "0.3.0"

WLOG_HELP_HEADER = "wlog commands:"
WLOG_HELP_FOOTER = "Periods: day week|w month mtd|m year ytd|y all|a, or FROM[:TO|:now|:+N|:-N|:DD]."
WLOG_HELP_ENTRIES: Tuple[Tuple[str, str], ...] = (
    ("log", "Log DURATION to PROJECT with an optional comment."),
    ("report", "Project totals for a period (default: today)."),
    ("projects", "Projects logged in a period."),
    ("since", "Minutes since the last entry."),
    ("kill", "Abandon the time since the last entry."),
    ("edit", "Open the log in an editor."),
    ("help", "Show this help."),
)


def get_wlog_help_lines() -> List[str]:
    """
    Build the help text lines for wlog commands.

    Returns
    -------
    list[str]
        Lines to print for the `wlog help` command.

    Examples
    --------
    >>> lines = get_wlog_help_lines()
    >>> lines[0]
    'wlog commands:'
    >>> any(line.strip().startswith("report") for line in lines)
    True
    """
    max_width = max(len(command) for command, _ in WLOG_HELP_ENTRIES)
    sorted_entries = sorted(WLOG_HELP_ENTRIES, key=lambda entry: entry[0])
    lines = [WLOG_HELP_HEADER]
    for command, description in sorted_entries:
        lines.append(f"  {command:<{max_width}}  {description}")
    lines.append(WLOG_HELP_FOOTER)
    return lines


def configure_logging(debug: bool) -> None:
    """
    Send diagnostics to stderr, at DEBUG when requested.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_app():
    """
    Build the Typer app lazily to keep fast-path imports light.

    Returns
    -------
    typer.Typer
        Configured Typer application for the wlog CLI.
    """
    import typer

    from . import commands
    from .config import ConfigError, load_settings

    app = typer.Typer(help="Log work time and report totals by period.")

    def settings_of(ctx: typer.Context):
        return ctx.find_root().obj

    @app.callback(invoke_without_command=True)
    def main_callback(
        ctx: typer.Context,
        file: Optional[Path] = typer.Option(
            None,
            "--file",
            "-f",
            help="Log file (overrides WLOG_FILE and the config).",
        ),
        debug: bool = typer.Option(
            False,
            "--debug",
            help="Print diagnostic logging to stderr.",
        ),
    ):
        configure_logging(debug)
        try:
            ctx.obj = load_settings(log_path=file)
        except ConfigError as exc:
            print(f"wlog: {exc}", file=sys.stderr)
            raise typer.Exit(code=2)
        if ctx.invoked_subcommand is None:
            raise typer.Exit(code=commands.run_report(ctx.obj))

    @app.command("help")
    def help_cmd():
        """
        Print a brief reminder of wlog commands.
        """
        for line in get_wlog_help_lines():
            print(line)

    @app.command(
        "log",
        context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
    )
    def log_cmd(
        ctx: typer.Context,
        on: Optional[str] = typer.Option(
            None,
            "--date",
            "-d",
            help="Date of the work (YYYY-MM-DD, M/D/YYYY, 'Mon D YYYY', Nd, Nw).",
        ),
    ):
        exit_code = commands.run_log(list(ctx.args), settings_of(ctx), on=on)
        raise typer.Exit(code=exit_code)

    @app.command("report")
    def report_cmd(
        ctx: typer.Context,
        period: Optional[str] = typer.Argument(
            None,
            help="Period keyword or FROM[:TO] range expression.",
        ),
        on: Optional[str] = typer.Option(
            None,
            "--date",
            "-d",
            help="Reference date for the period (default: today).",
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            "-v",
            help="List entries per day before the totals.",
        ),
    ):
        exit_code = commands.run_report(
            settings_of(ctx),
            period=period,
            on=on,
            verbose=verbose,
        )
        raise typer.Exit(code=exit_code)

    @app.command("projects")
    def projects_cmd(
        ctx: typer.Context,
        period: Optional[str] = typer.Argument(
            "all",
            help="Period keyword or FROM[:TO] range expression.",
        ),
    ):
        raise typer.Exit(code=commands.run_projects(settings_of(ctx), period=period))

    @app.command("since")
    def since_cmd(ctx: typer.Context):
        raise typer.Exit(code=commands.run_since(settings_of(ctx)))

    @app.command("kill")
    def kill_cmd(ctx: typer.Context):
        raise typer.Exit(code=commands.run_kill(settings_of(ctx)))

    @app.command("reset", hidden=True)
    def reset_cmd(ctx: typer.Context):
        raise typer.Exit(code=commands.run_kill(settings_of(ctx)))

    @app.command("edit")
    def edit_cmd(ctx: typer.Context):
        raise typer.Exit(code=commands.run_edit(settings_of(ctx)))

    return app


def main():
    """
    Entry point for the wlog command.
    """
    app = build_app()
    app()


if __name__ == "__main__":
    main()
