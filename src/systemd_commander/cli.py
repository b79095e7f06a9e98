import logging
from pathlib import Path
from typing import Optional

import typer

from . import __version__
from .catalog import UnitCatalog
from .models import AppOptions
from .runner import CommandRunner
from .util import json_line

log = logging.getLogger(__name__)


app = typer.Typer(
    name="systemd-commander",
    add_completion=False,
    help=(
        "Terminal dashboard for systemd service units.\n\n"
        "Usage:\n"
        "  systemd-commander [opts]          Open the dashboard\n"
        "  systemd-commander [opts] ps       List matching units (tab-separated)\n\n"
        "Keys: Enter apply filter, Tab/Shift+Tab move focus, F4 filter, F5 refresh,\n"
        "j journal, s start/stop, r restart, F10 quit."
    ),
    context_settings={"help_option_names": ["-h", "--help"]},
)


class EchoReporter:
    """Reporter for non-interactive commands: errors go to stderr."""

    def __init__(self) -> None:
        self.failed = False

    def report_success(self, message: str) -> None:
        log.debug("ok: %s", message.rstrip("\n"))

    def report_error(self, message: str) -> None:
        self.failed = True
        typer.echo(message.rstrip("\n"), err=True)


def _setup_logging(log_file: Optional[Path], verbose: bool) -> None:
    # The terminal belongs to the dashboard, so records only ever go to a file
    if log_file is None:
        return
    handler = logging.FileHandler(log_file)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="%H:%M:%S")
    )
    pkg_log = logging.getLogger("systemd_commander")
    pkg_log.addHandler(handler)
    pkg_log.setLevel(logging.DEBUG if verbose else logging.INFO)


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    unit_filter: str = typer.Option("", "--filter", help="Unit filter to apply at startup"),
    props: str = typer.Option(
        "", "--props", help="Extra unit properties to show; 'all' shows every property"
    ),
    user: bool = typer.Option(False, "--user", help="Talk to the user service manager"),
    journal_lines: int = typer.Option(
        0, "--journal-lines", min=0, help="Limit journal view to the last N entries (0 = all)"
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", envvar="SYSTEMD_COMMANDER_LOG", help="Write debug log to this file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every executed command"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        is_eager=True,
    ),
):
    if version:
        typer.echo(__version__)
        raise typer.Exit()

    _setup_logging(log_file, verbose)
    options = AppOptions(filter=unit_filter, properties=props, user=user, journal_lines=journal_lines)
    ctx.obj = options
    if ctx.invoked_subcommand is not None:
        return

    # Lazy import to avoid importing Textual for non-interactive commands
    from .dash.app import run_dash

    log.info("starting dashboard with filter %r", options.filter)
    run_dash(options)


@app.command("ps")
def ps(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print one JSON object per unit"),
):
    """List units matching the filter. Prints: name\tActiveState\tSubState"""
    options: AppOptions = ctx.obj
    reporter = EchoReporter()
    catalog = UnitCatalog(
        CommandRunner(reporter),
        filter=options.filter,
        properties=options.properties,
        user=options.user,
    )
    if reporter.failed:
        raise typer.Exit(code=1)
    for unit in catalog:
        if as_json:
            typer.echo(json_line(dict(unit.properties)))
        else:
            typer.echo(f"{unit.name}\t{unit.active_state}\t{unit.sub_state}")


def main() -> None:
    app()
