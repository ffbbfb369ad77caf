"""
secproto CLI interface - Interactive security protocol runner.

Asks the operator which security tools to run, runs them one after another
and writes an execution log and summary report.
"""

import asyncio
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from secproto import __version__
from secproto.config import SecProtoSettings
from secproto.console import console as rich_console
from secproto.console import err_console
from secproto.logging_config import get_logger, setup_logging
from secproto.models import ToolSelection
from secproto.orchestrator import Orchestrator
from secproto.tools import TOOL_CATALOGUE

app = typer.Typer(
    name="secproto",
    help="Interactive security protocol CLI for authorized security testing",
    add_completion=False,
    rich_markup_mode=None,
)

logger = get_logger(__name__)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """secproto - Interactive security protocol CLI."""
    if ctx.invoked_subcommand is None:
        run(
            log_file=None,
            report_file=None,
            interface=None,
            debug_log=None,
            verbose=False,
            quiet=False,
        )


@app.command()
def run(
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Execution log file (default: security_protocol_log.txt)"
    ),
    report_file: Optional[Path] = typer.Option(
        None, "--report-file", help="Report file (default: security_protocol_report.txt)"
    ),
    interface: Optional[str] = typer.Option(
        None, "-i", "--interface", help="Network interface for Suricata, Zeek and tshark"
    ),
    debug_log: Optional[Path] = typer.Option(
        None, "--debug-log", help="Write diagnostic logging to this file"
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Enable verbose output"
    ),
    quiet: bool = typer.Option(
        False, "-q", "--quiet", help="Suppress non-critical output"
    ),
) -> None:
    """Prompt for tools and run the security protocol."""
    overrides: Dict[str, Any] = {}
    if log_file is not None:
        overrides["log_file"] = log_file
    if report_file is not None:
        overrides["report_file"] = report_file
    if interface is not None:
        overrides["interface"] = interface
    if debug_log is not None:
        overrides["debug_log_file"] = debug_log

    try:
        settings = SecProtoSettings(**overrides)

        setup_logging(
            level=settings.log_level,
            log_file=settings.debug_log_file,
            verbose=verbose,
            quiet=quiet,
        )

        _show_banner()

        orchestrator = Orchestrator(settings=settings, console=rich_console)
        asyncio.run(orchestrator.run_session())

    except (KeyboardInterrupt, EOFError):
        err_console.print("\n[yellow]Security protocol aborted[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        logger.debug("Security protocol failed", exc_info=True)
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def tools() -> None:
    """List the tools in the order they run."""
    settings = SecProtoSettings()
    example = ToolSelection(nmap=True, nmap_target="<target>", tshark=True, capture_duration=10)

    table = Table(title="Security Protocol Tools")
    table.add_column("#", style="dim")
    table.add_column("Tool", style="cyan")
    table.add_column("Command", style="white")
    table.add_column("Estimate", style="green")

    for index, tool in enumerate(TOOL_CATALOGUE, start=1):
        if tool.duration_estimator is not None:
            estimate = "operator input"
        else:
            estimate = f"{settings.default_estimated_duration_ms // 1000}s"
        table.add_row(str(index), tool.name, tool.build_command(example, settings), estimate)

    rich_console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    rich_console.print(f"secproto version {__version__}")


def _show_banner() -> None:
    """Show the secproto welcome banner."""
    banner = Panel(
        "[bold blue]Welcome to the Security Protocol CLI[/bold blue]\n"
        f"[dim]Version {__version__}[/dim]\n\n"
        "[yellow]Authorized use only - Ensure you have permission to monitor and scan these systems[/yellow]",
        title="secproto",
        border_style="blue",
    )
    rich_console.print(banner)


if __name__ == "__main__":
    app()
