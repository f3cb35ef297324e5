import logging
from pathlib import Path

import typer

from patchkit.apply.orchestrator import apply_patch, apply_series
from patchkit.config import load_series
from patchkit.errors import InvalidSeriesError, PatchError
from patchkit.logging import get_logger, setup_logging
from patchkit.models import ApplyReport

logger = get_logger(__name__)

app = typer.Typer(no_args_is_help = True)


def _configure_logging(verbose: bool) -> None:
    setup_logging(level=logging.DEBUG if verbose else None)


def _echo_report(report: ApplyReport) -> None:
    for change in report.changes:
        suffix = f" (offsets {change.offsets})" if any(change.offsets) else ""
        typer.echo(f"{change.action}: {change.path}{suffix}")


@app.command("apply")
def apply_cmd(
    patch: Path = typer.Argument(..., help="Patch file to apply"),
    strip: int = typer.Option(1, "-p", "--strip", help="Leading path components to strip"),
    directory: Path = typer.Option(Path("."), "-d", "--directory", help="Root of the tree to patch"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Check the patch without writing"),
    max_offset: int | None = typer.Option(None, "--max-offset", help="Largest tolerated hunk drift"),
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging"),
):
    """
    Apply a git-style patch to a directory.
    """
    _configure_logging(verbose)
    try:
        report = apply_patch(patch, strip, directory, dry_run=dry_run, max_offset=max_offset)
    except (PatchError, OSError) as exc:
        logger.debug("apply %s failed", patch, exc_info=True)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    if json_output:
        typer.echo(report.model_dump_json(indent=2))
    else:
        _echo_report(report)


@app.command("series")
def series_cmd(
    series_file: Path = typer.Argument(..., help="YAML file listing patches"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Check the patches without writing"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging"),
):
    """
    Apply the patches listed in a series file, in order.
    """
    _configure_logging(verbose)
    try:
        series = load_series(series_file)
        reports = apply_series(series, dry_run=dry_run)
    except (PatchError, InvalidSeriesError, OSError) as exc:
        logger.debug("series %s failed", series_file, exc_info=True)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    for report in reports:
        typer.echo(f"Patch: {report.patch_file}")
        _echo_report(report)


@app.callback()
def main():
    """
    patchkit CLI
    """
    pass
