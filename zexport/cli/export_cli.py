"""
Export command-line interface.

Defines the `export` command group:

    zexport export run --source <raw export dir> --dest <dir> [--output-path <dir>] [--verbose]

The command is a thin wrapper: it builds the RAW export source, resolves the
configured output directory, and delegates everything else to the
orchestrator.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import typer

from zexport import config
from zexport.exceptions import ExportError
from zexport.export.orchestrator import run_export
from zexport.parsers.joplin_raw import JoplinRawExport

export_app = typer.Typer(
    help=(
        "Convert a Joplin RAW export directory into a Zettlr Markdown tree.\n\n"
        "Notes are written as <note id>.md inside one directory per notebook; "
        "attachments go to a single resources/ directory at the export root."
    )
)


# ---------------------------------------------------------------------------
# Command: zexport export run
# ---------------------------------------------------------------------------
@export_app.command("run")
def export_command(
    source: Path = typer.Option(
        ...,
        "--source",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
        help="Path to the Joplin RAW export directory.",
    ),
    dest: Path = typer.Option(
        ...,
        "--dest",
        file_okay=False,
        dir_okay=True,
        help="Destination directory for this run.",
    ),
    output_path: Optional[str] = typer.Option(
        None,
        "--output-path",
        help=(
            "Fixed output directory. Overrides --dest when non-empty. "
            "Defaults to ZEXPORT_OUTPUT_PATH."
        ),
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print progress for every item.",
    ),
) -> None:
    """
    Export every note, notebook and resource from a RAW export directory.
    """
    try:
        run_export_cli(source=source, dest=dest, output_path=output_path, verbose=verbose)
    except (ExportError, ValueError, FileNotFoundError) as e:
        typer.secho(f"Export failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def run_export_cli(
    source: Path,
    dest: Path,
    output_path: Optional[str] = None,
    verbose: bool = False,
) -> Dict[str, Any]:
    """
    CLI entrypoint for an export. Thin wrapper around the orchestrator.

    Responsibilities:

        1. Read the RAW export directory.
        2. Resolve the fixed output directory setting.
        3. Delegate the export to the orchestrator.
        4. Print a human-readable summary.
    """
    raw_export = JoplinRawExport(source, tag_page_size=config.tag_page_size())

    configured = output_path if output_path is not None else config.configured_output_path()

    summary = run_export(
        raw_export,
        dest,
        configured_output_path=configured,
        verbose=verbose,
    )

    typer.echo("\n=== Export Summary ===")
    for key, value in summary.items():
        typer.echo(f"{key}: {value}")

    return dict(summary)
