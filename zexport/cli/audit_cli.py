"""
Audit command-line interface.

Defines the `audit` command group:

    zexport audit run --export-path <dir> [--strict]

Lists every :/missing-<id> sentinel and every wiki-link whose target note
is not in the export. With --strict, exits with code 1 when anything is
unresolved so the command can gate a script.
"""

from pathlib import Path

import typer

from zexport.parsers.exported_note import audit_export

audit_app = typer.Typer(help="Check an exported tree for unresolved references.")


@audit_app.command("run")
def audit_command(
    export_path: Path = typer.Option(
        ...,
        "--export-path",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
        help="Root of a tree produced by `zexport export run`.",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit with code 1 if any reference is unresolved.",
    ),
) -> None:
    """
    Report missing resources and dangling note links in an export.
    """
    report = audit_export(export_path)

    typer.echo(f"Notes checked: {report['notes']}")

    for note_id, ids in report["missing_references"].items():
        for resource_id in ids:
            typer.echo(f"{note_id}: missing resource {resource_id}")

    for note_id, ids in report["dangling_links"].items():
        for target in ids:
            typer.echo(f"{note_id}: link to unknown note {target}")

    for note_id, error in report["unreadable"].items():
        typer.secho(f"{note_id}: unreadable front matter ({error})", fg=typer.colors.YELLOW)

    unresolved = sum(len(v) for v in report["missing_references"].values()) + sum(
        len(v) for v in report["dangling_links"].values()
    )
    typer.echo(f"Unresolved references: {unresolved}")

    if strict and unresolved:
        raise typer.Exit(code=1)
