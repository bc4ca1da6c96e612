"""
Root entrypoint for the zexport CLI.

This module defines the top-level `zexport` command and mounts the sub-apps
defined in zexport/cli/:

    • zexport/cli/export_cli.py  →  `zexport export ...`
    • zexport/cli/audit_cli.py   →  `zexport audit ...`

Together they form the export workflow:

    Step 1: `zexport export run`
        Convert a Joplin RAW export directory into a Zettlr Markdown tree.

    Step 2: `zexport audit run`
        Re-read the exported tree and list unresolved references.
"""

# ---------------------------------------------------------------------------
# Imports (must be at top to satisfy flake8 E402)
# ---------------------------------------------------------------------------
from dotenv import load_dotenv
import typer

from .audit_cli import audit_app
from .export_cli import export_app

# Load environment variables
load_dotenv()

# ---------------------------------------------------------------------------
# Root CLI application
# ---------------------------------------------------------------------------
cli = typer.Typer(
    help=(
        "Export a Joplin note collection as Zettlr Markdown.\n\n"
        "  Step 1: convert a RAW export:\n"
        "      zexport export run --source <raw dir> --dest <dir>\n\n"
        "  Step 2: check the result for unresolved references:\n"
        "      zexport audit run --export-path <dir>\n\n"
        "Set ZEXPORT_OUTPUT_PATH (environment or .env) to always export into "
        "a fixed directory."
    )
)

# ---------------------------------------------------------------------------
# Register sub-applications
# ---------------------------------------------------------------------------
cli.add_typer(export_app, name="export")
cli.add_typer(audit_app, name="audit")

# ---------------------------------------------------------------------------
# Entry point for `python -m zexport.cli.main`
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    cli()
