"""
logging_utils.py

Small logging helpers shared by the CLI and the export pipeline.

The exporter deliberately avoids a logging framework. Progress lines go to
stdout through Typer's echo so they interleave cleanly with CLI output;
warnings go to stderr in yellow so they stand out when a user scrolls back
through a long run.
"""

import typer


def log_verbose(message: str, verbose: bool) -> None:
    """
    Print a high-level progress message when verbose mode is enabled.

    Parameters
    ----------
    message : str
        Short, plain-English description of what the pipeline is doing
        (e.g., "Copying resource photo.png...").

    verbose : bool
        Whether verbose mode is active. When False, this function does
        nothing.
    """
    if verbose:
        typer.echo(message)


def log_warning(message: str) -> None:
    """
    Print a warning to stderr regardless of verbose mode.

    Used for conditions the run recovers from but the user should know
    about, such as two folders mapping to the same output directory.
    """
    typer.secho(f"warning: {message}", fg=typer.colors.YELLOW, err=True)
