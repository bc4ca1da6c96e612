"""Typer command-line interface for zexport."""
