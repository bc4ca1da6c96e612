"""
zexport: export a Joplin-style note collection as a Zettlr Markdown tree.

The package is split into:

    • zexport.export   the two-phase export pipeline (collect, then emit)
    • zexport.parsers  readers for Joplin RAW exports and exported notes
    • zexport.cli      the Typer command-line interface
"""

__version__ = "0.1.0"
