"""Exceptions raised by the export pipeline."""


class ExportError(Exception):
    """Base exception for export failures."""


class ExportWriteError(ExportError):
    """Raised when a note or resource cannot be written to the export tree."""


class ExportStateError(ExportError):
    """Raised when the pipeline is driven out of order (e.g. emitting before collection ends)."""
