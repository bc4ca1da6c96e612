"""
config.py

Environment-backed configuration for the exporter.

Values are read from the process environment after python-dotenv has loaded
a local .env file, so users can pin settings per vault without touching
their shell profile:

    ZEXPORT_OUTPUT_PATH      Fixed output directory. When non-empty it
                             overrides the destination passed to a run.
    ZEXPORT_TAG_PAGE_SIZE    Page size used when reading note tags from a
                             RAW export (default 100).
"""

import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

# Load environment variables from the .env file into the process environment
load_dotenv()

OUTPUT_PATH_ENV = "ZEXPORT_OUTPUT_PATH"
TAG_PAGE_SIZE_ENV = "ZEXPORT_TAG_PAGE_SIZE"
DEFAULT_TAG_PAGE_SIZE = 100


def configured_output_path() -> Optional[str]:
    """Return the fixed output directory setting, or None when unset."""
    return os.getenv(OUTPUT_PATH_ENV)


def tag_page_size() -> int:
    """
    Return the configured tag page size.

    Raises
    ------
    ValueError
        If the variable is set but is not a positive integer.
    """
    raw = os.getenv(TAG_PAGE_SIZE_ENV)
    if not raw:
        return DEFAULT_TAG_PAGE_SIZE

    size = int(raw)
    if size < 1:
        raise ValueError(f"{TAG_PAGE_SIZE_ENV} must be a positive integer, got {raw!r}")
    return size


def resolve_export_root(dest_path: Union[str, Path], configured: Optional[str] = None) -> Path:
    """
    Pick the export root for a run.

    A configured fixed directory wins when it is non-empty after trimming
    whitespace (the trimmed value is used). Otherwise the run-supplied
    destination is used unchanged. An empty setting is not an error.
    """
    if configured is not None and configured.strip():
        return Path(configured.strip())
    return Path(dest_path)
