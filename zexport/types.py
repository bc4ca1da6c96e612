"""
zexport/types.py

Centralized type definitions for the export pipeline.

Two families of types live here:

    • Boundary shapes (TypedDicts, Protocols) describing what the host note
      store hands us: loosely-typed item mappings, paginated tag pages, and
      the narrow source / sink interfaces the pipeline depends on.

    • Run entities (frozen dataclasses) that the pipeline builds from those
      boundary shapes. Once created they are never mutated.

Keeping both in one module gives the collector, resolver, rewriter and
emitter a single source of truth for the data they pass around.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Tuple, TypedDict, Union


# ---------------------------------------------------------------------------
# Item type codes
# ---------------------------------------------------------------------------
# Joplin's model type numbers. Only notes, folders and resources are export
# items; tags and note-tag links feed tag retrieval and are never emitted.
# ---------------------------------------------------------------------------
ITEM_TYPE_NOTE = 1
ITEM_TYPE_FOLDER = 2
ITEM_TYPE_RESOURCE = 4
ITEM_TYPE_TAG = 5
ITEM_TYPE_NOTE_TAG = 6


# ---------------------------------------------------------------------------
# RawItem
# ---------------------------------------------------------------------------
# A host item exactly as delivered: a loose mapping with string-ish values.
# total=False because folders and resources carry only a subset of fields.
# ---------------------------------------------------------------------------
class RawItem(TypedDict, total=False):
    id: str
    parent_id: str
    title: str
    body: str
    created_time: Any
    file_extension: str
    mime: str


# ---------------------------------------------------------------------------
# TagPage
# ---------------------------------------------------------------------------
# One page of a note's tag list, shaped like Joplin's data API responses:
#     {"items": [{"title": "work"}, ...], "has_more": True}
# ---------------------------------------------------------------------------
class TagPage(TypedDict):
    items: List[Dict[str, Any]]
    has_more: bool


# ---------------------------------------------------------------------------
# ExportSummary
# ---------------------------------------------------------------------------
# The structured summary returned by run_export() and printed by the CLI.
# ---------------------------------------------------------------------------
class ExportSummary(TypedDict):
    export_root: str
    folders_seen: int
    notes_written: int
    resources_copied: int
    missing_references: int
    note_links: int
    collisions: List[str]


# ---------------------------------------------------------------------------
# Host items (tagged variant)
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class FolderItem:
    id: str
    title: str
    parent_id: str = ""


@dataclass(frozen=True)
class NoteItem:
    id: str
    title: str
    body: str
    created_time: int
    parent_id: str = ""


@dataclass(frozen=True)
class ResourceItem:
    id: str
    title: str = ""


HostItem = Union[FolderItem, NoteItem, ResourceItem]


# ---------------------------------------------------------------------------
# Run entities
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class FolderRecord:
    id: str
    sanitized_name: str
    parent_id: str = ""


@dataclass(frozen=True)
class PendingNote:
    id: str
    parent_folder_id: str
    front_matter: str
    raw_body: str


# ---------------------------------------------------------------------------
# ItemSource
# ---------------------------------------------------------------------------
# The narrow interface the pipeline consumes from the host note store.
# Structural: the RAW export reader and the in-memory test source both
# satisfy it without inheriting from anything.
# ---------------------------------------------------------------------------
class ItemSource(Protocol):
    def iter_items(self) -> Iterable[Tuple[int, Mapping[str, Any]]]:
        """Yield (item_type, raw_item) pairs in host delivery order."""
        ...

    def get_note_tags(self, note_id: str, page: int) -> TagPage:
        """Return one page (1-based) of the tags attached to a note."""
        ...

    def resource_path(self, resource_id: str) -> Optional[Path]:
        """Return the location of a resource's bytes, or None if unavailable."""
        ...


# ---------------------------------------------------------------------------
# FileSink
# ---------------------------------------------------------------------------
# Every externally visible write goes through this interface so tests can
# record writes or simulate failures without touching the filesystem.
# ---------------------------------------------------------------------------
class FileSink(Protocol):
    def write_text(self, path: Path, text: str) -> None:
        ...

    def copy_file(self, source: Path, destination: Path) -> None:
        ...
