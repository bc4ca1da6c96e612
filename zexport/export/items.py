"""
Boundary validation for host items.

The host delivers loosely-typed mappings (everything may be a string, fields
may be missing or None). parse_item() is the single place where those
mappings become the typed FolderItem / NoteItem / ResourceItem variants the
rest of the pipeline works with.
"""

from typing import Any, Mapping, Optional

from zexport.types import (
    ITEM_TYPE_FOLDER,
    ITEM_TYPE_NOTE,
    ITEM_TYPE_RESOURCE,
    FolderItem,
    HostItem,
    NoteItem,
    ResourceItem,
)


# Characters that may not appear in an item id.
UNSAFE_ID_CHARS = ("/", "\\", "\0")


def _text(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    return "" if value is None else str(value)


def _created_time(raw: Mapping[str, Any]) -> int:
    value = raw.get("created_time")
    if value is None or value == "":
        raise ValueError(f"Note {raw.get('id')!r} has no created_time")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Note {raw.get('id')!r} has an invalid created_time: {value!r}") from e


def parse_item(item_type: int, raw: Mapping[str, Any]) -> Optional[HostItem]:
    """
    Convert a raw host item into its typed variant.

    Returns None for item kinds that are not exported (tags, note-tag links,
    anything else the host may deliver).

    Raises
    ------
    ValueError
        If an exportable item is missing its id or its id is not a plain
        file name, or a note carries an unusable created_time.
    """
    if item_type not in (ITEM_TYPE_FOLDER, ITEM_TYPE_NOTE, ITEM_TYPE_RESOURCE):
        return None

    item_id = _text(raw, "id").strip()
    if not item_id:
        raise ValueError(f"Item of type {item_type} is missing an id: {dict(raw)!r}")
    # Note and resource ids become file names under the export root.
    if item_id in (".", "..") or any(ch in item_id for ch in UNSAFE_ID_CHARS):
        raise ValueError(f"Item of type {item_type} has an id that is not a plain file name: {item_id!r}")

    if item_type == ITEM_TYPE_FOLDER:
        return FolderItem(
            id=item_id,
            title=_text(raw, "title"),
            parent_id=_text(raw, "parent_id"),
        )

    if item_type == ITEM_TYPE_NOTE:
        return NoteItem(
            id=item_id,
            title=_text(raw, "title"),
            body=_text(raw, "body"),
            created_time=_created_time(raw),
            parent_id=_text(raw, "parent_id"),
        )

    return ResourceItem(id=item_id, title=_text(raw, "title"))
