"""
Reader for Joplin "RAW - Joplin Export Directory" exports.

A RAW export holds one <id>.md file per item plus a resources/ directory
with the binary data of every attachment. Each item file looks like:

    Item title

    Body text, possibly
    several lines long.

    id: 0123456789abcdef0123456789abcdef
    parent_id: fedcba9876543210fedcba9876543210
    created_time: 2023-11-14T22:13:20.000Z
    ...
    type_: 1

The trailing block of "key: value" lines is the item's metadata and is read
backwards from the end of the file up to the first blank line. Whatever
sits above it is the title (first line) and the body (after the blank line
that follows the title). Items without a title or body, such as note-tag
links, consist of the metadata block alone.

JoplinRawExport adapts a RAW export directory to the ItemSource interface
consumed by the export orchestrator.
"""

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from zexport.config import DEFAULT_TAG_PAGE_SIZE
from zexport.types import ITEM_TYPE_NOTE_TAG, ITEM_TYPE_RESOURCE, ITEM_TYPE_TAG, TagPage

PROP_LINE_RE = re.compile(r"^([a-z0-9_]+):\s?(.*)$")

# Metadata fields Joplin stores as ISO-8601 strings but the pipeline expects
# as epoch milliseconds.
TIMESTAMP_FIELDS = ("created_time", "updated_time", "user_created_time", "user_updated_time")


# ============================================================================
# 1: PARSE A SINGLE ITEM
# ============================================================================


def _to_epoch_ms(value: str) -> Optional[int]:
    """
    Convert a Joplin timestamp to epoch milliseconds.

    Accepts ISO-8601 ("2023-11-14T22:13:20.000Z") or a plain integer string.
    Returns None for empty or unparseable values.
    """
    value = value.strip()
    if not value:
        return None
    if value.isdigit():
        return int(value)
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(round(moment.timestamp() * 1000))


def parse_raw_item(text: str) -> Dict[str, Any]:
    """
    Parse the text of a single RAW export item.

    Returns a dictionary holding every metadata field (timestamps converted
    to epoch milliseconds, type_ as an int when numeric) plus "title" and
    "body".
    """
    lines = text.replace("\r\n", "\n").split("\n")

    # Drop trailing blank lines so the metadata block ends at the last line.
    while lines and not lines[-1].strip():
        lines.pop()

    # ------------------------------------------------------------
    # Metadata block, read backwards up to the first blank line
    # ------------------------------------------------------------
    props: Dict[str, Any] = {}
    index = len(lines) - 1
    while index >= 0:
        line = lines[index]
        if not line.strip():
            break
        match = PROP_LINE_RE.match(line)
        if not match:
            break
        props[match.group(1)] = match.group(2)
        index -= 1

    head = lines[: index + 1]

    # The blank line separating the body from the metadata block.
    if head and not head[-1].strip():
        head = head[:-1]

    # ------------------------------------------------------------
    # Title + body
    # ------------------------------------------------------------
    title = head[0] if head else ""
    body_lines = head[1:]
    if body_lines and not body_lines[0].strip():
        body_lines = body_lines[1:]

    item: Dict[str, Any] = dict(props)
    item["title"] = title
    item["body"] = "\n".join(body_lines)

    for key in TIMESTAMP_FIELDS:
        if key in item:
            item[key] = _to_epoch_ms(str(item[key]))

    raw_type = str(item.get("type_", "")).strip()
    item["type_"] = int(raw_type) if raw_type.isdigit() else None

    return item


# ============================================================================
# 2: A RAW EXPORT DIRECTORY AS AN ITEM SOURCE
# ============================================================================


class JoplinRawExport:
    """
    ItemSource backed by a RAW export directory.

    Items are loaded once, in sorted filename order, so repeated runs over
    the same directory deliver items in the same order.
    """

    def __init__(self, export_path: Union[str, Path], tag_page_size: int = DEFAULT_TAG_PAGE_SIZE) -> None:
        self.export_path = Path(export_path)
        if not self.export_path.is_dir():
            raise FileNotFoundError(f"RAW export directory not found: {self.export_path}")
        if tag_page_size < 1:
            raise ValueError("tag_page_size must be a positive integer")

        self.tag_page_size = tag_page_size
        self.resources_dir = self.export_path / "resources"

        self.items: List[Tuple[int, Dict[str, Any]]] = []
        self.tag_titles: Dict[str, str] = {}
        self.note_tag_ids: Dict[str, List[str]] = {}
        self.resource_meta: Dict[str, Dict[str, Any]] = {}

        self._load()

    def _load(self) -> None:
        for md_file in sorted(self.export_path.glob("*.md")):
            item = parse_raw_item(md_file.read_text(encoding="utf-8"))
            item_type = item.get("type_")
            if not item.get("id") or item_type is None:
                continue

            if item_type == ITEM_TYPE_TAG:
                self.tag_titles[item["id"]] = item["title"]
            elif item_type == ITEM_TYPE_NOTE_TAG:
                note_id = item.get("note_id")
                tag_id = item.get("tag_id")
                if note_id and tag_id:
                    self.note_tag_ids.setdefault(note_id, []).append(tag_id)
            elif item_type == ITEM_TYPE_RESOURCE:
                self.resource_meta[item["id"]] = item

            self.items.append((item_type, item))

    # ------------------------------------------------------------------
    # ItemSource interface
    # ------------------------------------------------------------------
    def iter_items(self) -> Iterator[Tuple[int, Mapping[str, Any]]]:
        yield from self.items

    def get_note_tags(self, note_id: str, page: int) -> TagPage:
        tag_ids = [t for t in self.note_tag_ids.get(note_id, []) if t in self.tag_titles]
        start = (page - 1) * self.tag_page_size
        end = start + self.tag_page_size
        return {
            "items": [{"id": t, "title": self.tag_titles[t]} for t in tag_ids[start:end]],
            "has_more": end < len(tag_ids),
        }

    def resource_path(self, resource_id: str) -> Optional[Path]:
        """
        Locate a resource's data file under resources/.

        Tries <id>.<file_extension> first, then any file named <id> or
        <id>.<something>.
        """
        extension = str(self.resource_meta.get(resource_id, {}).get("file_extension") or "").strip()
        if extension:
            candidate = self.resources_dir / f"{resource_id}.{extension}"
            if candidate.is_file():
                return candidate

        if not self.resources_dir.is_dir():
            return None
        for candidate in sorted(self.resources_dir.glob(f"{resource_id}*")):
            if candidate.is_file() and candidate.stem == resource_id:
                return candidate
        return None
