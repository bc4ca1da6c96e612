"""
Shared pytest configuration for the zexport test suite.

This file centralizes the reusable test doubles so that:
    • pipeline tests drive the orchestrator from an in-memory item source
    • emitter tests can record writes or simulate filesystem failures
    • parser and CLI tests can build small RAW export directories on disk

All helpers are deterministic and in-memory unless a test explicitly asks
for the filesystem through tmp_path.
"""

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pytest
from typer.testing import CliRunner

IMAGE_ID = "deadbeefdeadbeefdeadbeefdeadbee0"
NOTE_B_ID = "0123456789abcdef0123456789abcdef"


# ============================================================================
# 1: SHARED TEST INFRASTRUCTURE
# ============================================================================


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provides a fresh Typer CliRunner instance for CLI tests."""
    return CliRunner()


# ============================================================================
# 2: IN-MEMORY ITEM SOURCE
# ============================================================================


class InMemorySource:
    """
    ItemSource double.

    Exposes:
        • items          list of (item_type, raw_item) delivered in order
        • tags           note_id → tag titles, served in pages of page_size
        • resources      resource_id → Path of the resource bytes
        • tag_requests   every (note_id, page) requested, for assertions
    """

    def __init__(
        self,
        items: List[Tuple[int, Mapping[str, Any]]],
        tags: Optional[Dict[str, List[str]]] = None,
        resources: Optional[Dict[str, Path]] = None,
        page_size: int = 2,
    ) -> None:
        self.items = items
        self.tags = tags or {}
        self.resources = resources or {}
        self.page_size = page_size
        self.tag_requests: List[Tuple[str, int]] = []

    def iter_items(self):
        yield from self.items

    def get_note_tags(self, note_id: str, page: int):
        self.tag_requests.append((note_id, page))
        titles = self.tags.get(note_id, [])
        start = (page - 1) * self.page_size
        end = start + self.page_size
        return {
            "items": [{"title": t} for t in titles[start:end]],
            "has_more": end < len(titles),
        }

    def resource_path(self, resource_id: str) -> Optional[Path]:
        return self.resources.get(resource_id)


@pytest.fixture
def make_source():
    """Factory for InMemorySource instances."""
    return InMemorySource


# ============================================================================
# 3: FILE SINK DOUBLES
# ============================================================================


class RecordingSink:
    """FileSink that records writes instead of touching the filesystem."""

    def __init__(self) -> None:
        self.written: Dict[Path, str] = {}
        self.copied: List[Tuple[Path, Path]] = []

    def write_text(self, path: Path, text: str) -> None:
        self.written[path] = text

    def copy_file(self, source: Path, destination: Path) -> None:
        self.copied.append((source, destination))


class FailingSink(RecordingSink):
    """FileSink whose note writes fail after `fail_after` successful writes."""

    def __init__(self, fail_after: int = 0) -> None:
        super().__init__()
        self.fail_after = fail_after

    def write_text(self, path: Path, text: str) -> None:
        if len(self.written) >= self.fail_after:
            raise PermissionError(f"read-only: {path}")
        super().write_text(path, text)


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def failing_sink():
    """Factory for FailingSink instances."""
    return FailingSink


# ============================================================================
# 4: RAW EXPORT DIRECTORIES
# ============================================================================


def raw_item_text(title: Optional[str], body: str, props: Mapping[str, Any]) -> str:
    """Serialize an item the way Joplin writes RAW export files."""
    prop_block = "\n".join(f"{key}: {value}" for key, value in props.items())
    if title is None:
        return prop_block
    if body:
        return f"{title}\n\n{body}\n\n{prop_block}"
    return f"{title}\n\n{prop_block}"


@pytest.fixture
def write_raw_item():
    """Write a single RAW export item file named <id>.md into a directory."""

    def _writer(directory: Path, item_id: str, title: Optional[str], body: str = "", **props: Any) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{item_id}.md"
        path.write_text(raw_item_text(title, body, {"id": item_id, **props}), encoding="utf-8")
        return path

    return _writer


@pytest.fixture
def raw_export_dir(tmp_path, write_raw_item) -> Path:
    """
    A small RAW export:

        Notes/                     folder f1 (root)
          Hello "World" (abc123)   tags x, y; embeds photo.png
        Notes/Sub/                 folder f2 (under f1)
          Deep note                links to a note that is not exported
        Loose (root note)          links to abc123's resource as an attachment
    """
    src = tmp_path / "raw"
    write_raw_item(src, "f1", "Notes", parent_id="", type_=2)
    write_raw_item(src, "f2", "Sub", parent_id="f1", type_=2)
    write_raw_item(
        src,
        "abc123",
        'Hello "World"',
        f"![img](:/{IMAGE_ID})",
        parent_id="f1",
        created_time="2023-11-14T22:13:20.000Z",
        type_=1,
    )
    write_raw_item(
        src,
        "deep1",
        "Deep note",
        f"# Deep\n\nSee [the other one](:/{NOTE_B_ID}).",
        parent_id="f2",
        created_time="2023-11-14T22:13:20.000Z",
        type_=1,
    )
    write_raw_item(
        src,
        "loose1",
        "Loose",
        f"[download](:/{IMAGE_ID})",
        parent_id="",
        created_time="1700000000000",
        type_=1,
    )
    write_raw_item(src, IMAGE_ID, "photo.png", mime="image/png", file_extension="png", type_=4)
    write_raw_item(src, "tagx", "x", type_=5)
    write_raw_item(src, "tagy", "y", type_=5)
    write_raw_item(src, "nt1", None, note_id="abc123", tag_id="tagx", type_=6)
    write_raw_item(src, "nt2", None, note_id="abc123", tag_id="tagy", type_=6)

    resources = src / "resources"
    resources.mkdir()
    (resources / f"{IMAGE_ID}.png").write_bytes(b"\x89PNG fake")

    return src
