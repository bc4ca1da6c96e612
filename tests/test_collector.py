"""
Tests for the ingest collector (phase one).

These tests validate:

    • folder-name sanitization
    • front matter synthesis (escaping, ISO timestamps, tag blocks)
    • the heading-injection rule
    • resource filename recording, including basename collisions
    • reset() and the collection-complete boundary
"""

import pytest

from zexport.exceptions import ExportStateError
from zexport.export.collector import (
    IngestCollector,
    build_front_matter,
    ensure_heading,
    escape_title,
    format_created,
    sanitize_dir_name,
)
from zexport.export.context import ExportRunContext
from zexport.export.hierarchy import HierarchyResolver


@pytest.fixture
def collector() -> IngestCollector:
    return IngestCollector(ExportRunContext())


# ---------------------------------------------------------------------------
# Sanitization
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Notes", "Notes"),
        ("a/b\\c:d*e?f\"g<h>i|j", "a_b_c_d_e_f_g_h_i_j"),
        ("  padded  ", "padded"),
        ("", "_unnamed"),
        ("   ", "_unnamed"),
        ("..", "_unnamed"),
    ],
)
def test_sanitize_dir_name(raw, expected) -> None:
    assert sanitize_dir_name(raw) == expected


# ---------------------------------------------------------------------------
# Front matter
# ---------------------------------------------------------------------------


def test_format_created_uses_utc_milliseconds() -> None:
    assert format_created(1700000000000) == "2023-11-14T22:13:20.000Z"
    assert format_created(1700000000123) == "2023-11-14T22:13:20.123Z"
    assert format_created(0) == "1970-01-01T00:00:00.000Z"


def test_escape_title_escapes_backslash_before_quote() -> None:
    assert escape_title('Hello "World"') == 'Hello \\"World\\"'
    assert escape_title("C:\\path") == "C:\\\\path"
    assert escape_title('\\"') == '\\\\\\"'


def test_front_matter_with_tags() -> None:
    fm = build_front_matter("abc123", 'Hello "World"', 1700000000000, ["x", "y"])

    assert fm == "\n".join(
        [
            "---",
            "id: abc123",
            'title: "Hello \\"World\\""',
            "created: 2023-11-14T22:13:20.000Z",
            "tags:",
            "  - x",
            "  - y",
            "---",
        ]
    )


def test_front_matter_without_tags_uses_empty_sequence_marker() -> None:
    fm = build_front_matter("n1", "Plain", 0, [])
    assert "tags: []" in fm.splitlines()


def test_front_matter_keeps_duplicate_tags_in_source_order() -> None:
    fm = build_front_matter("n1", "T", 0, ["b", "a", "b"])
    assert fm.splitlines()[5:8] == ["  - b", "  - a", "  - b"]


# ---------------------------------------------------------------------------
# Heading injection
# ---------------------------------------------------------------------------


def test_heading_injected_when_missing() -> None:
    assert ensure_heading("Just text.", "My Title") == "# My Title\n\nJust text."


def test_heading_injected_into_empty_body() -> None:
    assert ensure_heading("", "Empty") == "# Empty\n\n"


def test_existing_heading_anywhere_prevents_injection() -> None:
    body = "Intro line\n\n# Later heading\n\nMore."
    assert ensure_heading(body, "Title") == body


def test_subheading_alone_does_not_count() -> None:
    # "##" is not "#" followed by whitespace.
    assert ensure_heading("## Section", "Title").startswith("# Title\n\n")


def test_hash_without_space_does_not_count() -> None:
    assert ensure_heading("#hashtag", "Title").startswith("# Title\n\n")


# ---------------------------------------------------------------------------
# Observations
# ---------------------------------------------------------------------------


def test_observe_note_checks_heading_on_raw_body(collector) -> None:
    note = collector.observe_note("n1", "", "T", 0, [], "# Own heading\n![x](:/" + "a" * 32 + ")")

    assert note.raw_body.startswith("# Own heading")
    assert collector.pending_notes == [note]


def test_observe_folder_records_sanitized_name(collector) -> None:
    record = collector.observe_folder("f1", "Work: 2024", None)

    assert record.sanitized_name == "Work_ 2024"
    assert record.parent_id == ""
    assert collector.context.folders["f1"] is record


def test_sibling_folders_with_same_name_are_reported(collector) -> None:
    collector.observe_folder("f1", "Same", "")
    collector.observe_folder("f2", "Same", "")
    collector.observe_folder("f3", "Same", "f1")
    collector.context.mark_collection_complete()

    collector.record_directory_collisions(HierarchyResolver(collector.context.folders))

    assert len(collector.context.collisions) == 1
    assert "f1" in collector.context.collisions[0]
    assert "f2" in collector.context.collisions[0]
    assert "f3" not in collector.context.collisions[0]


def test_directory_collisions_wait_for_collection_complete(collector) -> None:
    collector.observe_folder("f1", "Same", "")

    with pytest.raises(ExportStateError):
        collector.record_directory_collisions(HierarchyResolver(collector.context.folders))


def test_observe_resource_records_basename(collector) -> None:
    filename = collector.observe_resource("r1", "/tmp/joplin/resources/photo.png")

    assert filename == "photo.png"
    assert collector.context.resource_map == {"r1": "photo.png"}


def test_observe_resource_never_overwrites_existing_entry(collector) -> None:
    collector.observe_resource("r1", "/a/photo.png")
    again = collector.observe_resource("r1", "/b/other.png")

    assert again == "photo.png"
    assert collector.context.resource_map["r1"] == "photo.png"


def test_resource_basename_collision_gets_unique_filename(collector) -> None:
    collector.observe_resource("r1", "/a/photo.png")
    second = collector.observe_resource("r2", "/b/photo.png")

    assert second == "photo-r2.png"
    assert collector.context.resource_map == {"r1": "photo.png", "r2": "photo-r2.png"}
    assert len(collector.context.collisions) == 1


def test_renamed_resource_never_reuses_a_taken_filename(collector) -> None:
    # "photo-r2.png" is already a real basename when r2's rename is computed.
    collector.observe_resource("r3", "/c/photo-r2.png")
    collector.observe_resource("r1", "/a/photo.png")
    renamed = collector.observe_resource("r2", "/b/photo.png")

    assert renamed == "photo-r2-2.png"
    assert sorted(collector.context.resource_map.values()) == ["photo-r2-2.png", "photo-r2.png", "photo.png"]


def test_resource_filename_is_side_effect_free(collector) -> None:
    assert collector.resource_filename("r1", "/a/doc.pdf") == "doc.pdf"
    assert collector.context.resource_map == {}


# ---------------------------------------------------------------------------
# Run boundaries
# ---------------------------------------------------------------------------


def test_reset_clears_all_tables(collector) -> None:
    collector.observe_folder("f1", "A", "")
    collector.observe_note("n1", "f1", "T", 0, [], "body")
    collector.observe_resource("r1", "/x/y.png")
    collector.context.mark_collection_complete()

    collector.reset()

    ctx = collector.context
    assert ctx.folders == {}
    assert ctx.pending_notes == []
    assert ctx.resource_map == {}
    assert ctx.collection_complete is False


def test_observation_after_collection_complete_is_rejected(collector) -> None:
    collector.context.mark_collection_complete()

    with pytest.raises(ExportStateError):
        collector.observe_note("n1", "", "T", 0, [], "body")
    with pytest.raises(ExportStateError):
        collector.observe_folder("f1", "A", "")
    with pytest.raises(ExportStateError):
        collector.observe_resource("r1", "/x/y.png")
