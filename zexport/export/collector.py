"""
Ingest collector: phase one of the export pipeline.

The collector consumes host items in whatever order the host delivers them
and accumulates three tables inside the run context:

    • folders         folder id → FolderRecord (sanitized name, parent id)
    • pending notes   one immutable PendingNote per note, front matter built
    • resource map    resource id → destination filename in resources/

Nothing here resolves paths or rewrites links. A note may reference folders
and resources that have not been observed yet, so that work is deferred to
the emitter once the whole stream has been drained.
"""

import re
from datetime import datetime, timezone
from pathlib import PurePath
from typing import List, Sequence, Union

from zexport.export.context import ExportRunContext
from zexport.export.hierarchy import HierarchyResolver
from zexport.logging_utils import log_warning
from zexport.types import FolderRecord, PendingNote

# Characters that are invalid in directory names on at least one common OS.
INVALID_DIR_CHARS_RE = re.compile(r'[/\\:*?"<>|]')

# A Markdown level-1 heading anywhere in the document.
HEADING_RE = re.compile(r"^#\s", re.MULTILINE)

UNNAMED_FOLDER = "_unnamed"


# ============================================================================
# PURE HELPERS
# ============================================================================


def sanitize_dir_name(name: str) -> str:
    """
    Make a folder title safe to use as a directory name.

    Each invalid character becomes "_", surrounding whitespace is trimmed,
    and an empty result (or a bare "." / "..", which would point outside the
    folder's own directory) becomes "_unnamed".
    """
    cleaned = INVALID_DIR_CHARS_RE.sub("_", name or "").strip()
    if cleaned in ("", ".", ".."):
        return UNNAMED_FOLDER
    return cleaned


def format_created(created_time_ms: int) -> str:
    """
    Format epoch milliseconds as ISO-8601 UTC with millisecond precision.

    Example: 1700000000000 → "2023-11-14T22:13:20.000Z"
    """
    seconds, millis = divmod(int(created_time_ms), 1000)
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return f"{moment.strftime('%Y-%m-%dT%H:%M:%S')}.{millis:03d}Z"


def escape_title(title: str) -> str:
    """Escape backslashes, then double quotes, for a double-quoted YAML scalar."""
    return title.replace("\\", "\\\\").replace('"', '\\"')


def build_front_matter(note_id: str, title: str, created_time_ms: int, tags: Sequence[str]) -> str:
    """
    Build the "---" delimited front matter block for a note.

    Tags keep their source order and are not deduplicated. A note without
    tags gets the empty-sequence marker "tags: []".
    """
    if tags:
        tag_lines = "tags:\n" + "\n".join(f"  - {tag}" for tag in tags)
    else:
        tag_lines = "tags: []"

    return "\n".join(
        [
            "---",
            f"id: {note_id}",
            f'title: "{escape_title(title)}"',
            f"created: {format_created(created_time_ms)}",
            tag_lines,
            "---",
        ]
    )


def has_heading(body: str) -> bool:
    return HEADING_RE.search(body) is not None


def ensure_heading(body: str, title: str) -> str:
    """
    Prepend "# <title>" and a blank line unless the body already has a heading.

    Must run on the raw body, before any link rewriting.
    """
    if has_heading(body):
        return body
    return f"# {title}\n\n{body}"


# ============================================================================
# COLLECTOR
# ============================================================================


class IngestCollector:
    """
    Accumulates folders, notes and resources into an ExportRunContext.

    All observe_* methods refuse to run once the context has been marked
    collection-complete, which keeps phase one and phase two separate.
    """

    def __init__(self, context: ExportRunContext) -> None:
        self.context = context

    def reset(self) -> None:
        """Clear all collected state. Call at the start of every export run."""
        self.context.reset()

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------
    def observe_folder(self, folder_id: str, raw_title: str, parent_id: str = "") -> FolderRecord:
        self.context.require_collecting()

        record = FolderRecord(
            id=folder_id,
            sanitized_name=sanitize_dir_name(raw_title),
            parent_id=parent_id or "",
        )
        self.context.folders[folder_id] = record
        return record

    def record_directory_collisions(self, resolver: HierarchyResolver) -> List[str]:
        """
        Record every directory shared by more than one folder once the folder
        table is complete. Notes are written as <id>.md, so merged folders
        never overwrite each other's files.
        """
        self.context.require_collection_complete()

        messages = resolver.directory_collisions()
        for message in messages:
            self.record_collision(message)
        return messages

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------
    def observe_note(
        self,
        note_id: str,
        parent_id: str,
        title: str,
        created_time_ms: int,
        tags: Sequence[str],
        body: str,
    ) -> PendingNote:
        self.context.require_collecting()

        note = PendingNote(
            id=note_id,
            parent_folder_id=parent_id or "",
            front_matter=build_front_matter(note_id, title, created_time_ms, tags),
            raw_body=ensure_heading(body or "", title),
        )
        self.context.pending_notes.append(note)
        return note

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------
    def resource_filename(self, resource_id: str, source_location: Union[str, PurePath]) -> str:
        """
        Return the destination filename a resource will be stored under.

        Does not modify any state. An id that is already recorded keeps its
        filename. A basename already claimed by a different resource is made
        unique by inserting the resource id before the extension, followed by
        a counter if that name is taken as well.
        """
        existing = self.context.resource_map.get(resource_id)
        if existing is not None:
            return existing

        taken = set(self.context.resource_map.values())
        basename = PurePath(str(source_location)).name
        if basename not in taken:
            return basename

        source = PurePath(basename)
        candidate = f"{source.stem}-{resource_id}{source.suffix}"
        counter = 2
        while candidate in taken:
            candidate = f"{source.stem}-{resource_id}-{counter}{source.suffix}"
            counter += 1
        return candidate

    def observe_resource(self, resource_id: str, source_location: Union[str, PurePath]) -> str:
        """Record where a resource's bytes land and return the destination filename."""
        self.context.require_collecting()

        if resource_id in self.context.resource_map:
            return self.context.resource_map[resource_id]

        filename = self.resource_filename(resource_id, source_location)
        basename = PurePath(str(source_location)).name
        if filename != basename:
            self.record_collision(
                f"resource {resource_id} shares filename {basename!r} with another resource; "
                f"stored as {filename!r}"
            )

        self.context.resource_map[resource_id] = filename
        return filename

    # ------------------------------------------------------------------
    def record_collision(self, message: str) -> None:
        self.context.collisions.append(message)
        log_warning(message)

    @property
    def pending_notes(self) -> List[PendingNote]:
        return self.context.pending_notes
