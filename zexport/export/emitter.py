"""
Emitter: every externally visible write of an export run.

Resources are copied during phase one, as the host delivers them, into a
single resources/ directory directly under the export root. Notes are
written during phase two, once the context is marked collection-complete:

    <export root>/<folder path>/<note id>.md

Each note file is its front matter, a blank line, and the body with all
internal references rewritten for the note's depth.

Writes go through a FileSink. Any OSError is re-raised as ExportWriteError
and stops the run; files already written are left in place.
"""

import shutil
from pathlib import Path
from typing import List, Optional, Union

from zexport.exceptions import ExportWriteError
from zexport.export.collector import IngestCollector
from zexport.export.hierarchy import RESOURCES_DIR_NAME, HierarchyResolver, resources_rel_path
from zexport.export.links import convert_links, find_missing_references, find_wiki_links
from zexport.types import FileSink, PendingNote


class LocalFileSink:
    """FileSink writing to the local filesystem, creating parent directories as needed."""

    def write_text(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)

    def copy_file(self, source: Path, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)


class Emitter:
    """
    Writes resources and notes for one export run.

    Counters (resources_copied, notes_written, missing_references,
    note_links) accumulate across the run and feed the export report.
    """

    def __init__(
        self,
        collector: IngestCollector,
        export_root: Union[str, Path],
        sink: Optional[FileSink] = None,
    ) -> None:
        self.collector = collector
        self.context = collector.context
        self.export_root = Path(export_root)
        self.sink: FileSink = sink if sink is not None else LocalFileSink()

        self.resources_copied = 0
        self.notes_written = 0
        self.missing_references = 0
        self.note_links = 0

        self._resolver: Optional[HierarchyResolver] = None

    @property
    def resources_dir(self) -> Path:
        return self.export_root / RESOURCES_DIR_NAME

    # ------------------------------------------------------------------
    # Phase one: resources
    # ------------------------------------------------------------------
    def copy_resource(self, resource_id: str, source_path: Union[str, Path]) -> str:
        """
        Copy a resource's bytes into resources/ and record its filename.

        Returns the destination filename.
        """
        self.context.require_collecting()

        if resource_id in self.context.resource_map:
            return self.context.resource_map[resource_id]

        filename = self.collector.resource_filename(resource_id, source_path)
        destination = self.resources_dir / filename
        try:
            self.sink.copy_file(Path(source_path), destination)
        except OSError as e:
            raise ExportWriteError(f"Failed to copy resource {resource_id} to {destination}: {e}") from e

        self.resources_copied += 1
        return self.collector.observe_resource(resource_id, source_path)

    # ------------------------------------------------------------------
    # Phase two: notes
    # ------------------------------------------------------------------
    @property
    def resolver(self) -> HierarchyResolver:
        self.context.require_collection_complete()
        if self._resolver is None:
            self._resolver = HierarchyResolver(self.context.folders)
        return self._resolver

    def note_directory(self, note: PendingNote) -> Path:
        return self.export_root.joinpath(*self.resolver.resolve_path(note.parent_folder_id))

    def rewrite_body(self, note: PendingNote) -> str:
        rel = resources_rel_path(self.resolver.depth(note.parent_folder_id))
        return convert_links(note.raw_body, self.context.resource_map, rel)

    def emit_note(self, note: PendingNote) -> Path:
        """Write a single note and return the path written."""
        body = self.rewrite_body(note)
        document = f"{note.front_matter}\n\n{body}"
        out_file = self.note_directory(note) / f"{note.id}.md"

        try:
            self.sink.write_text(out_file, document)
        except OSError as e:
            raise ExportWriteError(f"Failed to write note {note.id} to {out_file}: {e}") from e

        self.notes_written += 1
        self.missing_references += len(find_missing_references(body))
        self.note_links += len(find_wiki_links(body))
        return out_file

    def emit_all(self) -> List[Path]:
        """Write every pending note. Stops at the first write failure."""
        return [self.emit_note(note) for note in self.context.pending_notes]
