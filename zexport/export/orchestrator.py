"""
High-level export orchestrator.

This module defines the canonical export pipeline. It is explicit and linear
so that tests can assert on sequencing and so the two-phase contract is
visible in one place:

    Phase 1: collection
        Drain the host item stream completely. Folders and notes are
        recorded in the run context; resource bytes are copied into
        resources/ and their filenames recorded as they arrive.

    Boundary
        The context is marked collection-complete. No further observations
        are accepted.

    Phase 2: resolution + emission
        Every pending note is resolved against the complete folder table and
        resource map, rewritten, and written. Notes are independent of each
        other in this phase.

Phase 2 never starts before phase 1 has finished, because a note's path and
its resource links depend on folders and resources the host may deliver
after the note itself.
"""

from pathlib import Path
from typing import List, Optional, Union

from zexport.config import resolve_export_root
from zexport.export.collector import IngestCollector
from zexport.export.context import ExportRunContext
from zexport.export.emitter import Emitter
from zexport.export.items import parse_item
from zexport.export.tag_resolution import fetch_note_tags
from zexport.logging_utils import log_verbose, log_warning
from zexport.types import ExportSummary, FileSink, FolderItem, ItemSource, NoteItem, ResourceItem


# ============================================================================
# EXPORT REPORT
# ============================================================================
class ExportReport:
    """
    Counters accumulated across one export run.

    The CLI prints this as a summary; tests assert on the exact values.
    """

    def __init__(self, export_root: Path) -> None:
        self.export_root = export_root
        self.folders_seen = 0
        self.notes_written = 0
        self.resources_copied = 0
        self.missing_references = 0
        self.note_links = 0
        self.collisions: List[str] = []

    def to_summary_dict(self) -> ExportSummary:
        return {
            "export_root": str(self.export_root),
            "folders_seen": self.folders_seen,
            "notes_written": self.notes_written,
            "resources_copied": self.resources_copied,
            "missing_references": self.missing_references,
            "note_links": self.note_links,
            "collisions": list(self.collisions),
        }


# ============================================================================
# PHASE 1
# ============================================================================
def collect_items(
    source: ItemSource,
    collector: IngestCollector,
    emitter: Emitter,
    verbose: bool = False,
) -> None:
    """Drain the host item stream into the run context."""
    for item_type, raw in source.iter_items():
        item = parse_item(item_type, raw)
        if item is None:
            continue

        if isinstance(item, FolderItem):
            record = collector.observe_folder(item.id, item.title, item.parent_id)
            log_verbose(f"Folder {item.id} → {record.sanitized_name}", verbose)

        elif isinstance(item, NoteItem):
            tags = fetch_note_tags(source, item.id)
            collector.observe_note(
                item.id,
                item.parent_id,
                item.title,
                item.created_time,
                tags,
                item.body,
            )
            log_verbose(f"Note {item.id}: {item.title}", verbose)

        elif isinstance(item, ResourceItem):
            location = source.resource_path(item.id)
            if location is None:
                # Links to it become :/missing-<id> sentinels or wiki-links.
                log_warning(f"resource {item.id} has no data file; skipping")
                continue
            filename = emitter.copy_resource(item.id, location)
            log_verbose(f"Resource {item.id} → {filename}", verbose)


# ============================================================================
# MAIN ORCHESTRATOR
# ============================================================================
def run_export(
    source: ItemSource,
    dest_path: Union[str, Path],
    sink: Optional[FileSink] = None,
    configured_output_path: Optional[str] = None,
    verbose: bool = False,
    context: Optional[ExportRunContext] = None,
) -> ExportSummary:
    """
    Export every item from source into a Zettlr Markdown tree.

    Parameters
    ----------
    source : ItemSource
        Host item stream, tag pages and resource byte locations.
    dest_path : str | Path
        Destination supplied for this run.
    sink : FileSink, optional
        Where writes go. Defaults to the local filesystem.
    configured_output_path : str, optional
        Fixed output directory setting; overrides dest_path when non-empty.
    context : ExportRunContext, optional
        Reused context. It is reset before collection starts.

    Raises
    ------
    ExportWriteError
        If any resource copy or note write fails. Emission stops there.
    ValueError
        If the host delivers a malformed folder, note or resource.
    """
    export_root = resolve_export_root(dest_path, configured_output_path)
    report = ExportReport(export_root)

    if context is None:
        context = ExportRunContext()
    collector = IngestCollector(context)
    collector.reset()

    emitter = Emitter(collector, export_root, sink)

    log_verbose(f"Exporting to {export_root}", verbose)

    # ------------------------------------------------------------
    # Phase 1: collection
    # ------------------------------------------------------------
    collect_items(source, collector, emitter, verbose)
    context.mark_collection_complete()
    collector.record_directory_collisions(emitter.resolver)

    log_verbose(
        f"Collected {len(context.folders)} folders, {len(context.pending_notes)} notes, "
        f"{len(context.resource_map)} resources",
        verbose,
    )

    # ------------------------------------------------------------
    # Phase 2: resolution + emission
    # ------------------------------------------------------------
    for note in context.pending_notes:
        out_file = emitter.emit_note(note)
        log_verbose(f"Wrote {out_file}", verbose)

    report.folders_seen = len(context.folders)
    report.notes_written = emitter.notes_written
    report.resources_copied = emitter.resources_copied
    report.missing_references = emitter.missing_references
    report.note_links = emitter.note_links
    report.collisions = list(context.collisions)

    return report.to_summary_dict()
