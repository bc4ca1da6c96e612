"""
Run-scoped export state.

The host gives no guarantee that a fresh exporter is created per export, so
all state accumulated during a run lives in an ExportRunContext that the
orchestrator owns, resets at the start of every run, and passes explicitly
to the collector, resolver and emitter.

The context also carries the phase boundary: observations are only accepted
while collecting, and resolution/emission only once collection is complete.
"""

from typing import Dict, List

from zexport.exceptions import ExportStateError
from zexport.types import FolderRecord, PendingNote


class ExportRunContext:
    """Folder table, pending notes and resource rename map for one export run."""

    def __init__(self) -> None:
        self.folders: Dict[str, FolderRecord] = {}
        self.pending_notes: List[PendingNote] = []
        self.resource_map: Dict[str, str] = {}
        self.collisions: List[str] = []
        self.collection_complete = False

    def reset(self) -> None:
        """Clear every table and reopen the collection phase."""
        self.folders = {}
        self.pending_notes = []
        self.resource_map = {}
        self.collisions = []
        self.collection_complete = False

    def mark_collection_complete(self) -> None:
        """Signal that the host item stream has been fully drained."""
        self.collection_complete = True

    def require_collecting(self) -> None:
        if self.collection_complete:
            raise ExportStateError("Collection is already complete; call reset() to start a new run")

    def require_collection_complete(self) -> None:
        if not self.collection_complete:
            raise ExportStateError("Notes cannot be resolved before collection is complete")
