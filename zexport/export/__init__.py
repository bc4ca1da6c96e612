"""
Public export API surface.

External callers (CLI, tests, other tools) should import from here rather
than reaching into submodules:

    • run_export         two-phase orchestrator entry point
    • ExportReport       run counters
    • ExportRunContext   owned state for one run
    • IngestCollector, HierarchyResolver, Emitter, convert_links
"""

from .collector import IngestCollector
from .context import ExportRunContext
from .emitter import Emitter, LocalFileSink
from .hierarchy import HierarchyResolver, resources_rel_path
from .links import convert_links
from .orchestrator import ExportReport, run_export

__all__ = [
    "run_export",
    "ExportReport",
    "ExportRunContext",
    "IngestCollector",
    "HierarchyResolver",
    "resources_rel_path",
    "Emitter",
    "LocalFileSink",
    "convert_links",
]
