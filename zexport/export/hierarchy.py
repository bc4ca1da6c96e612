"""
Hierarchy resolver: folder id → relative output path.

Folders form a forest through their parent_id links. A note's output
directory is the chain of sanitized folder names from the forest root down
to the note's folder, and its depth (the number of segments) decides how
many "../" are needed to reach the shared resources/ directory.

The forest comes from host data and is not trusted to be acyclic. The walk
is iterative and tracks visited ids; when a parent link closes a cycle, the
folder holding that link is placed at the root.

A root folder whose sanitized name is "resources" would share the
attachment directory, so it is stored as "resources_" instead.
"""

from typing import Dict, List, Mapping, Tuple

from zexport.types import FolderRecord

RESOURCES_DIR_NAME = "resources"
UP_LEVEL = "../"

# Root folders named like the resources directory are stored under this name.
RESERVED_ROOT_RENAME = RESOURCES_DIR_NAME + "_"


def resources_rel_path(depth: int) -> str:
    """
    Path from a note at the given depth to the shared resources directory.

        depth 0 → "resources"
        depth 2 → "../../resources"
    """
    return f"{UP_LEVEL * max(depth, 0)}{RESOURCES_DIR_NAME}"


class HierarchyResolver:
    """
    Resolves folder ids against a complete folder table.

    Resolved paths are memoized per resolver, so build one resolver after
    collection is complete and reuse it for every note in the run.
    """

    def __init__(self, folders: Mapping[str, FolderRecord]) -> None:
        self.folders = folders
        self._cache: Dict[str, Tuple[str, ...]] = {}

    def resolve_path(self, folder_id: str) -> List[str]:
        """
        Return sanitized folder names from the root down to folder_id.

        An empty or unknown id yields [] (root placement).
        """
        if not folder_id or folder_id not in self.folders:
            return []
        if folder_id in self._cache:
            return list(self._cache[folder_id])

        # Walk upward collecting ids until we reach a root, an unknown
        # parent, an already-resolved folder, or a folder seen on this walk.
        chain: List[str] = []
        seen = set()
        current = folder_id
        base: Tuple[str, ...] = ()
        while current and current in self.folders:
            if current in self._cache:
                base = self._cache[current]
                break
            if current in seen:
                break
            seen.add(current)
            chain.append(current)
            current = self.folders[current].parent_id

        # Resolve top-down so every folder on the chain gets memoized.
        path = base
        for chain_id in reversed(chain):
            path = path + (self.directory_name(chain_id, at_root=not path),)
            self._cache[chain_id] = path

        return list(self._cache[folder_id])

    def directory_name(self, folder_id: str, at_root: bool) -> str:
        """
        Directory name for a folder. A root folder never takes the name of
        the shared resources directory.
        """
        name = self.folders[folder_id].sanitized_name
        if at_root and name == RESOURCES_DIR_NAME:
            return RESERVED_ROOT_RENAME
        return name

    def depth(self, folder_id: str) -> int:
        return len(self.resolve_path(folder_id))

    def directory_collisions(self) -> List[str]:
        """
        Describe every directory that more than one folder resolves to, and
        every root folder renamed away from the resources directory.

        Compares resolved paths, so folders moved to the root by an unknown
        parent or by cycle recovery are compared with the true root folders.
        """
        messages: List[str] = []
        by_path: Dict[Tuple[str, ...], List[str]] = {}
        for folder_id in self.folders:
            path = tuple(self.resolve_path(folder_id))
            by_path.setdefault(path, []).append(folder_id)
            if len(path) == 1 and path[0] == RESERVED_ROOT_RENAME and (
                self.folders[folder_id].sanitized_name == RESOURCES_DIR_NAME
            ):
                messages.append(
                    f"folder {folder_id} is named {RESOURCES_DIR_NAME!r} at the export root; "
                    f"stored as {RESERVED_ROOT_RENAME!r}"
                )

        for path, folder_ids in by_path.items():
            if len(folder_ids) > 1:
                messages.append(
                    f"folders {', '.join(folder_ids)} all map to directory "
                    f"{'/'.join(path)!r}; their notes are merged"
                )
        return messages
