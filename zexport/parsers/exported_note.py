"""
Parser and auditor for exported Zettlr notes.

After an export, unresolved references are left visible in the note text:

    ![alt](:/missing-<id>)   an image whose resource was never delivered
    [[<id>|text]]            a link to another note, resolved by Zettlr

audit_export() re-reads an export tree with python-frontmatter and reports
both kinds: sentinels, and wiki-links whose target note is not part of the
export.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import frontmatter
import yaml
from frontmatter.default_handlers import YAMLHandler

from zexport.export.hierarchy import RESOURCES_DIR_NAME
from zexport.export.links import find_missing_references, find_wiki_links


# ============================================================================
# 1: PARSE A SINGLE EXPORTED NOTE
# ============================================================================


def _raw_tags(front_matter: str) -> List[str]:
    """
    Read the tag list straight from the front matter lines.

    Tags are written unquoted, so YAML drops or rejects values such as
    "#idea" (a comment) or "@home" (a reserved indicator).
    """
    tags: List[str] = []
    in_tags = False
    for line in front_matter.splitlines():
        if line.startswith("tags:"):
            in_tags = True
            continue
        if in_tags and line.startswith("  - "):
            tags.append(line[4:])
        elif in_tags:
            break
    return tags


def load_exported_note(filepath: Union[str, Path]) -> Dict[str, Any]:
    """
    Parse an exported .md file into a structured dictionary.

    Returns:
        id, title, created, tags, body, plus the ids of every missing-resource
        sentinel ("missing") and every wiki-link target ("links").
        "error" holds the YAML error message when the front matter could not
        be parsed; the id then falls back to the filename and the body is
        still scanned.
    """
    text = Path(filepath).read_text(encoding="utf-8")
    handler = YAMLHandler()
    try:
        raw_front_matter, body = handler.split(text)
    except ValueError:
        raw_front_matter, body = "", text

    error: Optional[str] = None
    try:
        post = frontmatter.loads(text)
        metadata = post.metadata
        body = post.content
    except yaml.YAMLError as e:
        metadata = {}
        body = body.strip()
        error = str(e).replace("\n", " ")

    # YAML may read an all-digit id as a number; the filename is the id too.
    note_id = metadata.get("id")
    if not isinstance(note_id, str) or not note_id:
        note_id = os.path.splitext(os.path.basename(str(filepath)))[0]

    return {
        "id": str(note_id),
        "title": metadata.get("title", ""),
        "created": metadata.get("created"),
        "tags": _raw_tags(raw_front_matter),
        "body": body,
        "missing": find_missing_references(body),
        "links": find_wiki_links(body),
        "error": error,
    }


# ============================================================================
# 2: AUDIT AN ENTIRE EXPORT TREE
# ============================================================================


def iter_exported_notes(export_root: Union[str, Path]) -> List[Path]:
    """Return every note file under export_root, skipping the resources directory."""
    root = Path(export_root)
    resources = root / RESOURCES_DIR_NAME
    return sorted(
        path
        for path in root.rglob("*.md")
        if path.is_file() and resources not in path.parents
    )


def audit_export(export_root: Union[str, Path]) -> Dict[str, Any]:
    """
    Report unresolved references across an export tree.

    Returns:
        notes               number of notes found
        missing_references  {note_id: [resource ids]} for :/missing- sentinels
        dangling_links      {note_id: [note ids]} for wiki-links whose target
                            is not among the exported notes
        unreadable          {note_id: YAML error} for notes whose front matter
                            could not be parsed

    Raises:
        FileNotFoundError if export_root is not a directory.
    """
    root = Path(export_root)
    if not root.is_dir():
        raise FileNotFoundError(f"Export directory not found: {root}")

    notes = [load_exported_note(path) for path in iter_exported_notes(root)]
    known_ids = {note["id"] for note in notes}

    missing: Dict[str, List[str]] = {}
    dangling: Dict[str, List[str]] = {}
    unreadable: Dict[str, str] = {}

    for note in notes:
        if note["error"]:
            unreadable[note["id"]] = note["error"]

        if note["missing"]:
            missing[note["id"]] = note["missing"]

        unknown = [target for target in note["links"] if target not in known_ids]
        if unknown:
            dangling[note["id"]] = unknown

    return {
        "notes": len(notes),
        "missing_references": missing,
        "dangling_links": dangling,
        "unreadable": unreadable,
    }
