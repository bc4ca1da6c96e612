"""
Paginated tag retrieval.

The host exposes a note's tags one page at a time, shaped like Joplin's data
API: {"items": [{"title": ...}, ...], "has_more": bool}. fetch_note_tags()
walks the pages in order and returns the tag titles exactly as delivered.
Source order is kept and duplicates are not removed.
"""

from typing import List

from zexport.types import ItemSource


def fetch_note_tags(source: ItemSource, note_id: str) -> List[str]:
    """
    Collect every tag title attached to a note.

    Requests page 1, 2, ... until a page reports has_more=False. A page with
    no items also ends the walk, so a misbehaving source cannot loop forever.
    """
    tags: List[str] = []
    page = 1

    while True:
        result = source.get_note_tags(note_id, page)
        items = result.get("items") or []

        for tag in items:
            title = tag.get("title")
            if title is not None:
                tags.append(str(title))

        if not result.get("has_more") or not items:
            break
        page += 1

    return tags
