"""
Reference rewriter: Joplin ":/<id>" links → Zettlr conventions.

Joplin references resources and other notes by a 32-character hex id:

    ![alt](:/<id>)    embedded image
    [text](:/<id>)    attachment, or a link to another note

After export, notes live in a folder tree and resources in one shared
resources/ directory, so each reference is rewritten:

    ![alt](:/<id>)  →  ![alt](<rel>/<filename>)     resource known
                    →  ![alt](:/missing-<id>)       resource unknown
    [text](:/<id>)  →  [text](<rel>/<filename>)     resource known (attachment)
                    →  [[<id>|<text>]]              otherwise (note link)

The image pattern is a "!"-prefixed variant of the plain pattern, so the
image pass must run first. The 32-hex id is the only thing that marks a link
as internal; every other link is left alone.
"""

import re
from typing import List, Mapping

ID_PATTERN = r"[a-f0-9]{32}"

IMAGE_LINK_RE = re.compile(r"!\[([^\]]*)\]\(:/(" + ID_PATTERN + r")\)")
PLAIN_LINK_RE = re.compile(r"\[([^\]]*)\]\(:/(" + ID_PATTERN + r")\)")

MISSING_PREFIX = ":/missing-"
MISSING_REF_RE = re.compile(r"\(" + re.escape(MISSING_PREFIX) + r"(" + ID_PATTERN + r")\)")
WIKI_LINK_RE = re.compile(r"\[\[(" + ID_PATTERN + r")\|([^\]]*)\]\]")


def convert_links(body: str, resource_map: Mapping[str, str], resources_rel_path: str) -> str:
    """
    Rewrite every internal reference in a note body.

    Parameters
    ----------
    body : str
        Raw note body (heading already injected).
    resource_map : Mapping[str, str]
        Resource id → destination filename, complete for the whole run.
    resources_rel_path : str
        Path from the note's directory to the shared resources directory,
        e.g. "resources" or "../resources".
    """

    def _image(match: "re.Match[str]") -> str:
        alt, resource_id = match.group(1), match.group(2)
        filename = resource_map.get(resource_id)
        if filename:
            return f"![{alt}]({resources_rel_path}/{filename})"
        return f"![{alt}]({MISSING_PREFIX}{resource_id})"

    def _plain(match: "re.Match[str]") -> str:
        text, item_id = match.group(1), match.group(2)
        filename = resource_map.get(item_id)
        if filename:
            return f"[{text}]({resources_rel_path}/{filename})"
        return f"[[{item_id}|{text}]]"

    body = IMAGE_LINK_RE.sub(_image, body)
    body = PLAIN_LINK_RE.sub(_plain, body)
    return body


def find_missing_references(text: str) -> List[str]:
    """Return the ids of every ":/missing-<id>" sentinel, in document order."""
    return MISSING_REF_RE.findall(text)


def find_wiki_links(text: str) -> List[str]:
    """Return the target ids of every [[<id>|text]] wiki-link, in document order."""
    return [target for target, _text in WIKI_LINK_RE.findall(text)]
