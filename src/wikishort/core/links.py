"""Wiki link extraction and formatting."""

from .model import Link

OPEN = "[["
CLOSE = "]]"


def parse_link(inner: str) -> Link:
    """Build a Link from the text between the brackets.

    Handles:
    - Note
    - Folder/Note
    - Folder/Note|Alias
    - Folder/Note|  (empty alias is kept as "")
    """
    path, sep, alias = inner.partition("|")
    # Folder segments only locate the note; they are not kept
    target_name = path.split("/")[-1]
    return Link(
        raw_inner=inner,
        target_name=target_name,
        alias=alias if sep else None,
    )


def extract_links(text: str) -> dict[str, Link]:
    """Scan text for [[...]] links.

    Links are keyed by their raw inner text, so repeated identical links are
    recorded once. An opening "[[" without a later "]]" ends the scan.

    Args:
        text: Document text

    Returns:
        Mapping of raw inner text to Link, in order of first occurrence
    """
    links: dict[str, Link] = {}
    i = 0

    while i < len(text):
        start = text.find(OPEN, i)
        if start == -1:
            break

        end = text.find(CLOSE, start)
        if end == -1:
            break

        inner = text[start + len(OPEN):end]
        if inner not in links:
            links[inner] = parse_link(inner)

        i = end + len(CLOSE)

    return links


def format_link(target_name: str, alias: str | None = None) -> str:
    """Render a well-formed [[target]] or [[target|alias]] link."""
    if alias is None:
        return f"{OPEN}{target_name}{CLOSE}"
    return f"{OPEN}{target_name}|{alias}{CLOSE}"
