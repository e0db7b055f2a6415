"""Display-only shortening of rendered internal links."""

from bs4 import BeautifulSoup, Tag

from .core.model import Settings

INTERNAL_LINK_SELECTOR = "a.internal-link[data-href]"


def short_label(href: str, target_file_name: str) -> str:
    """Visible text for a link to href.

    Examples:
        >>> short_label("Projects/X/README", "README")
        'X/'
        >>> short_label("Projects/X/Intro", "README")
        'Intro'
    """
    segments = href.split("/")
    if href.endswith(f"/{target_file_name}"):
        # The folder note stands in for its parent folder
        return segments[-2] + "/"
    return segments[-1]


def shorten_rendered_links(root: BeautifulSoup | Tag, settings: Settings) -> int:
    """Set the text of every rendered internal link to its short label.

    Only visible text changes; data-href and stored documents are untouched.

    Returns:
        Number of link elements updated
    """
    count = 0
    for el in root.select(INTERNAL_LINK_SELECTOR):
        href = el.get("data-href")
        if not href:
            continue
        el.string = short_label(str(href), settings.target_file_name_for_short_display)
        count += 1
    return count


def shorten_html(html: str, settings: Settings) -> str:
    soup = BeautifulSoup(html, "html.parser")
    shorten_rendered_links(soup, settings)
    return str(soup)
