"""Rewrite wiki links to the shortest unambiguous note name."""

from .links import extract_links, format_link
from .model import Document, Link, RewriteResult, Settings
from .ports import DocumentStore
from .uniqueness import unique_names


def should_optimize_alias(link: Link, settings: Settings) -> bool:
    """True when the alias adds nothing over the bare note name."""
    if not settings.optimize_when_alias_matches_note_name:
        return False
    return link.alias is None or link.alias == "" or link.alias == link.target_name


def shorten_link(link: Link, settings: Settings) -> str:
    """Bracketed replacement for a link whose target name is unique."""
    if should_optimize_alias(link, settings):
        return format_link(link.target_name)
    return format_link(link.target_name, link.alias)


def rewrite_links(
    text: str,
    unique: set[str],
    settings: Settings,
    links: dict[str, Link] | None = None,
) -> tuple[str, list[tuple[str, str]]]:
    """Rewrite every link whose target name is globally unique.

    Links to ambiguous or unknown names are left as written.

    Args:
        text: Document text
        unique: Short names held by exactly one document
        settings: Shared settings
        links: Links already extracted from text, if any

    Returns:
        (new_text, [(old_bracketed, new_bracketed), ...])
    """
    if links is None:
        links = extract_links(text)

    result = text
    rewritten = []

    for link in links.values():
        if link.target_name not in unique:
            continue

        old = link.bracketed
        new = shorten_link(link, settings)
        if new == old:
            continue

        result = result.replace(old, new)
        rewritten.append((old, new))

    return result, rewritten


class LinkRewriter:
    def __init__(self, store: DocumentStore, settings: Settings):
        self.store = store
        self.settings = settings

    def optimize(
        self,
        doc: Document,
        dry_run: bool = False,
        unique: set[str] | None = None,
    ) -> RewriteResult:
        """
        One rewrite pass over doc. The text is written back only when it
        actually changed.
        """
        original = self.store.read_text(doc)
        links = extract_links(original)

        if not links:
            return RewriteResult(
                path=doc.path,
                changed=False,
                links=0,
                rewritten_text=original,
            )

        if unique is None:
            unique = unique_names(self.store.list_documents())

        text, rewritten = rewrite_links(original, unique, self.settings, links)
        changed = text != original

        if changed and not dry_run:
            self.store.write_text(doc, text)

        return RewriteResult(
            path=doc.path,
            changed=changed,
            links=len(links),
            rewritten=rewritten,
            rewritten_text=text,
        )

    def optimize_all(self, dry_run: bool = False) -> list[RewriteResult]:
        documents = list(self.store.list_documents())
        unique = unique_names(documents)
        return [self.optimize(doc, dry_run=dry_run, unique=unique) for doc in documents]
