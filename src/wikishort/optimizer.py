"""Wiring of the rewriter and display shortener behind the host hooks."""

from typing import Any

from .core.model import Document, RewriteResult
from .core.ports import DocumentStore, LinkOptimizerHooks
from .core.rewriter import LinkRewriter
from .display import shorten_rendered_links
from .core.model import Settings


class WikiLinkOptimizer(LinkOptimizerHooks):
    def __init__(self, store: DocumentStore, settings: Settings):
        self.store = store
        self.settings = settings
        self.rewriter = LinkRewriter(store, settings)

    def on_document_changed(self, doc: Document) -> RewriteResult:
        return self.rewriter.optimize(doc)

    def on_render_pass(self, elements: Any) -> None:
        shorten_rendered_links(elements, self.settings)
