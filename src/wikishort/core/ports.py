from typing import Any, Iterable, Protocol

from .model import Document


class DocumentStore(Protocol):
    """
    Host-provided document collection. Read and write failures raise OSError
    and are not handled by the core.
    """

    def list_documents(self) -> Iterable[Document]:
        pass

    def read_text(self, doc: Document) -> str:
        pass

    def write_text(self, doc: Document, text: str) -> None:
        pass


class LinkOptimizerHooks(Protocol):
    """
    The two reactions an adapter binds to host events: a document was
    modified, and a rendered element tree is about to be displayed.
    """

    def on_document_changed(self, doc: Document) -> Any:
        pass

    def on_render_pass(self, elements: Any) -> None:
        pass
