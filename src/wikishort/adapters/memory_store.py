from pathlib import PurePosixPath
from typing import Iterable

from ..core.model import Document
from ..core.ports import DocumentStore


class InMemoryDocumentStore(DocumentStore):
    def __init__(self, texts: dict[str, str] | None = None):
        self.texts: dict[str, str] = dict(texts or {})
        self.writes = 0

    @staticmethod
    def document_for(path: str) -> Document:
        return Document(basename=PurePosixPath(path).stem, path=path)

    def list_documents(self) -> Iterable[Document]:
        return [self.document_for(path) for path in sorted(self.texts)]

    def read_text(self, doc: Document) -> str:
        if doc.path not in self.texts:
            raise FileNotFoundError(doc.path)
        return self.texts[doc.path]

    def write_text(self, doc: Document, text: str) -> None:
        self.texts[doc.path] = text
        self.writes += 1
