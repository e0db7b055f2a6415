from pathlib import Path
from typing import Iterable

from ..core.model import Document
from ..core.ports import DocumentStore

NOTE_SUFFIX = ".md"
TMP_SUFFIX = ".md.tmp"


def is_hidden(rel: Path) -> bool:
    return any(part.startswith(".") for part in rel.parts)


class FsDocumentStore(DocumentStore):
    """Markdown files anywhere below a vault root."""

    def __init__(self, root: Path):
        self.root = root

    def _path(self, doc: Document) -> Path:
        return self.root / doc.path

    def document_for(self, rel: Path) -> Document:
        """Document for a vault-relative path."""
        return Document(basename=rel.stem, path=rel.as_posix())

    def list_documents(self) -> Iterable[Document]:
        if not self.root.exists():
            return []
        docs = []
        for p in self.root.rglob(f"*{NOTE_SUFFIX}"):
            rel = p.relative_to(self.root)
            if is_hidden(rel) or not p.is_file():
                continue
            docs.append(self.document_for(rel))
        return sorted(docs, key=lambda d: d.path)

    def read_text(self, doc: Document) -> str:
        return self._path(doc).read_text(encoding="utf-8")

    def write_text(self, doc: Document, text: str) -> None:
        file_path = self._path(doc)
        # Atomic write using temp file
        tmp_path = file_path.with_suffix(TMP_SUFFIX)
        try:
            tmp_path.write_text(text, encoding="utf-8")
            tmp_path.replace(file_path)
        except Exception:
            # Clean up temp file on error
            if tmp_path.exists():
                tmp_path.unlink()
            raise
