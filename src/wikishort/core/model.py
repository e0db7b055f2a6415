from __future__ import annotations
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Document:
    basename: str  # file stem: no folder, no extension
    path: str  # vault-relative POSIX path, e.g. "Projects/X/README.md"


@dataclass(frozen=True)
class Link:
    raw_inner: str  # exact text between "[[" and "]]"
    target_name: str  # last path segment of the target
    alias: str | None = None  # None when no "|" was present

    @property
    def bracketed(self) -> str:
        return f"[[{self.raw_inner}]]"


@dataclass
class RewriteResult:
    """Outcome of one rewrite pass over a single document."""

    path: str
    changed: bool
    links: int  # distinct links extracted
    rewritten: list[tuple[str, str]] = field(default_factory=list)
    rewritten_text: str = ""


@dataclass
class Settings:
    """Shared, mutable user settings; one writer, many readers."""

    optimize_when_alias_matches_note_name: bool = True
    target_file_name_for_short_display: str = "README"
