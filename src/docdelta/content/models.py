"""Content model: normalized views of documentation and source files.

Detectors never touch the filesystem; they read these records only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from pathlib import PurePosixPath
from typing import Literal, Optional

ExportKind = Literal["function", "class", "type", "interface", "const", "variable", "enum"]


@dataclass(frozen=True)
class Link:
    text: str
    target: str
    line: int
    is_internal: bool


@dataclass(frozen=True)
class Heading:
    level: int  # 1-6
    text: str
    line: int


@dataclass(frozen=True)
class Image:
    alt: str
    target: str
    line: int


@dataclass(frozen=True)
class Export:
    name: str
    kind: ExportKind
    line: int
    is_default: bool = False


@dataclass
class ParsedDocument:
    """A markdown file reduced to the parts the detectors care about.

    ``path`` is always the POSIX-style path relative to the project root.
    """

    path: str
    raw_text: str
    links: list[Link] = field(default_factory=list)
    headings: list[Heading] = field(default_factory=list)
    images: list[Image] = field(default_factory=list)
    content_hash: str = ""

    @cached_property
    def slugs(self) -> frozenset[str]:
        """Anchor slugs of every heading, computed once per document."""
        from .markdown import slugify

        return frozenset(slugify(h.text) for h in self.headings)

    @property
    def directory(self) -> str:
        parent = str(PurePosixPath(self.path).parent)
        return "" if parent == "." else parent

    @property
    def lines(self) -> list[str]:
        return self.raw_text.split("\n")

    def __getstate__(self) -> dict:
        # cached slugs are rebuilt on demand after unpickling (disk cache)
        state = dict(self.__dict__)
        state.pop("slugs", None)
        return state

    def __setstate__(self, state: dict) -> None:
        self.__dict__.update(state)


@dataclass
class ParsedSourceFile:
    path: str
    exports: list[Export] = field(default_factory=list)
    language: str = "unknown"
    content_hash: str = ""


@dataclass
class ContentModel:
    """Everything one run knows about the project, built before detection."""

    documents: list[ParsedDocument] = field(default_factory=list)
    source_files: list[ParsedSourceFile] = field(default_factory=list)
    all_paths: frozenset[str] = field(default_factory=frozenset)
    total_files: int = 0
    skipped_files: int = 0

    @property
    def analyzed_files(self) -> int:
        return len(self.documents) + len(self.source_files)

    @property
    def total_links(self) -> int:
        return sum(len(d.links) for d in self.documents)

    def document(self, path: str) -> Optional[ParsedDocument]:
        for doc in self.documents:
            if doc.path == path:
                return doc
        return None
