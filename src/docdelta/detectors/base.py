"""Detector protocol and shared path helpers."""

from __future__ import annotations

import posixpath
from typing import TYPE_CHECKING, Protocol
from urllib.parse import unquote

if TYPE_CHECKING:
    from ..content.models import ParsedDocument, ParsedSourceFile
    from ..models import Issue


class Detector(Protocol):
    """Detectors read the content model (NEVER write) and return issues.

    Output order must be stable: document order, then line order.
    """

    name: str

    def detect(
        self,
        documents: list[ParsedDocument],
        source_files: list[ParsedSourceFile],
        all_paths: frozenset[str],
    ) -> list[Issue]: ...


def split_target(target: str) -> tuple[str, str]:
    """``docs/a.md#setup`` -> ``("docs/a.md", "setup")``; query strings dropped."""
    path, _, anchor = target.partition("#")
    path = path.split("?", 1)[0]
    return path, anchor


def resolve_path(doc_dir: str, target_path: str) -> str:
    """Resolve a link path against the linking document's directory.

    A leading ``/`` means the project root. The result is normalized and
    relative to the root; paths escaping the root keep their ``..`` prefix.
    """
    target_path = unquote(target_path).replace("\\", "/")
    if target_path.startswith("/"):
        joined = target_path.lstrip("/")
    else:
        joined = posixpath.join(doc_dir, target_path) if doc_dir else target_path
    normalized = posixpath.normpath(joined)
    return "" if normalized == "." else normalized
