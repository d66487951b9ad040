"""
File enumeration for docdelta.

Walks a project tree, prunes conventional build and VCS directories, and
yields one SourceFile per file with a lazily evaluated ``read()``.
"""

import fnmatch
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from ..config import AnalysisConfig
from ..exceptions import FileAccessError, InvalidPathError
from ..logging_config import get_logger

logger = get_logger(__name__)

FileKind = Literal["markdown", "source", "image", "other"]


@dataclass(frozen=True)
class SourceFile:
    """One enumerated file. ``path`` is relative to the root, POSIX style."""

    path: str
    abs_path: Path
    kind: FileKind
    size: int = 0

    def read(self, encoding: str = "utf-8") -> str:
        """Read the file as text.

        Raises:
            FileAccessError: If the file cannot be read or decoded
        """
        try:
            with open(self.abs_path, encoding=encoding) as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise FileAccessError(self.path, f"Encoding error: {e}")
        except OSError as e:
            raise FileAccessError(self.path, f"OS error: {e}")


def should_skip_file(rel_path: str, exclude_patterns: list[str]) -> bool:
    """True if ``rel_path`` (or its file name) matches any exclude glob."""
    name = rel_path.rsplit("/", 1)[-1]
    for pattern in exclude_patterns:
        if fnmatch.fnmatch(rel_path, pattern) or fnmatch.fnmatch(name, pattern):
            return True
    return False


class FileEnumerator:
    """Enumerate documentation, source and image files under a root."""

    def __init__(self, root: Path, config: AnalysisConfig) -> None:
        root = Path(root)
        if not root.exists():
            raise InvalidPathError(root, "Path does not exist")
        if not root.is_dir():
            raise InvalidPathError(root, "Path is not a directory")
        self.root = root.resolve()
        self.config = config
        self._markdown = {e.lower() for e in config.markdown_extensions}
        self._source = {e.lower() for e in config.source_extensions}
        self._images = {e.lower() for e in config.image_extensions}
        self._exclude_dirs = set(config.exclude_dirs)

    def classify(self, rel_path: str) -> FileKind:
        suffix = os.path.splitext(rel_path)[1].lower()
        if suffix in self._markdown:
            return "markdown"
        if suffix in self._source:
            return "source"
        if suffix in self._images:
            return "image"
        return "other"

    def __iter__(self) -> Iterator[SourceFile]:
        return self.discover()

    def discover(self) -> Iterator[SourceFile]:
        """Yield files in a stable (sorted) order.

        Files over ``max_file_size_mb`` and files matching ``exclude_patterns``
        are not yielded; enumeration stops after ``max_files``.
        """
        count = 0
        limit = self.config.max_files
        max_size = self.config.max_file_size_bytes

        for dirpath, dirnames, filenames in os.walk(self.root, followlinks=False):
            dirnames[:] = sorted(d for d in dirnames if d not in self._exclude_dirs)

            rel_dir = os.path.relpath(dirpath, self.root)
            for filename in sorted(filenames):
                rel_path = filename if rel_dir == "." else f"{rel_dir}/{filename}"
                rel_path = rel_path.replace(os.sep, "/")

                if should_skip_file(rel_path, self.config.exclude_patterns):
                    continue

                abs_path = Path(dirpath) / filename
                if abs_path.is_symlink():
                    continue

                try:
                    size = abs_path.stat().st_size
                except OSError as e:
                    logger.warning(f"Skipping {rel_path}: {e}")
                    continue

                if size > max_size:
                    logger.debug(f"Skipping {rel_path}: {size} bytes exceeds size limit")
                    continue

                count += 1
                if count > limit:
                    logger.warning(f"File limit of {limit} reached; remaining files are ignored")
                    return

                yield SourceFile(path=rel_path, abs_path=abs_path, kind=self.classify(rel_path), size=size)
