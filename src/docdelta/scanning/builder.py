"""Bounded-concurrency construction of the ContentModel."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, Optional, Union

from ..cache import ParseCache
from ..content.markdown import content_hash, parse_markdown
from ..content.models import ContentModel, ParsedDocument, ParsedSourceFile
from ..content.source import parse_source
from ..exceptions import FileAccessError, ParsingError
from ..logging_config import get_logger
from .discovery import SourceFile

logger = get_logger(__name__)

Parsed = Union[ParsedDocument, ParsedSourceFile]


class ContentModelBuilder:
    """Read and parse files with at most ``max_workers`` reads in flight.

    Each task owns only its own result, so nothing is shared between
    workers. Unreadable or unparsable files are skipped and counted.
    """

    def __init__(self, max_workers: int = 64, cache: Optional[ParseCache] = None) -> None:
        self.max_workers = max(1, max_workers)
        self.cache = cache

    def _parse_one(self, file: SourceFile) -> Parsed:
        text = file.read()
        digest = content_hash(text)

        if file.kind == "markdown":
            parse = lambda: parse_markdown(file.path, text)  # noqa: E731
        else:
            parse = lambda: parse_source(file.path, text)  # noqa: E731

        try:
            if self.cache is not None:
                return self.cache.get_or_parse(file.kind, file.path, digest, parse)
            return parse()
        except Exception as e:
            raise ParsingError(file.path, file.kind, str(e))

    def build(self, files: Iterable[SourceFile]) -> ContentModel:
        all_files = list(files)
        targets = [f for f in all_files if f.kind in ("markdown", "source")]

        documents: list[ParsedDocument] = []
        sources: list[ParsedSourceFile] = []
        skipped = 0

        with ThreadPoolExecutor(max_workers=min(self.max_workers, max(1, len(targets)))) as executor:
            futures = {executor.submit(self._parse_one, f): f for f in targets}
            for future in as_completed(futures):
                file = futures[future]
                try:
                    parsed = future.result()
                except (FileAccessError, ParsingError) as e:
                    skipped += 1
                    logger.warning(f"Skipping {file.path}: {e}")
                    continue

                if isinstance(parsed, ParsedDocument):
                    documents.append(parsed)
                else:
                    sources.append(parsed)

        documents.sort(key=lambda d: d.path)
        sources.sort(key=lambda s: s.path)

        logger.info(
            f"Parsed {len(documents)} documents and {len(sources)} source files "
            f"({skipped} skipped)"
        )

        return ContentModel(
            documents=documents,
            source_files=sources,
            all_paths=frozenset(f.path for f in all_files),
            total_files=len(targets),
            skipped_files=skipped,
        )


def build_content_model(
    files: Iterable[SourceFile],
    max_workers: int = 64,
    cache: Optional[ParseCache] = None,
) -> ContentModel:
    return ContentModelBuilder(max_workers=max_workers, cache=cache).build(files)
