"""Internal link and anchor validation, plus malformed link syntax."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..content.markdown import slugify
from ..models import Issue, Location
from .base import resolve_path, split_target

if TYPE_CHECKING:
    from ..content.models import ParsedDocument, ParsedSourceFile

_MAX_SUGGESTED_HEADINGS = 5


def _heading_slugs(doc: ParsedDocument) -> list[str]:
    """Slugs in document order, without repeats."""
    seen: dict[str, None] = {}
    for heading in doc.headings:
        seen.setdefault(slugify(heading.text), None)
    return list(seen)


def path_exists(path: str, all_paths: frozenset[str]) -> bool:
    """A file, or a directory that contains at least one enumerated file."""
    if path == "" or path in all_paths:
        return True
    prefix = path.rstrip("/") + "/"
    return any(p.startswith(prefix) for p in all_paths)


class LinkValidator:
    """Broken internal links and anchors.

    Anchor-only links are checked against the linking document itself; other
    internal links must resolve to an enumerated path, and a fragment must
    match a heading slug of the target document.
    """

    name = "links"

    def detect(
        self,
        documents: list[ParsedDocument],
        source_files: list[ParsedSourceFile],
        all_paths: frozenset[str],
    ) -> list[Issue]:
        by_path = {doc.path: doc for doc in documents}
        issues: list[Issue] = []

        for doc in documents:
            for link in doc.links:
                if not link.is_internal or not link.target:
                    continue

                link_path, anchor = split_target(link.target)

                if not link_path:
                    if anchor and slugify(anchor) not in doc.slugs:
                        issues.append(
                            Issue(
                                type="broken-link",
                                severity="medium",
                                message=f"Broken anchor link: #{anchor} does not exist in this file",
                                location=Location(doc.path, link.line),
                                context=f'Link text: "{link.text}"',
                                suggestion=f"Available headings: {', '.join(_heading_slugs(doc))}",
                            )
                        )
                    continue

                resolved = resolve_path(doc.directory, link_path)
                if not path_exists(resolved, all_paths):
                    issues.append(
                        Issue(
                            type="broken-link",
                            severity="high",
                            message="Broken link: target file does not exist",
                            location=Location(doc.path, link.line),
                            context=f"Link: [{link.text}]({link.target})",
                            suggestion=f"Check if the file path is correct: {link_path}",
                        )
                    )
                    continue

                target_doc = by_path.get(resolved)
                if anchor and target_doc is not None and slugify(anchor) not in target_doc.slugs:
                    slugs = _heading_slugs(target_doc)
                    if slugs:
                        suggestion = (
                            "Available headings in target: "
                            + ", ".join(slugs[:_MAX_SUGGESTED_HEADINGS])
                        )
                    else:
                        suggestion = "Target file has no headings"
                    issues.append(
                        Issue(
                            type="broken-link",
                            severity="medium",
                            message=f"Broken anchor: heading #{anchor} does not exist in target file",
                            location=Location(doc.path, link.line),
                            context=f"Link: [{link.text}]({link.target})",
                            suggestion=suggestion,
                        )
                    )

        return issues


class MalformedLinkDetector:
    """Links with an empty target or empty text."""

    name = "malformed-links"

    def detect(
        self,
        documents: list[ParsedDocument],
        source_files: list[ParsedSourceFile],
        all_paths: frozenset[str],
    ) -> list[Issue]:
        issues: list[Issue] = []
        for doc in documents:
            for link in doc.links:
                if not link.target.strip():
                    issues.append(
                        Issue(
                            type="malformed-link",
                            severity="high",
                            message="Empty link URL",
                            location=Location(doc.path, link.line),
                            context=f"Link text: {link.text}",
                            suggestion="Add a target URL or path to the link",
                        )
                    )
                elif not link.text.strip():
                    issues.append(
                        Issue(
                            type="malformed-link",
                            severity="low",
                            message="Link has no text",
                            location=Location(doc.path, link.line),
                            context=f"URL: {link.target}",
                            suggestion="Add descriptive text to the link for accessibility",
                        )
                    )
        return issues
