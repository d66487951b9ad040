"""Line-oriented markdown parsing: links, images, headings and slugs."""

import hashlib
import re
from typing import Dict, List, Optional, Tuple

from .models import Heading, Image, Link, ParsedDocument

_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_ATX_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?[ \t]*$")
_ATX_CLOSE_RE = re.compile(r"(?:^|[ \t]+)#+[ \t]*$")
_SETEXT_RE = re.compile(r"^ {0,3}(=+|-+)[ \t]*$")
_LIST_OR_QUOTE_RE = re.compile(r"^ {0,3}(?:[-*+>]|\d+[.)])(?:\s|$)")
_INLINE_CODE_RE = re.compile(r"(`+)(.+?)\1")

_TARGET = r"\(\s*(<[^>]*>|[^)\s]*)(?:\s+(?:\"[^\"]*\"|'[^']*'|\([^)]*\)))?\s*\)"
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]" + _TARGET)
_LINK_RE = re.compile(r"\[([^\]]*)\]" + _TARGET)
_REF_LINK_RE = re.compile(r"\[([^\]]+)\]\[([^\]]*)\]")
_REF_DEF_RE = re.compile(r"^ {0,3}\[([^\]]+)\]:\s*<?([^\s>]+)>?(?:\s+.*)?$")
_AUTOLINK_RE = re.compile(r"<((?:https?|ftp)://[^>\s]+|mailto:[^>\s]+)>")

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
_MARKUP_RE = re.compile(r"[*`~]")


def slugify(text: str) -> str:
    """GitHub-style anchor slug for a heading.

    >>> slugify("Getting Started!")
    'getting-started'
    """
    slug = text.strip().lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug


def is_internal_target(target: str) -> bool:
    """False for ``scheme:`` URLs and protocol-relative ``//host`` targets."""
    if target.startswith("//"):
        return False
    return _SCHEME_RE.match(target) is None


def content_hash(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def _mask_inline_code(line: str) -> str:
    return _INLINE_CODE_RE.sub(lambda m: " " * len(m.group(0)), line)


def _strip_markup(text: str) -> str:
    text = _IMAGE_RE.sub(lambda m: m.group(1), text)
    text = _LINK_RE.sub(lambda m: m.group(1), text)
    return _MARKUP_RE.sub("", text).strip()


def _clean_target(raw: str) -> str:
    if raw.startswith("<") and raw.endswith(">"):
        return raw[1:-1].strip()
    return raw


def prose_lines(lines: List[str]) -> List[Optional[str]]:
    """Lines outside fenced code blocks; fenced lines become None."""
    result: List[Optional[str]] = []
    fence: Optional[str] = None
    for line in lines:
        match = _FENCE_RE.match(line)
        if fence is None:
            if match:
                fence = match.group(1)
                result.append(None)
            else:
                result.append(line)
        else:
            if match and match.group(1)[0] == fence[0] and len(match.group(1)) >= len(fence):
                fence = None
            result.append(None)
    return result


def _reference_definitions(prose: List[Optional[str]]) -> Dict[str, str]:
    defs: Dict[str, str] = {}
    for line in prose:
        if line is None:
            continue
        match = _REF_DEF_RE.match(line)
        if match:
            # first definition wins, as in CommonMark
            defs.setdefault(match.group(1).strip().lower(), match.group(2))
    return defs


def _parse_headings(prose: List[Optional[str]]) -> List[Heading]:
    headings: List[Heading] = []
    previous: Optional[str] = None
    previous_is_heading = False
    for idx, line in enumerate(prose):
        if line is None:
            previous, previous_is_heading = None, False
            continue

        atx = _ATX_RE.match(line)
        if atx:
            text = _ATX_CLOSE_RE.sub("", atx.group(2) or "")
            headings.append(Heading(level=len(atx.group(1)), text=_strip_markup(text), line=idx + 1))
            previous, previous_is_heading = line, True
            continue

        setext = _SETEXT_RE.match(line)
        if (
            setext
            and previous is not None
            and previous.strip()
            and not previous_is_heading
            and not _LIST_OR_QUOTE_RE.match(previous)
            and not _REF_DEF_RE.match(previous)
        ):
            level = 1 if setext.group(1).startswith("=") else 2
            headings.append(Heading(level=level, text=_strip_markup(previous), line=idx))
            previous, previous_is_heading = line, True
            continue

        previous, previous_is_heading = line, False
    return headings


def _parse_line_links(
    line: str, line_no: int, defs: Dict[str, str]
) -> Tuple[List[Tuple[int, Link]], List[Image]]:
    found: List[Tuple[int, Link]] = []
    images: List[Image] = []
    masked = _mask_inline_code(line)

    for match in _IMAGE_RE.finditer(masked):
        images.append(Image(alt=match.group(1).strip(), target=_clean_target(match.group(2)), line=line_no))

    # images nested in link text (badges) become their alt text
    without_images = _IMAGE_RE.sub(lambda m: m.group(1).ljust(len(m.group(0))), masked)

    for match in _LINK_RE.finditer(without_images):
        target = _clean_target(match.group(2))
        found.append(
            (
                match.start(),
                Link(
                    text=_strip_markup(match.group(1)),
                    target=target,
                    line=line_no,
                    is_internal=is_internal_target(target),
                ),
            )
        )

    for match in _REF_LINK_RE.finditer(without_images):
        label = (match.group(2) or match.group(1)).strip().lower()
        target = defs.get(label)
        if target is None:
            continue
        found.append(
            (
                match.start(),
                Link(
                    text=_strip_markup(match.group(1)),
                    target=target,
                    line=line_no,
                    is_internal=is_internal_target(target),
                ),
            )
        )

    for match in _AUTOLINK_RE.finditer(masked):
        target = match.group(1)
        found.append((match.start(), Link(text=target, target=target, line=line_no, is_internal=False)))

    return found, images


def parse_markdown(path: str, text: str) -> ParsedDocument:
    """Parse ``text`` (the content of ``path``) into a ParsedDocument.

    Fenced code blocks contribute neither links nor headings, and inline
    code spans are ignored when looking for links.
    """
    lines = text.split("\n")
    prose = prose_lines(lines)
    defs = _reference_definitions(prose)

    links: List[Link] = []
    images: List[Image] = []
    for idx, line in enumerate(prose):
        if line is None or _REF_DEF_RE.match(line):
            continue
        line_links, line_images = _parse_line_links(line, idx + 1, defs)
        links.extend(link for _, link in sorted(line_links, key=lambda pair: pair[0]))
        images.extend(line_images)

    return ParsedDocument(
        path=path,
        raw_text=text,
        links=links,
        headings=_parse_headings(prose),
        images=images,
        content_hash=content_hash(text),
    )
