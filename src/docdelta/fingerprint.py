"""
Issue fingerprints: cross-run identity for an issue.

A fingerprint hashes ``type::path::normalized message``. Normalization
replaces the parts of a message that drift without the issue changing
(line and column references, quoted file paths, "N files"-style counts),
so the same defect keeps its fingerprint when surrounding text moves.
"""

import hashlib
import re
from typing import Optional

from .models import Issue

FINGERPRINT_LENGTH = 16
PROJECT_ID_LENGTH = 12

_LINE_RE = re.compile(r"\bline\s*\d+", re.IGNORECASE)
_SHORT_LINE_RE = re.compile(r"\bL\d+")
_POSITION_RE = re.compile(r":\d+:\d+")
_COLUMN_RE = re.compile(r"\bcol(umn)?\s*\d+", re.IGNORECASE)
_QUOTED_RE = re.compile(r"(['\"`])([^'\"`]+)(['\"`])")
_COUNT_RE = re.compile(r"\b\d+\s+(files?|links?|issues?)", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")
_EXTENSION_RE = re.compile(r"\.[A-Za-z0-9]{1,8}$")


def _looks_like_path(text: str) -> bool:
    return "/" in text or "\\" in text or _EXTENSION_RE.search(text) is not None


def _replace_quoted(match: "re.Match[str]") -> str:
    if _looks_like_path(match.group(2)):
        return f"{match.group(1)}PATH{match.group(3)}"
    return match.group(0)


def normalize_message(message: str) -> str:
    """Collapse the volatile parts of an issue message.

    Only path-like quoted text is replaced, so ``Inconsistent values for
    "timeout"`` and ``... for "retries"`` stay distinct.

    >>> normalize_message('File "src/lib/foo.ts" not found on line 42')
    'file "path" not found on line n'
    """
    text = _LINE_RE.sub("line N", message)
    text = _SHORT_LINE_RE.sub("LN", text)
    text = _POSITION_RE.sub(":N:N", text)
    text = _COLUMN_RE.sub("col N", text)
    text = _QUOTED_RE.sub(_replace_quoted, text)
    text = _COUNT_RE.sub(lambda m: f"N {m.group(1)}", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip().lower()


def _sha256(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def compute_fingerprint(issue_type: str, path: str, message: str) -> str:
    source = "::".join([issue_type, path, normalize_message(message)])
    return _sha256(source)[:FINGERPRINT_LENGTH]


def fingerprint_issue(issue: Issue) -> str:
    return compute_fingerprint(issue.type, issue.location.path, issue.message)


def project_id(name: str, path: Optional[str] = None) -> str:
    source = f"{name}::{path}" if path else name
    return _sha256(source)[:PROJECT_ID_LENGTH]
