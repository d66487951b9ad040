"""Pattern-based export extraction for JavaScript/TypeScript and Python."""

import re
from pathlib import PurePosixPath
from typing import List, Tuple

from .markdown import content_hash
from .models import Export, ParsedSourceFile

LANGUAGES = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
}

# (pattern, kind, name group, is_default)
_JS_PATTERNS: List[Tuple[re.Pattern, str, int, bool]] = [
    (re.compile(r"export\s+(async\s+)?function\s*\*?\s*(\w+)"), "function", 2, False),
    (re.compile(r"export\s+default\s+(async\s+)?function\s*\*?\s*(\w+)?"), "function", 2, True),
    (re.compile(r"export\s+(?:abstract\s+)?class\s+(\w+)"), "class", 1, False),
    (re.compile(r"export\s+default\s+class\s+(\w+)?"), "class", 1, True),
    (re.compile(r"export\s+type\s+(\w+)"), "type", 1, False),
    (re.compile(r"export\s+interface\s+(\w+)"), "interface", 1, False),
    (re.compile(r"export\s+(?:const\s+)?enum\s+(\w+)"), "enum", 1, False),
]
_JS_VAR_RE = re.compile(r"export\s+(const|let|var)\s+(\w+)")
_JS_BRACES_RE = re.compile(r"export\s*(?:type\s*)?\{([^}]+)\}")
_JS_DEFAULT_IDENT_RE = re.compile(r"export\s+default\s+(\w+)\s*(?:;|\n|$)")
_JS_NOT_IDENT = {"function", "class", "async", "abstract"}

_PY_DEF_RE = re.compile(r"^(?:async\s+)?def\s+(\w+)", re.MULTILINE)
_PY_CLASS_RE = re.compile(r"^class\s+(\w+)", re.MULTILINE)
_PY_CONST_RE = re.compile(r"^([A-Z][A-Z0-9_]*)\s*(?::[^=\n]+)?=(?!=)", re.MULTILINE)
_PY_ALL_RE = re.compile(r"^__all__\s*(?::[^=\n]+)?=\s*[\[(]([^\])]*)[\])]", re.MULTILINE)
_PY_STRING_RE = re.compile(r"[\"'](\w+)[\"']")


class _LineIndex:
    """Maps character offsets to 1-based line numbers."""

    def __init__(self, text: str) -> None:
        self._starts = [0]
        for idx, char in enumerate(text):
            if char == "\n":
                self._starts.append(idx + 1)

    def line_of(self, offset: int) -> int:
        lo, hi = 0, len(self._starts) - 1
        while lo < hi:
            mid = (lo + hi + 1) // 2
            if self._starts[mid] <= offset:
                lo = mid
            else:
                hi = mid - 1
        return lo + 1


def _extract_js(text: str) -> List[Export]:
    index = _LineIndex(text)
    found: List[Export] = []

    for pattern, kind, group, is_default in _JS_PATTERNS:
        for match in pattern.finditer(text):
            name = match.group(group) or "default"
            found.append(Export(name=name, kind=kind, line=index.line_of(match.start()), is_default=is_default))

    for match in _JS_VAR_RE.finditer(text):
        if match.group(2) == "enum":
            continue
        kind = "const" if match.group(1) == "const" else "variable"
        found.append(Export(name=match.group(2), kind=kind, line=index.line_of(match.start())))

    for match in _JS_BRACES_RE.finditer(text):
        line = index.line_of(match.start())
        for part in match.group(1).split(","):
            name = re.split(r"\s+as\s+", part.strip())[0].strip()
            if name.startswith("type "):
                name = name[5:].strip()
            if name and re.fullmatch(r"\w+", name):
                found.append(Export(name=name, kind="variable", line=line))

    if not any(e.is_default for e in found):
        for match in _JS_DEFAULT_IDENT_RE.finditer(text):
            if match.group(1) in _JS_NOT_IDENT:
                continue
            found.append(
                Export(name=match.group(1), kind="variable", line=index.line_of(match.start()), is_default=True)
            )
            break

    return found


def _extract_python(text: str) -> List[Export]:
    index = _LineIndex(text)
    found: List[Export] = []

    for match in _PY_DEF_RE.finditer(text):
        found.append(Export(name=match.group(1), kind="function", line=index.line_of(match.start())))
    for match in _PY_CLASS_RE.finditer(text):
        found.append(Export(name=match.group(1), kind="class", line=index.line_of(match.start())))
    for match in _PY_CONST_RE.finditer(text):
        found.append(Export(name=match.group(1), kind="const", line=index.line_of(match.start())))

    known = {e.name for e in found}
    for match in _PY_ALL_RE.finditer(text):
        line = index.line_of(match.start())
        for name in _PY_STRING_RE.findall(match.group(1)):
            if name not in known:
                found.append(Export(name=name, kind="variable", line=line))
                known.add(name)

    return found


def _normalize(exports: List[Export]) -> List[Export]:
    """Stable order, one entry per name."""
    seen = set()
    result: List[Export] = []
    for export in sorted(exports, key=lambda e: (e.line, e.name, e.kind)):
        if export.name in seen:
            continue
        seen.add(export.name)
        result.append(export)
    return result


def language_for(path: str) -> str:
    return LANGUAGES.get(PurePosixPath(path).suffix.lower(), "unknown")


def extract_exports(path: str, text: str) -> List[Export]:
    """Exported symbols of a source file; unknown languages yield nothing."""
    language = language_for(path)
    if language in ("javascript", "typescript"):
        return _normalize(_extract_js(text))
    if language == "python":
        return _normalize(_extract_python(text))
    return []


def parse_source(path: str, text: str) -> ParsedSourceFile:
    return ParsedSourceFile(
        path=path,
        exports=extract_exports(path, text),
        language=language_for(path),
        content_hash=content_hash(text),
    )
