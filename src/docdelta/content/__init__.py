"""Content model: parsed documentation and source files."""

from .markdown import is_internal_target, parse_markdown, slugify
from .models import (
    ContentModel,
    Export,
    Heading,
    Image,
    Link,
    ParsedDocument,
    ParsedSourceFile,
)
from .source import extract_exports, parse_source

__all__ = [
    "ContentModel",
    "Export",
    "Heading",
    "Image",
    "Link",
    "ParsedDocument",
    "ParsedSourceFile",
    "extract_exports",
    "is_internal_target",
    "parse_markdown",
    "parse_source",
    "slugify",
]
