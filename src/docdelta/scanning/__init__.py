"""File enumeration and ContentModel construction."""

from .builder import ContentModelBuilder, build_content_model
from .discovery import FileEnumerator, SourceFile, should_skip_file

__all__ = [
    "ContentModelBuilder",
    "FileEnumerator",
    "SourceFile",
    "build_content_model",
    "should_skip_file",
]
