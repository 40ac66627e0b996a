"""Collaborators that find packages on disk and extract their parts."""

from bookrat.document import RawPart

from .discovery import DEFAULT_EXTENSIONS, discover_files, display_name
from .epub import extract_parts

__all__ = [
    "DEFAULT_EXTENSIONS",
    "RawPart",
    "discover_files",
    "display_name",
    "extract_parts",
]
