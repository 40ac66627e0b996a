"""Document model, text formatting, and line layout."""

from .blocks import BlockKind, Blocks, TextBlock, TextRun
from .errors import DocumentEmptyError, PackageReadError, ReaderError
from .formatter import debug_render, format_markup
from .layout import (
    EMPTY_PART_MESSAGE,
    RenderedLine,
    layout_block,
    layout_blocks,
    layout_text,
    wrap_spans,
)
from .model import (
    Document,
    Part,
    PartExtractor,
    RawPart,
    load_document,
    open_document,
    recompute_line_count,
    render_part,
)

__all__ = [
    "BlockKind",
    "Blocks",
    "TextBlock",
    "TextRun",
    "ReaderError",
    "PackageReadError",
    "DocumentEmptyError",
    "debug_render",
    "format_markup",
    "EMPTY_PART_MESSAGE",
    "RenderedLine",
    "layout_block",
    "layout_blocks",
    "layout_text",
    "wrap_spans",
    "Document",
    "Part",
    "PartExtractor",
    "RawPart",
    "load_document",
    "open_document",
    "recompute_line_count",
    "render_part",
]
