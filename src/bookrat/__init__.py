"""Terminal reader for EPUB-style document packages."""

__all__ = [
    "adapters",
    "document",
    "keymaps",
    "navigation",
    "runtime",
    "sources",
]

__version__ = "0.1.0"
