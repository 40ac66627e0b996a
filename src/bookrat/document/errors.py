"""Error taxonomy for loading documents."""

from __future__ import annotations

from typing import Optional


class ReaderError(RuntimeError):
    """Base class for recoverable load failures surfaced to the user."""

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class PackageReadError(ReaderError):
    """Raised when a document package is unreadable or corrupt."""


class DocumentEmptyError(ReaderError):
    """Raised when a package yields zero parts."""


__all__ = ["DocumentEmptyError", "PackageReadError", "ReaderError"]
