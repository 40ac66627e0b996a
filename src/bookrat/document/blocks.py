"""Formatted content units shared by the formatter, layout, and UI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class BlockKind(str, Enum):
    """Closed set of block kinds the formatter produces."""

    PARAGRAPH = "paragraph"
    HEADING = "heading"
    QUOTE = "quote"
    LINE_BREAK = "line_break"


@dataclass(frozen=True, slots=True)
class TextRun:
    """Inline span of text sharing one emphasis flag."""

    text: str
    emphasis: bool = False


@dataclass(frozen=True, slots=True)
class TextBlock:
    """Single semantic unit of formatted content.

    ``runs`` is never empty except for ``LINE_BREAK`` blocks, which never
    carry runs. ``level`` is only meaningful for headings (1..6).
    """

    kind: BlockKind
    runs: Tuple[TextRun, ...] = ()
    preformatted: bool = False
    level: int = 0

    def __post_init__(self) -> None:
        if self.kind is BlockKind.LINE_BREAK:
            if self.runs:
                raise ValueError("line breaks cannot carry runs")
        elif not self.runs:
            raise ValueError(f"{self.kind.value} block requires at least one run")

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @classmethod
    def line_break(cls) -> "TextBlock":
        return cls(BlockKind.LINE_BREAK)


Blocks = Tuple[TextBlock, ...]

__all__ = ["BlockKind", "Blocks", "TextBlock", "TextRun"]
