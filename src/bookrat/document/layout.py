"""Word wrapping of text blocks into renderable lines."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from .blocks import BlockKind, TextBlock, TextRun

EMPTY_PART_MESSAGE = "No content available in this chapter."
WORD = re.compile(r"\S+")

Span = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class RenderedLine:
    """One terminal row of formatted content."""

    kind: BlockKind
    runs: Tuple[TextRun, ...] = ()
    level: int = 0

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


def wrap_spans(text: str, width: int) -> List[Span]:
    """Greedy word wrap returning ``(start, end)`` offsets into ``text``.

    Words never split unless a single word is wider than ``width``; such a
    word is hard-broken every ``width`` characters and the remainder starts a
    fresh line.
    """

    width = max(1, width)
    spans: List[Span] = []
    line_start = line_end = -1
    for match in WORD.finditer(text):
        start, end = match.span()
        if end - start > width:
            if line_start >= 0:
                spans.append((line_start, line_end))
                line_start = -1
            while end - start > width:
                spans.append((start, start + width))
                start += width
        if line_start < 0:
            line_start, line_end = start, end
        elif end - line_start <= width:
            line_end = end
        else:
            spans.append((line_start, line_end))
            line_start, line_end = start, end
    if line_start >= 0:
        spans.append((line_start, line_end))
    return spans or [(0, 0)]


def hard_spans(text: str, width: int) -> List[Span]:
    """Break every source line of ``text`` at exactly ``width`` characters."""

    width = max(1, width)
    spans: List[Span] = []
    offset = 0
    for line in text.split("\n"):
        if not line:
            spans.append((offset, offset))
        for start in range(0, len(line), width):
            spans.append((offset + start, offset + min(len(line), start + width)))
        offset += len(line) + 1
    return spans


def slice_runs(runs: Sequence[TextRun], start: int, end: int) -> Tuple[TextRun, ...]:
    """Return the portions of ``runs`` covering ``[start, end)`` of their text."""

    sliced: List[TextRun] = []
    position = 0
    for run in runs:
        run_start, run_end = position, position + len(run.text)
        position = run_end
        low, high = max(start, run_start), min(end, run_end)
        if low < high:
            sliced.append(
                TextRun(run.text[low - run_start : high - run_start], run.emphasis)
            )
    return tuple(sliced)


def layout_block(block: TextBlock, width: int) -> List[RenderedLine]:
    if block.kind is BlockKind.LINE_BREAK:
        return [RenderedLine(BlockKind.LINE_BREAK)]
    text = block.text
    spans = hard_spans(text, width) if block.preformatted else wrap_spans(text, width)
    return [
        RenderedLine(block.kind, slice_runs(block.runs, start, end), block.level)
        for start, end in spans
    ]


def layout_blocks(blocks: Iterable[TextBlock], width: int) -> List[RenderedLine]:
    lines: List[RenderedLine] = []
    for block in blocks:
        lines.extend(layout_block(block, width))
    if not lines:
        placeholder = TextBlock(BlockKind.PARAGRAPH, (TextRun(EMPTY_PART_MESSAGE),))
        lines = layout_block(placeholder, width)
    return lines


def layout_text(text: str, width: int) -> List[RenderedLine]:
    """Lay out already-visible debug text without word wrapping."""

    return [
        RenderedLine(BlockKind.PARAGRAPH, (TextRun(text[start:end]),) if end > start else ())
        for start, end in hard_spans(text, width)
    ]


__all__ = [
    "EMPTY_PART_MESSAGE",
    "RenderedLine",
    "hard_spans",
    "layout_block",
    "layout_blocks",
    "layout_text",
    "slice_runs",
    "wrap_spans",
]
