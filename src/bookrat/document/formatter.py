"""Turn loosely structured chapter markup into text blocks.

Exported chapters come from arbitrary third-party tools, so the formatter is
total: anything the HTML parser cannot make sense of degrades to plain
paragraphs instead of raising.
"""

from __future__ import annotations

import re
import unicodedata
from html import unescape
from html.parser import HTMLParser
from typing import List, Optional

from bookrat.runtime import telemetry

from .blocks import BlockKind, Blocks, TextBlock, TextRun

HEADING_TAG = re.compile(r"h([1-6])$")
WHITESPACE = re.compile(r"\s+")
ANY_TAG = re.compile(r"<[^>]*>")
BLANK_LINES = re.compile(r"\n\s*\n")

BLOCK_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "body",
        "center",
        "dd",
        "div",
        "dl",
        "dt",
        "figcaption",
        "figure",
        "footer",
        "header",
        "hr",
        "li",
        "main",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "table",
        "td",
        "th",
        "tr",
        "ul",
    }
)
QUOTE_TAGS = frozenset({"blockquote"})
PREFORMATTED_TAGS = frozenset({"pre"})
EMPHASIS_TAGS = frozenset({"b", "em", "i", "strong"})
HIDDEN_TAGS = frozenset({"head", "script", "style", "title"})
BREAK_TAGS = frozenset({"br"})
VOID_BLOCK_TAGS = frozenset({"hr"})

VISIBLE_GLYPHS = {
    "\n": "↵\n",
    "\r": "␍",
    "\t": "→",
    " ": "·",
    "\xa0": "⍽",
    "\x7f": "␡",
}


def _is_block(tag: str) -> bool:
    return tag in BLOCK_TAGS or HEADING_TAG.match(tag) is not None


class _BlockCollector(HTMLParser):
    """Streaming collector that groups character data into blocks."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.blocks: List[TextBlock] = []
        self._runs: List[TextRun] = []
        self._open: List[str] = []
        self._emphasis = 0
        self._hidden = 0

    # parser callbacks -------------------------------------------------

    def handle_starttag(self, tag, attrs):
        del attrs
        if tag in HIDDEN_TAGS:
            self._hidden += 1
        elif tag in BREAK_TAGS:
            self._flush()
            self.blocks.append(TextBlock.line_break())
        elif tag in EMPHASIS_TAGS:
            self._emphasis += 1
        elif _is_block(tag):
            self._flush()
            if tag not in VOID_BLOCK_TAGS:
                self._open.append(tag)

    def handle_endtag(self, tag):
        if tag in HIDDEN_TAGS:
            self._hidden = max(0, self._hidden - 1)
        elif tag in EMPHASIS_TAGS:
            self._emphasis = max(0, self._emphasis - 1)
        elif _is_block(tag):
            self._flush()
            if tag in self._open:
                # Closing an outer block also closes anything left open inside it.
                index = len(self._open) - 1 - self._open[::-1].index(tag)
                del self._open[index:]

    def handle_data(self, data):
        if self._hidden or not data:
            return
        if self._preformatted:
            text = data
        else:
            text = WHITESPACE.sub(" ", data)
            if not self._runs or self._runs[-1].text.endswith(" "):
                text = text.lstrip(" ")
        if text:
            self._append(TextRun(text, emphasis=self._emphasis > 0))

    def close(self) -> None:
        super().close()
        self._flush()

    # helpers ----------------------------------------------------------

    @property
    def _preformatted(self) -> bool:
        return any(tag in PREFORMATTED_TAGS for tag in self._open)

    def _append(self, run: TextRun) -> None:
        if self._runs and self._runs[-1].emphasis == run.emphasis:
            previous = self._runs.pop()
            run = TextRun(previous.text + run.text, emphasis=run.emphasis)
        self._runs.append(run)

    def _current_kind(self) -> tuple[BlockKind, int]:
        for tag in reversed(self._open):
            match = HEADING_TAG.match(tag)
            if match:
                return BlockKind.HEADING, int(match.group(1))
        if any(tag in QUOTE_TAGS for tag in self._open):
            return BlockKind.QUOTE, 0
        return BlockKind.PARAGRAPH, 0

    def _flush(self) -> None:
        runs, self._runs = self._runs, []
        preformatted = self._preformatted
        runs = _trim_runs(runs, preformatted=preformatted)
        if not runs:
            return
        kind, level = self._current_kind()
        self.blocks.append(
            TextBlock(kind, tuple(runs), preformatted=preformatted, level=level)
        )


def _trim_runs(runs: List[TextRun], *, preformatted: bool) -> List[TextRun]:
    if not runs:
        return runs
    if preformatted:
        if not "".join(run.text for run in runs).strip():
            return []
        strip = "\n"
    else:
        strip = " "
    first, last = runs[0], runs[-1]
    runs[0] = TextRun(first.text.lstrip(strip), first.emphasis)
    runs[-1] = TextRun(runs[-1].text.rstrip(strip), last.emphasis)
    return [run for run in runs if run.text]


def _strip_markup(raw: str) -> Blocks:
    text = unescape(ANY_TAG.sub("", raw))
    blocks = []
    for chunk in BLANK_LINES.split(text):
        collapsed = WHITESPACE.sub(" ", chunk).strip()
        if collapsed:
            blocks.append(TextBlock(BlockKind.PARAGRAPH, (TextRun(collapsed),)))
    return tuple(blocks)


def format_markup(raw: Optional[str]) -> Blocks:
    """Return the text blocks for one chapter's markup, in reading order."""

    if not raw:
        return ()
    collector = _BlockCollector()
    try:
        collector.feed(raw)
        collector.close()
    except (AssertionError, ValueError) as exc:
        telemetry.record_event(
            "formatter.fallback",
            level="debug",
            data={"reason": str(exc), "length": len(raw)},
        )
        return _strip_markup(raw)
    return tuple(collector.blocks)


def _visible(char: str) -> str:
    glyph = VISIBLE_GLYPHS.get(char)
    if glyph is not None:
        return glyph
    if ord(char) < 0x20:
        return chr(0x2400 + ord(char))
    if unicodedata.category(char) in {"Zs", "Zl", "Zp", "Cf", "Cc"}:
        return f"<U+{ord(char):04X}>"
    return char


def debug_render(raw: Optional[str]) -> str:
    """Show ``raw`` with whitespace and control characters made visible.

    Newlines keep their line break after the marker so the debug view still
    reads line by line.
    """

    return "".join(_visible(char) for char in raw or "")


__all__ = ["debug_render", "format_markup"]
