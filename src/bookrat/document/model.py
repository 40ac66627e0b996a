"""Document model: formatted parts of one opened package."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from bookrat.runtime import telemetry

from .blocks import BlockKind, Blocks
from .errors import DocumentEmptyError
from .formatter import debug_render, format_markup
from .layout import RenderedLine, layout_blocks, layout_text


@dataclass(frozen=True, slots=True)
class RawPart:
    """Unformatted markup for one part, as produced by an extractor."""

    raw_markup: str
    title: Optional[str] = None


PartExtractor = Callable[[str], Sequence[RawPart]]


@dataclass(frozen=True, slots=True)
class Part:
    """One chapter or section with its formatted blocks and source markup."""

    title: Optional[str]
    blocks: Blocks
    raw: str

    @classmethod
    def from_raw(cls, raw_part: RawPart) -> "Part":
        blocks = format_markup(raw_part.raw_markup)
        title = raw_part.title or _first_heading(blocks)
        return cls(title=title, blocks=blocks, raw=raw_part.raw_markup)

    @property
    def debug_text(self) -> str:
        return debug_render(self.raw)


def _first_heading(blocks: Blocks) -> Optional[str]:
    for block in blocks:
        if block.kind is BlockKind.HEADING:
            return block.text
    return None


def render_part(part: Part, wrap_width: int, *, debug: bool = False) -> List[RenderedLine]:
    if debug:
        return layout_text(part.debug_text, wrap_width)
    return layout_blocks(part.blocks, wrap_width)


def recompute_line_count(part: Part, wrap_width: int, *, debug: bool = False) -> int:
    """Number of terminal rows ``part`` occupies at ``wrap_width`` columns."""

    return len(render_part(part, wrap_width, debug=debug))


@dataclass(eq=False)
class Document:
    """Every formatted part of one package, in reading order.

    Line counts are cached for a single wrap width only; asking for any other
    width drops the whole cache first.
    """

    parts: Tuple[Part, ...]
    source_path: str = ""
    _wrap_width: Optional[int] = field(default=None, init=False, repr=False)
    _line_counts: Dict[Tuple[int, bool], int] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self.parts = tuple(self.parts)
        if not self.parts:
            raise DocumentEmptyError(
                "Document has no parts", path=self.source_path or None
            )

    def __len__(self) -> int:
        return len(self.parts)

    @property
    def part_count(self) -> int:
        return len(self.parts)

    def part(self, index: int) -> Part:
        return self.parts[index]

    def invalidate(self, wrap_width: Optional[int] = None) -> None:
        self._line_counts.clear()
        self._wrap_width = wrap_width

    def line_count(self, part_index: int, wrap_width: int, *, debug: bool = False) -> int:
        if wrap_width != self._wrap_width:
            self.invalidate(wrap_width)
        key = (part_index, debug)
        if key not in self._line_counts:
            self._line_counts[key] = recompute_line_count(
                self.parts[part_index], wrap_width, debug=debug
            )
        return self._line_counts[key]

    def recompute_line_count(
        self, part_index: int, wrap_width: int, *, debug: bool = False
    ) -> int:
        if wrap_width != self._wrap_width:
            self.invalidate(wrap_width)
        count = recompute_line_count(self.parts[part_index], wrap_width, debug=debug)
        self._line_counts[(part_index, debug)] = count
        return count

    def render(
        self, part_index: int, wrap_width: int, *, debug: bool = False
    ) -> List[RenderedLine]:
        return render_part(self.parts[part_index], wrap_width, debug=debug)


def open_document(raw_parts: Iterable[RawPart], *, source_path: str = "") -> Document:
    """Format every raw part in order and assemble a ``Document``."""

    raw = list(raw_parts)
    if not raw:
        raise DocumentEmptyError(
            f"No readable parts in {source_path or 'package'}",
            path=source_path or None,
        )
    with telemetry.span(
        "document::open",
        component="document",
        metadata={"source": source_path, "parts": len(raw)},
    ):
        parts = tuple(Part.from_raw(raw_part) for raw_part in raw)
    telemetry.record_event(
        "document.formatted",
        level="debug",
        data={
            "source": source_path,
            "parts": len(parts),
            "blocks": sum(len(part.blocks) for part in parts),
        },
    )
    return Document(parts=parts, source_path=source_path)


def load_document(path: str, extractor: PartExtractor) -> Document:
    """Extract ``path`` and open it; extractor errors propagate unchanged."""

    return open_document(extractor(path), source_path=path)


__all__ = [
    "Document",
    "Part",
    "PartExtractor",
    "RawPart",
    "load_document",
    "open_document",
    "recompute_line_count",
    "render_part",
]
