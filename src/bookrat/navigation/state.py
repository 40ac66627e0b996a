"""Immutable navigation state and the queries derived from it."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple

from bookrat.document import Document, Part, RenderedLine


class Focus(str, Enum):
    """Pane that currently receives navigation input."""

    FILE_LIST = "file_list"
    CONTENT = "content"

    def toggled(self) -> "Focus":
        return Focus.CONTENT if self is Focus.FILE_LIST else Focus.FILE_LIST


@dataclass(frozen=True, slots=True)
class Viewport:
    """Visible size of the content pane, in terminal cells."""

    width: int = 80
    height: int = 24

    def __post_init__(self) -> None:
        object.__setattr__(self, "width", max(1, int(self.width)))
        object.__setattr__(self, "height", max(1, int(self.height)))


def _clamp(value: int, upper: int) -> int:
    """Clamp ``value`` into ``[0, upper]``."""

    return max(0, min(value, upper))


@dataclass(frozen=True, slots=True)
class NavigationState:
    """Cursor over the file list and the open document.

    Every index is kept inside the bounds of the data currently loaded;
    ``with_changes`` re-clamps after each update.
    """

    files: Tuple[str, ...] = ()
    focus: Focus = Focus.FILE_LIST
    selected_file_index: int = 0
    document: Optional[Document] = None
    open_file_index: Optional[int] = None
    current_part_index: int = 0
    scroll_offset: int = 0
    debug_mode: bool = False
    viewport: Viewport = field(default_factory=Viewport)
    quitting: bool = False

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def part_count(self) -> int:
        return len(self.document) if self.document is not None else 0

    @property
    def current_part(self) -> Optional[Part]:
        if self.document is None:
            return None
        return self.document.part(self.current_part_index)

    @property
    def line_count(self) -> int:
        if self.document is None:
            return 0
        return self.document.line_count(
            self.current_part_index, self.viewport.width, debug=self.debug_mode
        )

    @property
    def max_scroll(self) -> int:
        return max(0, self.line_count - self.viewport.height)

    @property
    def progress_fraction(self) -> float:
        if self.part_count > 1:
            return self.current_part_index / (self.part_count - 1)
        return 0.0

    @property
    def scroll_fraction(self) -> float:
        return self.scroll_offset / max(1, self.max_scroll)

    def clamped(self) -> "NavigationState":
        selected = _clamp(self.selected_file_index, max(0, self.file_count - 1))
        part = _clamp(self.current_part_index, max(0, self.part_count - 1))
        probe = self
        if (selected, part) != (self.selected_file_index, self.current_part_index):
            probe = replace(self, selected_file_index=selected, current_part_index=part)
        scroll = _clamp(self.scroll_offset, probe.max_scroll)
        if scroll == probe.scroll_offset:
            return probe
        return replace(probe, scroll_offset=scroll)

    def with_changes(self, **changes: object) -> "NavigationState":
        return replace(self, **changes).clamped()  # type: ignore[arg-type]

    def visible_lines(self) -> List[RenderedLine]:
        if self.document is None:
            return []
        lines = self.document.render(
            self.current_part_index, self.viewport.width, debug=self.debug_mode
        )
        return lines[self.scroll_offset : self.scroll_offset + self.viewport.height]


__all__ = ["Focus", "NavigationState", "Viewport"]
