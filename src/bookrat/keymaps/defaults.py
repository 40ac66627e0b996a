"""Built-in key bindings for the file list and content panes."""

from __future__ import annotations

from typing import Iterable, Sequence

from bookrat.navigation import Focus, NavEvent

from .models import GLOBAL_SCOPE, Binding
from .registry import KeymapRegistry

FILE_LIST = Focus.FILE_LIST.value
CONTENT = Focus.CONTENT.value

DEFAULT_BINDINGS: tuple[Binding, ...] = (
    Binding("file_list.down", FILE_LIST, "j", NavEvent.MOVE_DOWN, "Navigate"),
    Binding("file_list.up", FILE_LIST, "k", NavEvent.MOVE_UP, "Navigate"),
    Binding(
        "file_list.down_arrow", FILE_LIST, "down", NavEvent.MOVE_DOWN, show_in_help=False
    ),
    Binding("file_list.up_arrow", FILE_LIST, "up", NavEvent.MOVE_UP, show_in_help=False),
    Binding("file_list.open", FILE_LIST, "enter", NavEvent.ACTIVATE, "Select"),
    Binding("content.down", CONTENT, "j", NavEvent.MOVE_DOWN, "Scroll"),
    Binding("content.up", CONTENT, "k", NavEvent.MOVE_UP, "Scroll"),
    Binding("content.down_arrow", CONTENT, "down", NavEvent.MOVE_DOWN, show_in_help=False),
    Binding("content.up_arrow", CONTENT, "up", NavEvent.MOVE_UP, show_in_help=False),
    Binding("content.prev_part", CONTENT, "h", NavEvent.PREV_PART, "Change Chapter"),
    Binding("content.next_part", CONTENT, "l", NavEvent.NEXT_PART, "Change Chapter"),
    Binding(
        "content.prev_part_arrow", CONTENT, "left", NavEvent.PREV_PART, show_in_help=False
    ),
    Binding(
        "content.next_part_arrow", CONTENT, "right", NavEvent.NEXT_PART, show_in_help=False
    ),
    Binding("content.debug", CONTENT, "d", NavEvent.TOGGLE_DEBUG, "Debug View"),
    Binding("global.switch_focus", GLOBAL_SCOPE, "tab", NavEvent.SWITCH_FOCUS, "Switch View"),
    Binding("global.quit", GLOBAL_SCOPE, "q", NavEvent.QUIT, "Quit"),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    exclude_bindings: Sequence[str] | None = None,
) -> None:
    """Register the built-in bindings, then ``extra_bindings`` on top."""

    excluded = set(exclude_bindings or ())
    for binding in DEFAULT_BINDINGS:
        if binding.id not in excluded:
            registry.register_binding(binding, replace=replace)

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=True)


__all__ = ["DEFAULT_BINDINGS", "load_default_keymaps"]
