"""Abstract inputs the navigation state machine understands."""

from __future__ import annotations

from enum import Enum


class NavEvent(str, Enum):
    MOVE_DOWN = "move_selection_down"
    MOVE_UP = "move_selection_up"
    NEXT_PART = "next_part"
    PREV_PART = "prev_part"
    SWITCH_FOCUS = "switch_focus"
    ACTIVATE = "activate"
    TOGGLE_DEBUG = "toggle_debug"
    QUIT = "quit"


__all__ = ["NavEvent"]
