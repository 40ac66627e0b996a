"""Content pane: scrolling, part changes, and the debug view."""

from __future__ import annotations

from bookrat.runtime import telemetry

from .base_pane import Pane, TransitionResult
from .events import NavEvent
from .state import Focus, NavigationState

LOGGER_NAME = "bookrat.navigation.content"


class ContentPane(Pane):
    focus = Focus.CONTENT

    def handle_event(self, state: NavigationState, event: NavEvent) -> TransitionResult:
        if event is NavEvent.MOVE_DOWN:
            return self._scroll(state, 1)
        if event is NavEvent.MOVE_UP:
            return self._scroll(state, -1)
        if event is NavEvent.NEXT_PART:
            return self._change_part(state, 1)
        if event is NavEvent.PREV_PART:
            return self._change_part(state, -1)
        if event is NavEvent.TOGGLE_DEBUG:
            return self._toggle_debug(state)
        return self.ignore(state, event)

    def _scroll(self, state: NavigationState, delta: int) -> TransitionResult:
        updated = state.with_changes(scroll_offset=state.scroll_offset + delta)
        if updated.scroll_offset == state.scroll_offset:
            return TransitionResult(state=state, status="at_boundary")
        return TransitionResult(state=updated, status="scrolled")

    def _change_part(self, state: NavigationState, delta: int) -> TransitionResult:
        if state.document is None:
            return TransitionResult(state=state, status="no_document")
        target = state.current_part_index + delta
        updated = state.with_changes(current_part_index=target)
        if updated.current_part_index == state.current_part_index:
            edge = "last" if delta > 0 else "first"
            return TransitionResult(
                state=state, status="at_boundary", message=f"Already at {edge} chapter"
            )
        updated = updated.with_changes(scroll_offset=0)
        telemetry.record_event(
            "part.changed",
            data={"part": updated.current_part_index + 1, "of": updated.part_count},
            logger_name=LOGGER_NAME,
        )
        self.context.bus.emit("part.changed", updated.current_part_index)
        return TransitionResult(state=updated, status="part_changed")

    def _toggle_debug(self, state: NavigationState) -> TransitionResult:
        updated = state.with_changes(debug_mode=not state.debug_mode)
        telemetry.record_event(
            "debug.toggled",
            level="debug",
            data={"debug": updated.debug_mode},
            logger_name=LOGGER_NAME,
        )
        self.context.bus.emit("debug.toggled", updated.debug_mode)
        return TransitionResult(
            state=updated, status="debug_on" if updated.debug_mode else "debug_off"
        )


__all__ = ["ContentPane"]
