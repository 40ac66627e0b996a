"""File list pane: moves the selection and opens packages."""

from __future__ import annotations

from bookrat.document import ReaderError
from bookrat.runtime import telemetry

from .base_pane import Pane, TransitionResult
from .events import NavEvent
from .state import Focus, NavigationState

LOGGER_NAME = "bookrat.navigation.file_list"


class FileListPane(Pane):
    focus = Focus.FILE_LIST

    def handle_event(self, state: NavigationState, event: NavEvent) -> TransitionResult:
        if event is NavEvent.MOVE_DOWN:
            return self._move(state, 1)
        if event is NavEvent.MOVE_UP:
            return self._move(state, -1)
        if event is NavEvent.ACTIVATE:
            return self._activate(state)
        return self.ignore(state, event)

    def _move(self, state: NavigationState, delta: int) -> TransitionResult:
        updated = state.with_changes(
            selected_file_index=state.selected_file_index + delta
        )
        if updated.selected_file_index == state.selected_file_index:
            return TransitionResult(state=state, status="at_boundary")
        return TransitionResult(state=updated, status="selection")

    def _activate(self, state: NavigationState) -> TransitionResult:
        if not state.files:
            return TransitionResult(
                state=state, status="no_files", message="No books found"
            )
        index = state.selected_file_index
        path = state.files[index]
        telemetry.record_event(
            "document.loading", data={"path": path}, logger_name=LOGGER_NAME
        )
        try:
            document = self.context.loader(path)
        except ReaderError as exc:
            telemetry.record_event(
                "document.load_failed",
                level="error",
                data={"path": path, "error": type(exc).__name__, "reason": str(exc)},
                logger_name=LOGGER_NAME,
            )
            self.context.bus.emit("load.failed", exc)
            return TransitionResult(
                state=state, status="load_failed", message=str(exc), error=exc
            )

        updated = state.with_changes(
            document=document,
            open_file_index=index,
            current_part_index=0,
            scroll_offset=0,
            focus=Focus.CONTENT,
        )
        telemetry.record_event(
            "document.opened",
            data={"path": path, "parts": len(document)},
            logger_name=LOGGER_NAME,
        )
        self.context.bus.emit("document.opened", document)
        return TransitionResult(state=updated, status="opened", message=path)


__all__ = ["FileListPane"]
