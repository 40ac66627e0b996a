"""Terminal-free adapter wiring the state machine to UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

from bookrat.document import RenderedLine
from bookrat.keymaps import KeymapRegistry, load_default_keymaps
from bookrat.navigation import Focus, NavigationMachine, NavigationState, TransitionResult
from bookrat.sources import display_name

NO_DOCUMENT_TEXT = "Select a file to view its content"


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(frozen=True, slots=True)
class ContentView:
    """What the content pane should draw this frame."""

    title: str
    lines: Tuple[RenderedLine, ...]
    focused: bool
    debug: bool = False
    placeholder: Optional[str] = None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_files: Callable[[Sequence[str], int, bool], None]
    update_content: Callable[[ContentView], None] = _noop
    update_status: Callable[[str], None] = _noop
    show_help: Callable[[str], None] = _noop
    notify_error: Callable[[str], None] = _noop
    request_exit: Callable[[], None] = _noop
    log: Callable[[str], None] = _noop


class TextualReaderAdapter:
    """Translates key tokens into navigation events and pushes snapshots out."""

    def __init__(
        self,
        machine: NavigationMachine,
        hooks: TextualUIHooks,
        *,
        keymaps: Optional[KeymapRegistry] = None,
    ) -> None:
        self.machine = machine
        self.hooks = hooks
        if keymaps is None:
            keymaps = KeymapRegistry(logger_name="bookrat.keymaps")
            load_default_keymaps(keymaps)
        self.keymaps = keymaps
        self._subscribe_events()
        self.refresh()

    @property
    def state(self) -> NavigationState:
        return self.machine.state

    def handle_textual_key(self, key: str) -> Optional[TransitionResult]:
        """Dispatch the event bound to ``key`` under the current focus."""

        binding = self.keymaps.resolve(self.state.focus.value, key)
        if binding is None:
            self._log_state("key -/", key=key)
            return None
        self._log_state("key ->", key=key, event=binding.event.value)
        result = self.machine.dispatch(binding.event)
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
        )
        self.refresh(message=result.message if result.error is None else None)
        if self.state.quitting:
            self.hooks.request_exit()
        return result

    def resize(self, width: int, height: int) -> None:
        self.machine.resize(width, height)
        self._refresh_files()
        self._refresh_content()
        self._refresh_status()

    def refresh(self, *, message: Optional[str] = None) -> None:
        self._refresh_files()
        self._refresh_content()
        self._refresh_status(message)
        self.hooks.show_help(self.keymaps.help_text(self.state.focus.value))

    def _subscribe_events(self) -> None:
        bus = self.machine.bus
        bus.subscribe("load.failed", self._on_load_failed)
        for event in ("document.opened", "part.changed", "focus.changed", "debug.toggled"):
            bus.subscribe(
                event, lambda payload, name=event: self._log_state("event ->", event=name)
            )

    def _on_load_failed(self, payload: object | None) -> None:
        self._log_state("event ->", event="load.failed", error=str(payload))
        self.hooks.notify_error(str(payload))

    def _refresh_files(self) -> None:
        state = self.state
        labels = [display_name(path) for path in state.files]
        self.hooks.update_files(
            labels, state.selected_file_index, state.focus is Focus.FILE_LIST
        )

    def _refresh_content(self) -> None:
        self.hooks.update_content(content_view(self.state))

    def _refresh_status(self, message: Optional[str] = None) -> None:
        self.hooks.update_status(status_line(self.state, message))

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        state = self.state
        return {
            "focus": state.focus.value,
            "file": state.selected_file_index,
            "part": state.current_part_index,
            "scroll": state.scroll_offset,
            "debug": state.debug_mode,
        }


def list_window(total: int, selected: int, height: int) -> Tuple[int, int]:
    """Rows ``[start, end)`` of a ``total``-row list to draw in ``height`` rows.

    The window follows ``selected``, keeping it near the middle once the list
    is taller than the pane. A non-positive ``height`` means the pane has not
    been laid out yet, and the whole list is returned.
    """

    if height <= 0 or total <= height:
        return 0, total
    start = min(max(0, selected - height // 2), total - height)
    return start, start + height


def content_title(state: NavigationState) -> str:
    if state.document is None:
        return "Content"
    title = f"Content (Chapter {state.current_part_index + 1}/{state.part_count})"
    part = state.current_part
    if part is not None and part.title:
        title = f"{title}: {part.title}"
    return f"{title} [debug]" if state.debug_mode else title


def content_view(state: NavigationState) -> ContentView:
    focused = state.focus is Focus.CONTENT
    if state.document is None:
        return ContentView(
            title=content_title(state),
            lines=(),
            focused=focused,
            placeholder=NO_DOCUMENT_TEXT,
        )
    return ContentView(
        title=content_title(state),
        lines=tuple(state.visible_lines()),
        focused=focused,
        debug=state.debug_mode,
    )


def status_line(state: NavigationState, message: Optional[str] = None) -> str:
    if state.document is None:
        fields = [f"{state.file_count} book(s)"]
    else:
        fields = [
            display_name(state.document.source_path),
            f"book {state.progress_fraction:.0%}",
            f"chapter {state.scroll_fraction:.0%}",
        ]
    if message:
        fields.append(message)
    return " | ".join(fields)


__all__ = [
    "ContentView",
    "TextualReaderAdapter",
    "TextualUIHooks",
    "content_title",
    "content_view",
    "list_window",
    "status_line",
]
