"""Navigation state machine: the single owner of what is visible."""

from __future__ import annotations

from functools import partial
from typing import Dict, Iterable, Optional, Type

from bookrat.document import load_document
from bookrat.runtime import telemetry
from bookrat.sources import extract_parts

from .base_pane import DocumentLoader, NavigationBus, Pane, PaneContext, TransitionResult
from .content_pane import ContentPane
from .events import NavEvent
from .file_list_pane import FileListPane
from .state import Focus, NavigationState, Viewport

GLOBAL_EVENTS = frozenset({NavEvent.SWITCH_FOCUS, NavEvent.QUIT})


def default_loader() -> DocumentLoader:
    return partial(load_document, extractor=extract_parts)


class NavigationMachine:
    """Routes events to the focused pane and commits the resulting state.

    Events are processed one at a time to completion. ``transition`` is pure
    with respect to the machine and may be used to preview an event.
    """

    def __init__(
        self,
        files: Iterable[str] = (),
        *,
        loader: Optional[DocumentLoader] = None,
        viewport: Optional[Viewport] = None,
        bus: Optional[NavigationBus] = None,
        panes: Iterable[Type[Pane]] = (FileListPane, ContentPane),
    ) -> None:
        self.bus = bus or NavigationBus()
        self.context = PaneContext(loader=loader or default_loader(), bus=self.bus)
        self._panes: Dict[Focus, Pane] = {}
        for pane_cls in panes:
            self.register_pane(pane_cls)
        self.state = NavigationState(
            files=tuple(files), viewport=viewport or Viewport()
        )

    def register_pane(self, pane_cls: Type[Pane]) -> Pane:
        pane = pane_cls(self.context)
        if pane.focus in self._panes:
            raise ValueError(f"Pane for '{pane.focus.value}' already registered")
        self._panes[pane.focus] = pane
        return pane

    def transition(self, state: NavigationState, event: NavEvent) -> TransitionResult:
        if state.quitting:
            return TransitionResult(state=state, consumed=False, status="halted")
        if event in GLOBAL_EVENTS:
            return self._handle_global(state, event)
        pane = self._panes.get(state.focus)
        if pane is None:
            raise RuntimeError(f"No pane registered for '{state.focus.value}'")
        return pane.handle_event(state, event)

    def _handle_global(self, state: NavigationState, event: NavEvent) -> TransitionResult:
        if event is NavEvent.QUIT:
            return TransitionResult(state=state.with_changes(quitting=True), status="quit")
        updated = state.with_changes(focus=state.focus.toggled())
        return TransitionResult(state=updated, status="focus", message=updated.focus.value)

    def dispatch(self, event: NavEvent) -> TransitionResult:
        previous = self.state
        with telemetry.span(
            name=f"nav::{event.value}",
            component=True,
            metadata={"focus": previous.focus.value, "event": event.value},
        ) as handle:
            result = self.transition(previous, event)
            handle.add_metadata("status", result.status)
        self.state = result.state
        self._announce(previous, result.state)
        return result

    def resize(self, width: int, height: int) -> NavigationState:
        viewport = Viewport(width, height)
        if viewport != self.state.viewport:
            self.state = self.state.with_changes(viewport=viewport)
            telemetry.record_event(
                "viewport.resized",
                level="debug",
                data={"width": viewport.width, "height": viewport.height},
            )
        return self.state

    def _announce(self, previous: NavigationState, current: NavigationState) -> None:
        if previous.focus is not current.focus:
            telemetry.record_event("focus.changed", data={"focus": current.focus.value})
            self.bus.emit("focus.changed", current.focus)
        if current.quitting and not previous.quitting:
            telemetry.record_event("session.quit")
            self.bus.emit("session.quit", None)


__all__ = ["GLOBAL_EVENTS", "NavigationMachine", "default_loader"]
