"""Base classes shared by the file list and content panes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from bookrat.document import Document, ReaderError

from .events import NavEvent
from .state import Focus, NavigationState

DocumentLoader = Callable[[str], Document]


@dataclass(slots=True)
class TransitionResult:
    """Outcome of feeding one event to the state machine."""

    state: NavigationState
    consumed: bool = True
    status: str = "ok"
    message: Optional[str] = None
    error: Optional[ReaderError] = None


class NavigationBus:
    """Minimal event bus the adapter listens on."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


@dataclass(slots=True)
class PaneContext:
    """Services every pane can reach."""

    loader: DocumentLoader
    bus: NavigationBus


class Pane:
    """Handles the events that apply while its focus is active."""

    focus: Focus = Focus.FILE_LIST

    def __init__(self, context: PaneContext) -> None:
        self.context = context

    def handle_event(
        self, state: NavigationState, event: NavEvent
    ) -> TransitionResult:  # pragma: no cover - abstract override
        raise NotImplementedError

    def ignore(self, state: NavigationState, event: NavEvent) -> TransitionResult:
        return TransitionResult(
            state=state, consumed=False, status="ignored", message=event.value
        )


__all__ = [
    "DocumentLoader",
    "NavigationBus",
    "Pane",
    "PaneContext",
    "TransitionResult",
]
