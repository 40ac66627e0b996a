"""Navigation state machine over the file list and the open document."""

from .base_pane import (
    DocumentLoader,
    NavigationBus,
    Pane,
    PaneContext,
    TransitionResult,
)
from .content_pane import ContentPane
from .events import NavEvent
from .file_list_pane import FileListPane
from .machine import NavigationMachine, default_loader
from .state import Focus, NavigationState, Viewport

__all__ = [
    "DocumentLoader",
    "NavigationBus",
    "Pane",
    "PaneContext",
    "TransitionResult",
    "ContentPane",
    "FileListPane",
    "NavEvent",
    "NavigationMachine",
    "default_loader",
    "Focus",
    "NavigationState",
    "Viewport",
]
