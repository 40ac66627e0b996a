"""Textual presentation adapter.

Only the controller is imported here so tests can drive it without Textual
installed; run the app through ``bookrat.adapters.textual.app``.
"""

from .controller import ContentView, TextualReaderAdapter, TextualUIHooks

__all__ = ["ContentView", "TextualReaderAdapter", "TextualUIHooks"]
