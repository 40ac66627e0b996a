"""Declarative key bindings for the reader panes."""

from .models import GLOBAL_SCOPE, Binding, normalize_token
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .defaults import DEFAULT_BINDINGS, load_default_keymaps

__all__ = [
    "GLOBAL_SCOPE",
    "Binding",
    "normalize_token",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "DEFAULT_BINDINGS",
    "load_default_keymaps",
]
