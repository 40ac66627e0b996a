"""Dataclasses describing key bindings."""

from __future__ import annotations

from dataclasses import dataclass

from bookrat.navigation import NavEvent

GLOBAL_SCOPE = "global"
KEY_LABELS = {"enter": "Enter", "tab": "Tab", "escape": "Esc", "space": "Space"}


def normalize_token(token: str) -> str:
    """Lower-case named keys and modifiers, keep single characters verbatim."""

    cleaned = token.strip()
    if not cleaned:
        raise ValueError("key cannot be empty")
    if len(cleaned) == 1:
        return cleaned
    *modifiers, key = cleaned.split("+")
    if not key:
        # "ctrl++" style tokens bind the plus key itself
        modifiers, key = modifiers[:-1], "+"
    if len(key) > 1:
        key = key.lower()
    ordered = sorted(dict.fromkeys(mod.strip().lower() for mod in modifiers if mod.strip()))
    return "+".join([*ordered, key])


@dataclass(frozen=True, slots=True)
class Binding:
    """Maps one key in one scope to a navigation event."""

    id: str
    scope: str
    key: str
    event: NavEvent
    label: str = ""
    show_in_help: bool = True

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.scope:
            raise ValueError("binding scope cannot be empty")
        object.__setattr__(self, "key", normalize_token(self.key))
        object.__setattr__(self, "event", NavEvent(self.event))

    @property
    def key_label(self) -> str:
        return KEY_LABELS.get(self.key, self.key)


__all__ = ["Binding", "GLOBAL_SCOPE", "KEY_LABELS", "normalize_token"]
