from __future__ import annotations

import pytest

from bookrat.keymaps import (
    DEFAULT_BINDINGS,
    GLOBAL_SCOPE,
    Binding,
    KeymapConflictError,
    KeymapRegistry,
    load_default_keymaps,
    normalize_token,
)
from bookrat.navigation import NavEvent


def make_registry(**kwargs) -> KeymapRegistry:
    registry = KeymapRegistry()
    load_default_keymaps(registry, **kwargs)
    return registry


def test_normalize_token_lowercases_named_keys_only() -> None:
    assert normalize_token("J") == "J"
    assert normalize_token(" Enter ") == "enter"
    assert normalize_token("Shift+Ctrl+Tab") == "ctrl+shift+tab"
    assert normalize_token("ctrl++") == "ctrl++"
    with pytest.raises(ValueError):
        normalize_token("  ")


def test_binding_coerces_event_values() -> None:
    binding = Binding("custom.quit", GLOBAL_SCOPE, "Escape", "quit", "Quit")

    assert binding.event is NavEvent.QUIT
    assert binding.key == "escape"
    assert binding.key_label == "Esc"


def test_default_bindings_resolve_per_focus() -> None:
    registry = make_registry()

    assert registry.resolve("file_list", "j").event is NavEvent.MOVE_DOWN
    assert registry.resolve("file_list", "up").event is NavEvent.MOVE_UP
    assert registry.resolve("file_list", "enter").event is NavEvent.ACTIVATE
    assert registry.resolve("content", "j").event is NavEvent.MOVE_DOWN
    assert registry.resolve("content", "l").event is NavEvent.NEXT_PART
    assert registry.resolve("content", "left").event is NavEvent.PREV_PART
    assert registry.resolve("content", "d").event is NavEvent.TOGGLE_DEBUG
    assert registry.resolve("file_list", "l") is None
    assert registry.resolve("content", "enter") is None


def test_global_bindings_apply_under_every_focus() -> None:
    registry = make_registry()

    for scope in ("file_list", "content"):
        assert registry.resolve(scope, "tab").event is NavEvent.SWITCH_FOCUS
        assert registry.resolve(scope, "q").event is NavEvent.QUIT


def test_help_text_lists_scope_then_global_keys() -> None:
    registry = make_registry()

    assert registry.help_text("file_list") == (
        "j/k: Navigate | Enter: Select | Tab: Switch View | q: Quit"
    )
    assert registry.help_text("content") == (
        "j/k: Scroll | h/l: Change Chapter | d: Debug View | Tab: Switch View | q: Quit"
    )


def test_scope_binding_conflicting_with_global_is_rejected() -> None:
    registry = make_registry()

    with pytest.raises(KeymapConflictError) as excinfo:
        registry.register_binding(Binding("content.q", "content", "q", NavEvent.MOVE_UP))

    assert [binding.id for binding in excinfo.value.conflicts] == ["global.quit"]


def test_global_binding_conflicts_with_every_scope() -> None:
    registry = make_registry()

    conflicts = registry.detect_conflicts(
        Binding("global.j", GLOBAL_SCOPE, "j", NavEvent.QUIT)
    )

    assert {binding.id for binding in conflicts} == {"file_list.down", "content.down"}


def test_replace_moves_binding_to_new_key() -> None:
    registry = make_registry()

    registry.register_binding(
        Binding("content.down", "content", "s", NavEvent.MOVE_DOWN, "Scroll"),
        replace=True,
    )

    assert registry.resolve("content", "j") is None
    assert registry.resolve("content", "s").id == "content.down"


def test_duplicate_id_requires_replace() -> None:
    registry = make_registry()

    with pytest.raises(ValueError):
        registry.register_binding(
            Binding("content.down", "content", "s", NavEvent.MOVE_DOWN)
        )


def test_load_defaults_with_exclusions_and_extras() -> None:
    registry = make_registry(
        exclude_bindings=["global.quit"],
        extra_bindings=[Binding("global.exit", GLOBAL_SCOPE, "x", NavEvent.QUIT, "Quit")],
    )

    assert registry.resolve("content", "q") is None
    assert registry.resolve("content", "x").event is NavEvent.QUIT
    assert registry.stats().binding_count == len(DEFAULT_BINDINGS)


def test_unregister_and_stats() -> None:
    registry = make_registry()

    assert registry.stats().scopes == ("content", "file_list", "global")
    removed = registry.unregister_binding("content.debug")

    assert removed is not None and removed.key == "d"
    assert registry.resolve("content", "d") is None
    assert registry.unregister_binding("content.debug") is None
    with pytest.raises(KeyError):
        registry.get_binding("content.debug")
