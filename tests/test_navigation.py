from __future__ import annotations

from itertools import product
from typing import Dict, List

import pytest

from bookrat.document import Document, PackageReadError, RawPart, open_document
from bookrat.navigation import (
    FileListPane,
    Focus,
    NavEvent,
    NavigationMachine,
    NavigationState,
    Viewport,
)

FILES = ("/books/alpha.epub", "/books/beta.epub", "/books/gamma.epub")
MOVES = (
    NavEvent.MOVE_DOWN,
    NavEvent.MOVE_UP,
    NavEvent.NEXT_PART,
    NavEvent.PREV_PART,
    NavEvent.SWITCH_FOCUS,
    NavEvent.TOGGLE_DEBUG,
)


def make_document(parts: int = 1, paragraphs: int = 30, path: str = "") -> Document:
    raw = [
        RawPart(
            f"<h1>Part {index + 1}</h1>"
            + "".join(f"<p>Line {line}</p>" for line in range(paragraphs))
        )
        for index in range(parts)
    ]
    return open_document(raw, source_path=path)


def make_loader(documents: Dict[str, Document]):
    def loader(path: str) -> Document:
        if path not in documents:
            raise PackageReadError(f"Cannot read {path}", path=path)
        return documents[path]

    return loader


def make_machine(
    files=FILES,
    documents: Dict[str, Document] | None = None,
    viewport: Viewport | None = None,
) -> NavigationMachine:
    return NavigationMachine(
        files,
        loader=make_loader(documents or {}),
        viewport=viewport or Viewport(80, 10),
    )


def open_first(machine: NavigationMachine) -> None:
    result = machine.dispatch(NavEvent.ACTIVATE)
    assert result.status == "opened"


def assert_in_bounds(state: NavigationState) -> None:
    assert 0 <= state.selected_file_index < max(1, state.file_count)
    assert 0 <= state.current_part_index < max(1, state.part_count)
    assert 0 <= state.scroll_offset <= state.max_scroll


def test_initial_state() -> None:
    state = make_machine().state

    assert state.focus is Focus.FILE_LIST
    assert state.document is None
    assert state.debug_mode is False
    assert state.selected_file_index == 0
    assert state.files == FILES


def test_selection_saturates_at_last_file() -> None:
    machine = make_machine()

    machine.dispatch(NavEvent.MOVE_DOWN)
    machine.dispatch(NavEvent.MOVE_DOWN)
    assert machine.state.selected_file_index == 2

    result = machine.dispatch(NavEvent.MOVE_DOWN)
    assert result.status == "at_boundary"
    assert machine.state.selected_file_index == 2

    machine.dispatch(NavEvent.MOVE_UP)
    assert machine.state.selected_file_index == 1


def test_selection_with_no_files_stays_at_zero() -> None:
    machine = make_machine(files=())

    machine.dispatch(NavEvent.MOVE_DOWN)
    machine.dispatch(NavEvent.MOVE_UP)
    result = machine.dispatch(NavEvent.ACTIVATE)

    assert machine.state.selected_file_index == 0
    assert result.status == "no_files"
    assert machine.state.document is None


def test_activate_opens_document_and_focuses_content() -> None:
    document = make_document(parts=3, path=FILES[0])
    machine = make_machine(documents={FILES[0]: document})
    opened: List[object] = []
    machine.bus.subscribe("document.opened", opened.append)

    result = machine.dispatch(NavEvent.ACTIVATE)

    state = machine.state
    assert result.status == "opened"
    assert state.document is document
    assert state.open_file_index == 0
    assert state.focus is Focus.CONTENT
    assert (state.current_part_index, state.scroll_offset) == (0, 0)
    assert opened == [document]


def test_next_part_saturates_at_last_part() -> None:
    machine = make_machine(documents={FILES[0]: make_document(parts=5)})
    open_first(machine)

    for _ in range(4):
        assert machine.dispatch(NavEvent.NEXT_PART).status == "part_changed"
    assert machine.state.current_part_index == 4

    result = machine.dispatch(NavEvent.NEXT_PART)
    assert result.status == "at_boundary"
    assert result.message == "Already at last chapter"
    assert machine.state.current_part_index == 4


def test_part_change_resets_scroll() -> None:
    machine = make_machine(documents={FILES[0]: make_document(parts=2)})
    open_first(machine)
    for _ in range(5):
        machine.dispatch(NavEvent.MOVE_DOWN)
    assert machine.state.scroll_offset == 5

    machine.dispatch(NavEvent.NEXT_PART)
    assert machine.state.scroll_offset == 0

    machine.dispatch(NavEvent.MOVE_DOWN)
    machine.dispatch(NavEvent.PREV_PART)
    assert (machine.state.current_part_index, machine.state.scroll_offset) == (0, 0)


def test_failed_activate_leaves_state_untouched() -> None:
    machine = make_machine()
    failures: List[object] = []
    machine.bus.subscribe("load.failed", failures.append)
    before = machine.state

    result = machine.dispatch(NavEvent.ACTIVATE)

    assert machine.state is before
    assert machine.state.focus is Focus.FILE_LIST
    assert result.status == "load_failed"
    assert isinstance(result.error, PackageReadError)
    assert result.message == f"Cannot read {FILES[0]}"
    assert failures == [result.error]


def test_failed_activate_keeps_previous_document() -> None:
    document = make_document(parts=2)
    machine = make_machine(documents={FILES[0]: document})
    open_first(machine)
    machine.dispatch(NavEvent.NEXT_PART)
    machine.dispatch(NavEvent.SWITCH_FOCUS)
    machine.dispatch(NavEvent.MOVE_DOWN)
    before = machine.state

    result = machine.dispatch(NavEvent.ACTIVATE)

    assert result.status == "load_failed"
    assert machine.state is before
    assert machine.state.document is document
    assert machine.state.current_part_index == 1


def test_activate_replaces_open_document() -> None:
    first, second = make_document(parts=3), make_document(parts=2)
    machine = make_machine(documents={FILES[0]: first, FILES[1]: second})
    open_first(machine)
    machine.dispatch(NavEvent.NEXT_PART)
    machine.dispatch(NavEvent.MOVE_DOWN)
    machine.dispatch(NavEvent.SWITCH_FOCUS)
    machine.dispatch(NavEvent.MOVE_DOWN)

    machine.dispatch(NavEvent.ACTIVATE)

    state = machine.state
    assert state.document is second
    assert state.open_file_index == 1
    assert (state.current_part_index, state.scroll_offset) == (0, 0)
    assert state.focus is Focus.CONTENT


def test_switch_focus_keeps_indices() -> None:
    machine = make_machine(documents={FILES[0]: make_document(parts=3)})
    open_first(machine)
    machine.dispatch(NavEvent.NEXT_PART)
    machine.dispatch(NavEvent.MOVE_DOWN)
    before = machine.state

    result = machine.dispatch(NavEvent.SWITCH_FOCUS)

    after = machine.state
    assert result.status == "focus"
    assert after.focus is Focus.FILE_LIST
    assert (
        after.selected_file_index,
        after.current_part_index,
        after.scroll_offset,
    ) == (before.selected_file_index, before.current_part_index, before.scroll_offset)

    machine.dispatch(NavEvent.SWITCH_FOCUS)
    assert machine.state.focus is Focus.CONTENT


def test_scroll_saturates_at_max_scroll() -> None:
    machine = make_machine(documents={FILES[0]: make_document(paragraphs=30)})
    open_first(machine)

    assert machine.state.line_count == 31
    assert machine.state.max_scroll == 21

    for _ in range(50):
        machine.dispatch(NavEvent.MOVE_DOWN)
    assert machine.state.scroll_offset == 21
    assert machine.state.scroll_fraction == 1.0

    for _ in range(30):
        machine.dispatch(NavEvent.MOVE_UP)
    assert machine.state.scroll_offset == 0


def test_content_events_without_document_are_harmless() -> None:
    machine = make_machine()
    machine.dispatch(NavEvent.SWITCH_FOCUS)

    assert machine.dispatch(NavEvent.MOVE_DOWN).status == "at_boundary"
    assert machine.dispatch(NavEvent.NEXT_PART).status == "no_document"
    assert machine.state.scroll_offset == 0
    assert machine.state.visible_lines() == []


def test_events_for_the_other_pane_are_ignored() -> None:
    machine = make_machine()
    before = machine.state

    result = machine.dispatch(NavEvent.NEXT_PART)

    assert result.consumed is False
    assert result.status == "ignored"
    assert machine.state is before


def test_indices_stay_in_bounds_for_any_event_sequence() -> None:
    machine = make_machine(
        documents={FILES[0]: make_document(parts=3, paragraphs=12)},
        viewport=Viewport(40, 5),
    )
    open_first(machine)
    start = machine.state

    for sequence in product(MOVES, repeat=4):
        state = start
        for event in sequence:
            state = machine.transition(state, event).state
            assert_in_bounds(state)


def test_toggle_debug_twice_restores_visible_content() -> None:
    machine = make_machine(documents={FILES[0]: make_document(parts=2)})
    open_first(machine)
    before = machine.state.visible_lines()

    assert machine.dispatch(NavEvent.TOGGLE_DEBUG).status == "debug_on"
    assert machine.state.visible_lines() != before
    assert machine.dispatch(NavEvent.TOGGLE_DEBUG).status == "debug_off"

    assert machine.state.visible_lines() == before


def test_toggle_debug_reclamps_scroll() -> None:
    document = open_document([RawPart("<p>row</p>" * 30)])
    machine = make_machine(documents={FILES[0]: document})
    open_first(machine)
    for _ in range(25):
        machine.dispatch(NavEvent.MOVE_DOWN)
    assert machine.state.scroll_offset == 20

    machine.dispatch(NavEvent.TOGGLE_DEBUG)

    state = machine.state
    assert state.debug_mode is True
    assert state.line_count == 4
    assert state.scroll_offset == 0
    assert state.current_part_index == 0


def test_progress_fraction() -> None:
    machine = make_machine(
        documents={FILES[0]: make_document(parts=5), FILES[1]: make_document(parts=1)}
    )
    assert machine.state.progress_fraction == 0.0

    open_first(machine)
    machine.dispatch(NavEvent.NEXT_PART)
    machine.dispatch(NavEvent.NEXT_PART)
    assert machine.state.progress_fraction == 0.5

    machine.dispatch(NavEvent.SWITCH_FOCUS)
    machine.dispatch(NavEvent.MOVE_DOWN)
    machine.dispatch(NavEvent.ACTIVATE)
    assert machine.state.progress_fraction == 0.0


def test_resize_reclamps_scroll_and_rewraps() -> None:
    machine = make_machine(documents={FILES[0]: make_document(paragraphs=30)})
    open_first(machine)
    for _ in range(30):
        machine.dispatch(NavEvent.MOVE_DOWN)
    assert machine.state.scroll_offset == 21

    state = machine.resize(80, 40)

    assert state.viewport == Viewport(80, 40)
    assert state.max_scroll == 0
    assert state.scroll_offset == 0

    machine.resize(3, 40)
    assert machine.state.line_count > 31


def test_viewport_never_collapses_below_one_cell() -> None:
    assert Viewport(0, -3) == Viewport(1, 1)


def test_quit_halts_further_events() -> None:
    machine = make_machine()
    quits: List[object] = []
    machine.bus.subscribe("session.quit", quits.append)

    assert machine.dispatch(NavEvent.QUIT).status == "quit"
    assert machine.state.quitting is True
    assert quits == [None]

    result = machine.dispatch(NavEvent.MOVE_DOWN)
    assert result.status == "halted"
    assert result.consumed is False
    assert machine.state.selected_file_index == 0


def test_transition_does_not_commit_state() -> None:
    machine = make_machine()
    before = machine.state

    result = machine.transition(before, NavEvent.MOVE_DOWN)

    assert result.state.selected_file_index == 1
    assert machine.state is before


def test_register_pane_rejects_duplicate_focus() -> None:
    machine = make_machine()

    with pytest.raises(ValueError):
        machine.register_pane(FileListPane)
