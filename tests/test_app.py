from __future__ import annotations

import pytest

from bookrat.adapters.textual.app import ReaderApp, _parse_args, render_line
from bookrat.document import BlockKind, RenderedLine, TextRun
from bookrat.runtime import telemetry


def test_parse_args_defaults(monkeypatch) -> None:
    monkeypatch.delenv("BOOKRAT_DIRECTORY", raising=False)
    monkeypatch.delenv("BOOKRAT_LOG_PRESET", raising=False)

    args = _parse_args([])

    assert args.directory == "."
    assert args.extensions is None
    assert args.log_preset == "production"


def test_parse_args_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("BOOKRAT_DIRECTORY", "/library")
    monkeypatch.setenv("BOOKRAT_LOG_PRESET", "Performance")

    args = _parse_args(["--extension", ".epub", "--extension", "kepub"])

    assert args.directory == "/library"
    assert args.extensions == [".epub", "kepub"]
    assert args.log_preset == "performance"


def test_parse_args_rejects_unknown_preset() -> None:
    with pytest.raises(SystemExit):
        _parse_args(["--log-preset", "loud"])


def test_render_line_styles_kind_and_emphasis() -> None:
    line = RenderedLine(
        BlockKind.HEADING, (TextRun("Chapter "), TextRun("One", emphasis=True)), level=1
    )

    text = render_line(line)

    assert text.plain == "Chapter One"
    assert str(text.style) == "bold"
    assert [(span.start, span.end, str(span.style)) for span in text.spans] == [
        (8, 11, "italic")
    ]


def test_app_keeps_directory_and_extensions() -> None:
    app = ReaderApp("/library", extensions=[".epub", ".kepub"])

    assert app.adapter is None
    assert app._book_directory == "/library"
    assert app._book_extensions == (".epub", ".kepub")


def test_configure_rejects_conflicting_arguments() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="production")
    with pytest.raises(ValueError):
        telemetry.configure(preset="loud")


def test_span_reraises_errors() -> None:
    with pytest.raises(KeyError):
        with telemetry.span("test::span", metadata={"case": "raise"}):
            raise KeyError("missing")


@pytest.mark.parametrize("preset", telemetry.PRESETS)
def test_every_preset_builds_a_config(preset: str) -> None:
    assert telemetry.preset_config(preset.upper()) is not None


def test_span_handle_collects_metadata() -> None:
    with telemetry.span("test::metadata", component=True, metadata={"n": 1}) as handle:
        handle.add_metadata("parts", 3)

    assert handle.component == "test::metadata"
    assert handle.metadata == {"n": "1", "parts": "3"}
