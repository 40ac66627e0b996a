"""Executable Textual app hosting the reader."""

from __future__ import annotations

import argparse
import os
from typing import Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when the reader is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.containers import Horizontal
    from textual.widgets import Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use bookrat.adapters.textual.app"
    ) from exc

from bookrat.document import BlockKind, RenderedLine
from bookrat.navigation import NavigationMachine
from bookrat.runtime import telemetry
from bookrat.sources import DEFAULT_EXTENSIONS, discover_files

from .controller import ContentView, TextualReaderAdapter, TextualUIHooks, list_window

KIND_STYLES = {
    BlockKind.HEADING: "bold",
    BlockKind.QUOTE: "dim",
}


def render_line(line: RenderedLine) -> Text:
    text = Text(style=KIND_STYLES.get(line.kind, ""))
    for run in line.runs:
        text.append(run.text, style="italic" if run.emphasis else "")
    return text


class ReaderApp(App[None]):
    """File list on the left, chapter text on the right, help bar below."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#panes {
		height: 1fr;
	}

	#file-list {
		width: 30%;
		height: 100%;
		border: round $panel;
		padding: 0 1;
	}

	#content {
		width: 70%;
		height: 100%;
		border: round $panel;
		padding: 0 1;
	}

	#file-list.focused, #content.focused {
		border: round $accent;
	}

	#help-bar {
		height: 3;
		border: round $panel;
		color: $text-muted;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", show=False),
        # Tab would otherwise move Textual's widget focus before on_key sees it.
        Binding("tab", "reader_key('tab')", "Switch View", show=False, priority=True),
    ]

    def __init__(
        self,
        directory: str = ".",
        *,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    ) -> None:
        super().__init__()
        self._book_directory = directory
        self._book_extensions = tuple(extensions)
        self.adapter: TextualReaderAdapter | None = None
        self._files_widget: Static | None = None
        self._content_widget: Static | None = None
        self._help_widget: Static | None = None
        self._reader_logger = telemetry.get_logger("bookrat.ui")

    def compose(self) -> ComposeResult:
        with Horizontal(id="panes"):
            self._files_widget = Static("", id="file-list")
            self._files_widget.border_title = "EPUB Files"
            yield self._files_widget
            self._content_widget = Static("", id="content")
            yield self._content_widget
        self._help_widget = Static("", id="help-bar")
        yield self._help_widget

    def on_mount(self) -> None:
        files = discover_files(self._book_directory, extensions=self._book_extensions)
        hooks = TextualUIHooks(
            update_files=self._update_files,
            update_content=self._update_content,
            update_status=self._update_status,
            show_help=self._show_help,
            notify_error=self._notify_error,
            request_exit=self.exit,
            log=self._log_line,
        )
        self.adapter = TextualReaderAdapter(NavigationMachine(files), hooks)
        self.call_after_refresh(self._sync_viewport)

    def on_resize(self, event: events.Resize) -> None:
        del event
        self.call_after_refresh(self._sync_viewport)

    def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        if self.adapter.handle_textual_key(event.key) is not None:
            event.stop()

    def action_reader_key(self, key: str) -> None:
        if self.adapter:
            self.adapter.handle_textual_key(key)

    def _sync_viewport(self) -> None:
        if self.adapter and self._content_widget:
            size = self._content_widget.content_size
            self.adapter.resize(size.width, size.height)

    def _update_files(self, labels: Sequence[str], selected: int, focused: bool) -> None:
        if not self._files_widget:
            return
        text = Text()
        start, end = list_window(
            len(labels), selected, self._files_widget.content_size.height
        )
        for index in range(start, end):
            if index > start:
                text.append("\n")
            text.append(labels[index], style="black on white" if index == selected else "")
        if not labels:
            text.append("No EPUB files found", style="dim")
        self._files_widget.set_class(focused, "focused")
        self._files_widget.update(text)

    def _update_content(self, view: ContentView) -> None:
        if not self._content_widget:
            return
        self._content_widget.border_title = view.title
        self._content_widget.set_class(view.focused, "focused")
        if view.placeholder is not None:
            self._content_widget.update(Text(view.placeholder, style="dim"))
            return
        self._content_widget.update(Text("\n").join(render_line(line) for line in view.lines))

    def _update_status(self, status: str) -> None:
        if self._content_widget:
            self._content_widget.border_subtitle = status

    def _show_help(self, help_text: str) -> None:
        if self._help_widget:
            self._help_widget.update(help_text)

    def _notify_error(self, message: str) -> None:
        self.notify(message, title="Cannot open book", severity="error")

    def _log_line(self, line: str) -> None:
        self._reader_logger.debug(line)


def _env_choice(key: str, choices: Tuple[str, ...], fallback: str) -> str:
    value = os.environ.get(key)
    if value is None or value.lower() not in choices:
        return fallback
    return value.lower()


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Read EPUB books in the terminal.")
    parser.add_argument(
        "directory",
        nargs="?",
        default=os.environ.get("BOOKRAT_DIRECTORY", "."),
        help="Directory scanned for books at startup (default: current directory)",
    )
    parser.add_argument(
        "--extension",
        action="append",
        dest="extensions",
        help="File extension to list; repeatable (default: .epub)",
    )
    parser.add_argument(
        "--log-preset",
        choices=telemetry.PRESETS,
        default=_env_choice("BOOKRAT_LOG_PRESET", telemetry.PRESETS, "production"),
        help="Telemetry preset (default: production, writes bookrat.log)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    telemetry.record_event("session.start", data={"directory": args.directory})
    app = ReaderApp(args.directory, extensions=args.extensions or DEFAULT_EXTENSIONS)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual entry point
    main()
