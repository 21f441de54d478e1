"""Executable Textual app that hosts the viewer core."""

from __future__ import annotations

import argparse
import os
from typing import List, Optional, Sequence

try:  # pragma: no cover - imported only when the viewer is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use mdview_engine.adapters.textual.app"
    ) from exc

from rich.text import Text

from mdview_engine.config import SettlePolicy, ViewerConfig
from mdview_engine.document import SourceDocument
from mdview_engine.runtime import telemetry

from .controller import TextualUIHooks, TextualViewerAdapter


class MarkdownViewerApp(App[None]):
    """Scrollable document view driven by a fixed-rate frame tick."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#document-view {
		height: 1fr;
		padding: 0;
		content-align: left top;
		overflow: hidden;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, document: SourceDocument, *, config: ViewerConfig) -> None:
        super().__init__()
        self.document = document
        self.config = config
        self.title = config.title
        self.adapter: TextualViewerAdapter | None = None
        self._view: Static | None = None
        self._status: Static | None = None
        self._logger = telemetry.get_logger("mdview_engine.textual")

    def compose(self) -> ComposeResult:
        yield Header()
        self._view = Static("", id="document-view")
        yield self._view
        self._status = Static("", id="status-line")
        yield self._status
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_view=self._update_view,
            update_status=self._update_status,
            log=self._log_line,
        )
        self.adapter = TextualViewerAdapter(self.document, hooks, config=self.config)
        self._sync_size()
        self.set_interval(1 / self.config.fps, self._tick)

    def on_resize(self, event: events.Resize) -> None:
        del event
        self._sync_size()

    def on_key(self, event: events.Key) -> None:
        if self.adapter and self.adapter.handle_key(event.key):
            event.stop()

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        if self.adapter:
            self.adapter.queue_wheel(1)
            event.stop()

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        if self.adapter:
            self.adapter.queue_wheel(-1)
            event.stop()

    def _sync_size(self) -> None:
        if self.adapter and self._view is not None:
            size = self._view.size
            if size.width and size.height:
                self.adapter.queue_resize(size.width, size.height)

    def _tick(self) -> None:
        if not self.adapter:
            return
        result = self.adapter.tick()
        if result.quit:
            self.exit()

    def _update_view(self, rows: List[Text]) -> None:
        if self._view is not None:
            self._view.update(Text("\n").join(rows))

    def _update_status(self, status: str) -> None:
        if self._status is not None:
            self._status.update(status)

    def _log_line(self, line: str) -> None:
        self._logger.debug(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = ViewerConfig.from_env()
    parser = argparse.ArgumentParser(description="View a Markdown file in the terminal.")
    parser.add_argument(
        "path",
        nargs="?",
        default=defaults.document_path,
        help=f"Document to display (default: {defaults.document_path})",
    )
    parser.add_argument(
        "--settle-policy",
        choices=[policy.value for policy in SettlePolicy],
        default=defaults.settle_policy.value,
        help="How over-scroll is corrected (default: incremental)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=defaults.fps,
        help=f"Frame tick rate (default: {defaults.fps})",
    )
    parser.add_argument(
        "--log-preset",
        default=os.environ.get("MDVIEW_LOG_PRESET", "headless"),
        help="Telemetry preset: development, headless, production or profiling",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    config = ViewerConfig.from_env(
        document_path=args.path,
        settle_policy=args.settle_policy,
        fps=args.fps,
    )
    document = SourceDocument.from_path(config.document_path)
    telemetry.record_event(
        "session.start",
        data={"document": document.name, "lines": document.line_count},
    )
    MarkdownViewerApp(document, config=config).run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
