"""Adapter that feeds Textual input into a ViewerSession and back out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from rich.text import Text

from mdview_engine.config import ViewerConfig
from mdview_engine.document import SourceDocument
from mdview_engine.layout import MonospaceMeasurer
from mdview_engine.viewport import FrameInput, FrameResult, ViewerSession

from .painter import CellMetrics, TextualPainter


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_view: Callable[[List[Text]], None]
    update_status: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


# Key name -> lines to scroll for one frame.
KEY_LINES: Dict[str, int] = {
    "down": 1,
    "j": 1,
    "up": -1,
    "k": -1,
}
QUIT_KEYS = frozenset({"q", "Q"})


class TextualViewerAdapter:
    """Collects host input between ticks and runs one frame per tick."""

    def __init__(
        self,
        document: SourceDocument,
        hooks: TextualUIHooks,
        *,
        config: Optional[ViewerConfig] = None,
        measurer: Optional[MonospaceMeasurer] = None,
    ) -> None:
        self.config = config or ViewerConfig()
        self.hooks = hooks
        self.measurer = measurer or MonospaceMeasurer()
        self.cells = CellMetrics.for_layout(self.config.metrics, self.measurer)
        self.painter = TextualPainter(
            self.measurer,
            self.cells,
            metrics=self.config.metrics,
            on_frame=hooks.update_view,
        )
        self.session = ViewerSession.create(
            document,
            self.painter,
            config=self.config,
            measurer=self.measurer,
            logger_name="mdview_engine.textual",
        )
        self._pending = FrameInput()

    def queue_wheel(self, notches: float) -> None:
        self._pending.wheel += notches

    def queue_resize(self, cols: int, rows: int) -> None:
        self._pending.resize = self.cells.pixels(cols, rows)

    def request_quit(self) -> None:
        self._pending.quit = True

    def handle_key(self, key: str) -> bool:
        """Map a Textual key name onto pending input; ``True`` if consumed."""

        if key in QUIT_KEYS:
            self.request_quit()
            return True
        if key in KEY_LINES:
            self._pending.held = KEY_LINES[key]
            return True
        page = max(1, self.session.viewport.height // self.cells.height - 1)
        if key in {"pagedown", "space"}:
            self.queue_wheel(page)
            return True
        if key == "pageup":
            self.queue_wheel(-page)
            return True
        if key == "home":
            self.session.controller.apply_delta(-self.session.controller.scroll_offset)
            return True
        return False

    def tick(self) -> FrameResult:
        """Run one frame with everything queued since the previous tick."""

        events, self._pending = self._pending, FrameInput()
        result = self.session.run_frame(events)
        if result.rendered:
            self.hooks.update_status(self._status_line(result))
            self._log_frame(result)
        return result

    def _status_line(self, result: FrameResult) -> str:
        blocks = len(result.layout) if result.layout is not None else 0
        label = "settling" if result.settling else "ready"
        return (
            f"{self.session.document.name} | offset {result.scroll_offset}px"
            f" | {blocks} blocks | {label}"
        )

    def _log_frame(self, result: FrameResult) -> None:
        bottom = result.layout.bottom_y if result.layout is not None else None
        self.hooks.log(
            f"frame={result.frame} offset={result.scroll_offset}"
            f" bottom={bottom} settling={result.settling}"
        )


__all__ = ["KEY_LINES", "TextualUIHooks", "TextualViewerAdapter"]
