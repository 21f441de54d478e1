"""One-frame pipeline: input, scroll, gated layout and paint, settling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple

from mdview_engine.blocks.models import LayoutResult, PositionedBlock
from mdview_engine.config import ViewerConfig
from mdview_engine.document import SourceDocument
from mdview_engine.fonts import FontSet
from mdview_engine.layout import BlockLayoutEngine, MonospaceMeasurer, TextMeasurer
from mdview_engine.runtime import telemetry

from .scheduler import RenderScheduler
from .scroll import ScrollController, ViewportState


@dataclass(slots=True)
class FrameInput:
    """Input gathered by the host since the previous frame.

    ``wheel`` is in wheel notches (positive moves down the document);
    ``held`` is the direction of a held scroll key (-1, 0 or 1) and is
    applied once per frame.
    """

    quit: bool = False
    wheel: float = 0.0
    held: int = 0
    resize: Optional[Tuple[int, int]] = None


@dataclass(frozen=True, slots=True)
class FrameResult:
    frame: int
    rendered: bool
    quit: bool = False
    layout: Optional[LayoutResult] = None
    settling: bool = False
    scroll_offset: int = 0


class Painter(Protocol):
    """Host paint layer; receives the full block list of a dirty frame."""

    def paint(
        self, blocks: Sequence[PositionedBlock], viewport: ViewportState
    ) -> None:
        ...


class ViewerSession:
    """Owns the per-session state and runs frames in order."""

    def __init__(
        self,
        document: SourceDocument,
        engine: BlockLayoutEngine,
        painter: Painter,
        controller: ScrollController,
        scheduler: RenderScheduler,
        *,
        held_lines_per_frame: int = 1,
        logger_name: str | None = None,
    ) -> None:
        self.document = document
        self.engine = engine
        self.painter = painter
        self.controller = controller
        self.scheduler = scheduler
        self.held_lines_per_frame = held_lines_per_frame
        self.frame = 0
        self._logger_name = logger_name

    @classmethod
    def create(
        cls,
        document: SourceDocument,
        painter: Painter,
        *,
        config: Optional[ViewerConfig] = None,
        measurer: Optional[TextMeasurer] = None,
        logger_name: str | None = None,
    ) -> "ViewerSession":
        """Wire a session from a ``ViewerConfig``."""

        cfg = config or ViewerConfig()
        metrics = cfg.metrics
        scheduler = RenderScheduler(logger_name=logger_name)
        controller = ScrollController(
            ViewportState(width=cfg.width, height=cfg.height),
            scheduler=scheduler,
            margin=metrics.margin,
            scroll_unit=cfg.effective_scroll_unit,
            settle_step=cfg.effective_settle_step,
            policy=cfg.settle_policy,
            logger_name=logger_name,
        )
        engine = BlockLayoutEngine(
            measurer or MonospaceMeasurer(),
            fonts=FontSet.from_paths(cfg.regular_font_path, cfg.bold_font_path),
            metrics=metrics,
            logger_name=logger_name,
        )
        return cls(
            document,
            engine,
            painter,
            controller,
            scheduler,
            held_lines_per_frame=cfg.held_lines_per_frame,
            logger_name=logger_name,
        )

    @property
    def viewport(self) -> ViewportState:
        return self.controller.viewport

    def run_frame(self, frame_input: Optional[FrameInput] = None) -> FrameResult:
        events = frame_input or FrameInput()
        self.frame += 1
        if events.quit:
            telemetry.record_event(
                "session.quit",
                data={"frame": self.frame},
                logger_name=self._logger_name,
            )
            return FrameResult(
                frame=self.frame,
                rendered=False,
                quit=True,
                scroll_offset=self.controller.scroll_offset,
            )

        if events.resize is not None:
            self.controller.resize(*events.resize)
        if events.wheel:
            self.controller.scroll_by_lines(events.wheel)
        if events.held:
            self.controller.scroll_by_lines(events.held * self.held_lines_per_frame)

        if not self.scheduler.needs_render():
            return FrameResult(
                frame=self.frame,
                rendered=False,
                scroll_offset=self.controller.scroll_offset,
            )
        return self._render()

    def _render(self) -> FrameResult:
        with telemetry.span(
            "frame::render",
            logger_name=self._logger_name,
            component="frame",
            metadata={"frame": self.frame, "reason": self.scheduler.reason},
        ) as handle:
            result = self.engine.layout(
                self.document.lines,
                self.controller.origin_y,
                self.controller.content_width,
            )
            self.painter.paint(result.blocks, self.viewport)
            settling = self.controller.settle(
                result.bottom_y, self.viewport.height, self.engine.metrics.margin
            )
            self.scheduler.complete(settle_requested=settling)
            handle.add_metadata("settling", settling)
        return FrameResult(
            frame=self.frame,
            rendered=True,
            layout=result,
            settling=settling,
            scroll_offset=self.controller.scroll_offset,
        )

    def run_until_idle(self, max_frames: int = 1000) -> List[FrameResult]:
        """Run input-free frames until the scheduler reports a clean state."""

        results: List[FrameResult] = []
        while self.scheduler.dirty and len(results) < max_frames:
            results.append(self.run_frame())
        return results


__all__ = ["FrameInput", "FrameResult", "Painter", "ViewerSession"]
