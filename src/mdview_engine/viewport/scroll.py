"""Scroll offset ownership, clamping and post-layout settling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from mdview_engine.config import SettlePolicy
from mdview_engine.runtime import telemetry

from .scheduler import RenderScheduler


@dataclass(slots=True)
class ViewportState:
    """Visible window into the document; only the controller mutates it."""

    scroll_offset: int = 0
    width: int = 1024
    height: int = 768


class ScrollController:
    """Applies scroll input and pulls an over-scrolled view back into range."""

    def __init__(
        self,
        viewport: Optional[ViewportState] = None,
        *,
        scheduler: Optional[RenderScheduler] = None,
        margin: int = 10,
        scroll_unit: int = 18,
        settle_step: int = 18,
        policy: SettlePolicy = SettlePolicy.INCREMENTAL,
        logger_name: str | None = None,
    ) -> None:
        if settle_step <= 0:
            raise ValueError("settle_step must be > 0")
        self.viewport = viewport or ViewportState()
        self.scheduler = scheduler
        self.margin = margin
        self.scroll_unit = scroll_unit
        self.settle_step = settle_step
        self.policy = policy
        self._logger_name = logger_name

    @property
    def scroll_offset(self) -> int:
        return self.viewport.scroll_offset

    @property
    def origin_y(self) -> int:
        """Document y of the first block in viewport coordinates."""

        return self.margin - self.viewport.scroll_offset

    @property
    def content_width(self) -> int:
        return max(1, self.viewport.width - 2 * self.margin)

    def apply_delta(self, raw_delta: int) -> bool:
        """Shift the offset by ``raw_delta`` (already in pixels), clamped at 0."""

        before = self.viewport.scroll_offset
        self.viewport.scroll_offset = max(0, before + int(raw_delta))
        changed = self.viewport.scroll_offset != before
        if changed:
            self._mark_dirty("scroll")
        return changed

    def scroll_by_lines(self, lines: float) -> bool:
        return self.apply_delta(int(lines * self.scroll_unit))

    def resize(self, width: int, height: int) -> bool:
        if (width, height) == (self.viewport.width, self.viewport.height):
            return False
        self.viewport.width = width
        self.viewport.height = height
        self._mark_dirty("resize")
        return True

    def settle(
        self,
        document_bottom_y: int,
        viewport_height: Optional[int] = None,
        margin_constant: Optional[int] = None,
    ) -> bool:
        """Correct over-scroll after a layout pass.

        Returns ``True`` when the offset moved and another pass is needed.
        The incremental policy moves one ``settle_step`` per call, so a large
        overshoot takes several frames; the snap policy closes the whole gap.
        """

        height = self.viewport.height if viewport_height is None else viewport_height
        margin = self.margin if margin_constant is None else margin_constant
        limit = height - margin
        offset = self.viewport.scroll_offset
        if document_bottom_y >= limit or offset == 0:
            return False

        if self.policy is SettlePolicy.SNAP:
            step = limit - document_bottom_y
        else:
            step = self.settle_step
        self.viewport.scroll_offset = max(0, offset - step)
        telemetry.record_event(
            "scroll.settle",
            level="debug",
            data={
                "from": offset,
                "to": self.viewport.scroll_offset,
                "bottom_y": document_bottom_y,
                "policy": self.policy.value,
            },
            logger_name=self._logger_name,
        )
        return True

    def _mark_dirty(self, reason: str) -> None:
        if self.scheduler is not None:
            self.scheduler.mark_dirty(reason)


__all__ = ["ScrollController", "ViewportState"]
