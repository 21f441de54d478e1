"""Dirty-flag gate deciding whether a frame re-runs layout and paint."""

from __future__ import annotations

from mdview_engine.runtime import telemetry


class RenderScheduler:
    """Single boolean gate, set on the first frame and after any change.

    There is no layout cache behind the flag: a clean frame simply does
    nothing, and the next dirty frame recomputes everything.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._dirty = True
        self._reason = "first_frame"
        self._logger_name = logger_name
        self.frames_rendered = 0
        self.frames_skipped = 0

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def reason(self) -> str | None:
        return self._reason if self._dirty else None

    def mark_dirty(self, reason: str = "external") -> None:
        if not self._dirty:
            self._reason = reason
        self._dirty = True

    def needs_render(self) -> bool:
        """Return the gate state and count skipped frames."""

        if not self._dirty:
            self.frames_skipped += 1
        return self._dirty

    def complete(self, *, settle_requested: bool = False) -> None:
        """Record a finished layout+paint pass.

        The flag stays set when the scroll controller asked for another
        settling pass.
        """

        self.frames_rendered += 1
        if settle_requested:
            self._dirty = True
            self._reason = "settle"
        else:
            self._dirty = False
            self._reason = ""
        telemetry.record_event(
            "scheduler.complete",
            level="debug",
            data={"frame": self.frames_rendered, "dirty": self._dirty},
            logger_name=self._logger_name,
        )


__all__ = ["RenderScheduler"]
