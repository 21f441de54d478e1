"""Scroll state, dirty tracking and the frame pipeline."""

from .frame import FrameInput, FrameResult, Painter, ViewerSession
from .scheduler import RenderScheduler
from .scroll import ScrollController, ViewportState

__all__ = [
    "FrameInput",
    "FrameResult",
    "Painter",
    "RenderScheduler",
    "ScrollController",
    "ViewerSession",
    "ViewportState",
]
