"""Textual host for the viewer core."""

from .controller import TextualUIHooks, TextualViewerAdapter
from .painter import CellCanvas, CellMetrics, TextualPainter

__all__ = [
    "CellCanvas",
    "CellMetrics",
    "TextualPainter",
    "TextualUIHooks",
    "TextualViewerAdapter",
]
