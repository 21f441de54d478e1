"""Text measurement and block layout."""

from .engine import BlockLayoutEngine
from .measure import MeasureError, MonospaceMeasurer, TextMeasurer

__all__ = ["BlockLayoutEngine", "MeasureError", "MonospaceMeasurer", "TextMeasurer"]
