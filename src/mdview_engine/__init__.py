"""UI-agnostic Markdown document layout and scrolling core."""

__all__ = [
    "adapters",
    "blocks",
    "config",
    "document",
    "fonts",
    "layout",
    "runtime",
    "viewport",
]

__version__ = "0.1.0"
