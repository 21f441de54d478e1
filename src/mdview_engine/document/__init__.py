"""Session-scoped source document."""

from .source import DocumentLoadError, SourceDocument

__all__ = ["DocumentLoadError", "SourceDocument"]
