"""Block kinds, positioned blocks and the line classifier."""

from .classifier import classify, classify_at, iter_classified
from .models import (
    BlockKind,
    Blockquote,
    Classification,
    CodeBlock,
    Empty,
    Header,
    LayoutResult,
    Paragraph,
    PositionedBlock,
    Separator,
    SetextRule,
    SetextTitle,
)

__all__ = [
    "BlockKind",
    "Blockquote",
    "Classification",
    "CodeBlock",
    "Empty",
    "Header",
    "LayoutResult",
    "Paragraph",
    "PositionedBlock",
    "Separator",
    "SetextRule",
    "SetextTitle",
    "classify",
    "classify_at",
    "iter_classified",
]
