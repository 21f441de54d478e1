"""Block kinds produced by the classifier and blocks produced by layout."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, NamedTuple, Optional, Tuple, Union

from mdview_engine.fonts import FontSpec


@dataclass(frozen=True, slots=True)
class Separator:
    """Horizontal rule line (``---``, ``___`` or ``***``)."""


@dataclass(frozen=True, slots=True)
class Empty:
    """Blank line; contributes no block."""


@dataclass(frozen=True, slots=True)
class Header:
    level: int
    text: str


@dataclass(frozen=True, slots=True)
class Blockquote:
    text: str


@dataclass(frozen=True, slots=True)
class SetextTitle:
    text: str


@dataclass(frozen=True, slots=True)
class SetextRule:
    """Underline emitted below a ``SetextTitle``."""


@dataclass(frozen=True, slots=True)
class Paragraph:
    text: str


@dataclass(frozen=True, slots=True)
class CodeBlock:
    """Fenced code; ``lines`` excludes both fence lines."""

    lines: Tuple[str, ...]
    info: str = ""
    closed: bool = True


BlockKind = Union[
    Separator,
    Empty,
    Header,
    Blockquote,
    SetextTitle,
    SetextRule,
    Paragraph,
    CodeBlock,
]

BlockStyle = Literal["text", "heading", "title", "rule", "quote", "code"]


class Classification(NamedTuple):
    kind: BlockKind
    consumed: int


@dataclass(frozen=True, slots=True)
class PositionedBlock:
    """One laid-out block; the only thing painters consume.

    Offsets are relative to ``top_y`` (vertical) and ``left`` (horizontal).
    """

    kind: BlockKind
    top_y: int
    height: int
    left: int = 0
    width: int = 0
    font: Optional[FontSpec] = None
    text_offset: int = 0
    text_inset: int = 0
    rule_offset: Optional[int] = None
    fill: bool = False
    style: BlockStyle = "text"
    degraded: bool = False

    @property
    def bottom_y(self) -> int:
        return self.top_y + self.height

    @property
    def rule_y(self) -> Optional[int]:
        if self.rule_offset is None:
            return None
        return self.top_y + self.rule_offset

    def visible_in(self, viewport_height: int) -> bool:
        return self.bottom_y >= 0 and self.top_y <= viewport_height


@dataclass(frozen=True, slots=True)
class LayoutResult:
    blocks: Tuple[PositionedBlock, ...]
    bottom_y: int

    def __len__(self) -> int:
        return len(self.blocks)
