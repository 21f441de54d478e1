"""Text measurement boundary and a fixed-advance implementation."""

from __future__ import annotations

import math
import unicodedata
from dataclasses import dataclass
from typing import List, Protocol, Tuple

from rich.cells import cell_len

from mdview_engine.fonts import FontKey


class MeasureError(RuntimeError):
    """Raised by a measurer that cannot size ``text`` with the given font."""

    def __init__(self, message: str, *, text: str = "", font: FontKey | None = None):
        super().__init__(message)
        self.text = text
        self.font = font


class TextMeasurer(Protocol):
    """Sizing capability supplied by the host's font layer."""

    def measure_wrapped(
        self, text: str, font: FontKey, size: int, max_width: int
    ) -> int:
        """Height of ``text`` word-wrapped to ``max_width``."""
        ...

    def measure_line(self, text: str, font: FontKey, size: int) -> Tuple[int, int]:
        """``(width, height)`` of ``text`` on one unwrapped line."""
        ...


@dataclass(frozen=True, slots=True)
class MonospaceMeasurer:
    """Measures text as if every glyph had the same advance.

    Good enough for terminal hosts and deterministic for tests. Bold faces
    get ``bold_extra`` added to the advance ratio.
    """

    advance_ratio: float = 0.5
    line_spacing: float = 1.0
    bold_extra: float = 0.0

    def advance(self, font: FontKey, size: int) -> float:
        ratio = self.advance_ratio
        if font.name == "bold":
            ratio += self.bold_extra
        return size * ratio

    def line_height(self, size: int) -> int:
        return max(1, int(round(size * self.line_spacing)))

    def columns(self, font: FontKey, size: int, max_width: int) -> int:
        return max(1, int(max_width // self.advance(font, size)))

    def wrap(self, text: str, font: FontKey, size: int, max_width: int) -> List[str]:
        """Greedy word wrap on cell widths; always returns at least one line.

        Words break on ASCII spaces only, so no-break spaces stay joined.
        Words wider than a line are cut at the column limit.
        """

        self._check(text, font)
        width = self.columns(font, size, max_width)
        lines: List[str] = []
        current = ""
        for word in text.expandtabs().split(" "):
            if not word:
                continue
            for piece in _chop(word, width):
                candidate = f"{current} {piece}" if current else piece
                if not current or text_cells(candidate) <= width:
                    current = candidate
                else:
                    lines.append(current)
                    current = piece
        if current:
            lines.append(current)
        return lines or [""]

    def measure_wrapped(
        self, text: str, font: FontKey, size: int, max_width: int
    ) -> int:
        return len(self.wrap(text, font, size, max_width)) * self.line_height(size)

    def measure_line(self, text: str, font: FontKey, size: int) -> Tuple[int, int]:
        self._check(text, font)
        cells = text_cells(text.expandtabs())
        width = math.ceil(cells * self.advance(font, size))
        return width, self.line_height(size)

    @staticmethod
    def _check(text: str, font: FontKey) -> None:
        for char in text:
            if char != "\t" and unicodedata.category(char) == "Cc":
                raise MeasureError(
                    f"Unmappable character {char!r} for font '{font}'",
                    text=text,
                    font=font,
                )


def char_cells(char: str) -> int:
    """Terminal cells taken by ``char``; format characters take none."""

    if unicodedata.category(char) == "Cf":
        return 0
    return cell_len(char)


def text_cells(text: str) -> int:
    return sum(char_cells(char) for char in text)


def _chop(word: str, width: int) -> List[str]:
    if text_cells(word) <= width:
        return [word]
    pieces: List[str] = []
    current = ""
    used = 0
    for char in word:
        size = char_cells(char)
        if current and used + size > width:
            pieces.append(current)
            current, used = "", 0
        current += char
        used += size
    if current:
        pieces.append(current)
    return pieces


__all__ = [
    "MeasureError",
    "MonospaceMeasurer",
    "TextMeasurer",
    "char_cells",
    "text_cells",
]
