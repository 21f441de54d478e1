"""Rasterises positioned blocks onto a grid of terminal cells."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import groupby
from typing import Callable, List, Optional, Sequence

from rich.text import Text

from mdview_engine.blocks.models import (
    Blockquote,
    CodeBlock,
    Header,
    Paragraph,
    PositionedBlock,
    SetextTitle,
)
from mdview_engine.config import LayoutMetrics
from mdview_engine.layout import MonospaceMeasurer
from mdview_engine.layout.measure import char_cells, text_cells
from mdview_engine.viewport import ViewportState

RULE_CHAR = "─"

STYLES = {
    "text": "",
    "heading": "bold",
    "title": "bold underline",
    "rule": "grey50",
    "quote": "grey35 on grey85",
    "quote_fill": "on grey85",
    "code": "reverse",
}


@dataclass(frozen=True, slots=True)
class CellMetrics:
    """Pixel size of one terminal cell."""

    width: int = 9
    height: int = 18

    @classmethod
    def for_layout(
        cls, metrics: LayoutMetrics, measurer: MonospaceMeasurer
    ) -> "CellMetrics":
        # One body-font glyph per cell keeps paragraph wrapping aligned.
        width = max(1, int(metrics.font_size * measurer.advance_ratio))
        return cls(width=width, height=measurer.line_height(metrics.font_size))

    def col(self, x: int) -> int:
        return x // self.width

    def row(self, y: int) -> int:
        return y // self.height

    def pixels(self, cols: int, rows: int) -> tuple[int, int]:
        return cols * self.width, rows * self.height


class CellCanvas:
    """Character grid with one style string per cell."""

    def __init__(self, rows: int, cols: int) -> None:
        self.rows = rows
        self.cols = cols
        self._chars = [[" "] * cols for _ in range(rows)]
        self._styles = [[""] * cols for _ in range(rows)]

    def put(
        self, row: int, col: int, text: str, style: str = "", limit: int | None = None
    ) -> None:
        """Write ``text`` from ``col``; wide glyphs take two cells.

        The second cell of a wide glyph holds ``""`` so rows keep their
        width when joined. Zero-width characters ride on the previous cell.
        ``limit`` caps how many cells the text may use.
        """

        if not 0 <= row < self.rows:
            return
        end = self.cols if limit is None else min(self.cols, col + limit)
        cursor = col
        last = -1
        for char in text:
            size = char_cells(char)
            if size == 0:
                if last >= 0:
                    self._chars[row][last] += char
                continue
            if cursor + size > end:
                break
            last = -1
            if cursor >= 0:
                last = cursor
                self._chars[row][cursor] = char
                self._styles[row][cursor] = style
                for extra in range(1, size):
                    self._chars[row][cursor + extra] = ""
                    self._styles[row][cursor + extra] = style
            cursor += size

    def fill(self, row: int, col: int, width: int, style: str) -> None:
        self.put(row, col, " " * width, style)

    def char_at(self, row: int, col: int) -> str:
        return self._chars[row][col]

    def style_at(self, row: int, col: int) -> str:
        return self._styles[row][col]

    def to_text(self) -> List[Text]:
        lines: List[Text] = []
        for chars, styles in zip(self._chars, self._styles):
            line = Text()
            for style, run in groupby(zip(chars, styles), key=lambda cell: cell[1]):
                line.append("".join(char for char, _ in run), style=style or None)
            lines.append(line)
        return lines


class TextualPainter:
    """Paint layer for the Textual host.

    ``on_frame`` receives the rendered rows after every dirty frame.
    """

    def __init__(
        self,
        measurer: MonospaceMeasurer,
        cells: CellMetrics,
        *,
        metrics: Optional[LayoutMetrics] = None,
        on_frame: Optional[Callable[[List[Text]], None]] = None,
    ) -> None:
        self.measurer = measurer
        self.cells = cells
        self.metrics = metrics or LayoutMetrics()
        self.on_frame = on_frame
        self.last_canvas: Optional[CellCanvas] = None

    def paint(
        self, blocks: Sequence[PositionedBlock], viewport: ViewportState
    ) -> None:
        canvas = self.render(blocks, viewport)
        self.last_canvas = canvas
        if self.on_frame is not None:
            self.on_frame(canvas.to_text())

    def render(
        self, blocks: Sequence[PositionedBlock], viewport: ViewportState
    ) -> CellCanvas:
        canvas = CellCanvas(
            rows=max(1, viewport.height // self.cells.height),
            cols=max(1, viewport.width // self.cells.width),
        )
        for block in blocks:
            if block.degraded or not block.visible_in(viewport.height):
                continue
            self._paint_block(canvas, block)
        return canvas

    def _paint_block(self, canvas: CellCanvas, block: PositionedBlock) -> None:
        cells = self.cells
        col = cells.col(block.left)
        span = max(1, block.width // cells.width)
        kind = block.kind

        if block.fill:
            first = cells.row(block.top_y)
            last = cells.row(block.bottom_y - 1)
            for row in range(first, last + 1):
                canvas.fill(row, col, span, STYLES["quote_fill"])

        text_row = cells.row(block.top_y + block.text_offset)
        text_col = cells.col(block.left + block.text_inset)
        style = STYLES[block.style]

        if isinstance(kind, (Header, SetextTitle, Blockquote)):
            canvas.put(text_row, text_col, kind.text, style, limit=span)
        elif isinstance(kind, CodeBlock):
            self._paint_code(canvas, block, kind, col, span)
        elif isinstance(kind, Paragraph) and block.font is not None:
            font = block.font
            step = self.measurer.line_height(font.size)
            wrapped = self.measurer.wrap(kind.text, font.key, font.size, block.width)
            for index, line in enumerate(wrapped):
                canvas.put(
                    cells.row(block.top_y + index * step), col, line, style, limit=span
                )

        rule_y = block.rule_y
        if rule_y is not None:
            canvas.put(cells.row(rule_y), col, RULE_CHAR * span, STYLES["rule"])

    def _paint_code(
        self,
        canvas: CellCanvas,
        block: PositionedBlock,
        kind: CodeBlock,
        col: int,
        span: int,
    ) -> None:
        font = block.font
        if font is None:
            return
        y = block.top_y + block.text_offset
        for line in kind.lines:
            _, line_h = self.measurer.measure_line(line, font.key, font.size)
            # Code is never wrapped; overflow is cut at the content edge.
            text = line.expandtabs()
            padded = text + " " * max(0, span - text_cells(text))
            canvas.put(self.cells.row(y), col, padded, STYLES["code"], limit=span)
            y += line_h + self.metrics.code_line_gap


__all__ = ["CellCanvas", "CellMetrics", "RULE_CHAR", "TextualPainter"]
