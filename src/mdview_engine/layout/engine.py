"""Block layout: classified lines in, positioned blocks out."""

from __future__ import annotations

from typing import List, Optional, Sequence

from mdview_engine.blocks.classifier import classify_at
from mdview_engine.blocks.models import (
    BlockKind,
    Blockquote,
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
from mdview_engine.config import LayoutMetrics
from mdview_engine.fonts import FontSet
from mdview_engine.runtime import telemetry

from .measure import MeasureError, TextMeasurer


class BlockLayoutEngine:
    """Stacks blocks top to bottom starting at a caller-supplied origin.

    Nothing is cached between passes; every call re-classifies and re-measures
    the whole document.
    """

    def __init__(
        self,
        measurer: TextMeasurer,
        *,
        fonts: Optional[FontSet] = None,
        metrics: Optional[LayoutMetrics] = None,
        logger_name: str | None = None,
    ) -> None:
        self.measurer = measurer
        self.fonts = fonts or FontSet()
        self.metrics = metrics or LayoutMetrics()
        self._logger_name = logger_name

    def layout(
        self, lines: Sequence[str], origin_y: int, content_width: int
    ) -> LayoutResult:
        with telemetry.span(
            "layout::pass",
            logger_name=self._logger_name,
            component="layout",
            metadata={"lines": len(lines), "origin_y": origin_y},
        ) as handle:
            blocks: List[PositionedBlock] = []
            y = origin_y
            index = 0
            while index < len(lines):
                kind, consumed = classify_at(lines, index)
                for block in self._place(kind, y, content_width, index):
                    blocks.append(block)
                    y = block.bottom_y
                index += consumed
            handle.add_metadata("blocks", len(blocks))
            handle.add_metadata("bottom_y", y)
            return LayoutResult(blocks=tuple(blocks), bottom_y=y)

    def _place(
        self, kind: BlockKind, y: int, width: int, index: int
    ) -> List[PositionedBlock]:
        try:
            return self._measure(kind, y, width)
        except MeasureError as exc:
            telemetry.record_event(
                "layout.degraded",
                level="warning",
                data={"line": index, "kind": type(kind).__name__, "reason": str(exc)},
                logger_name=self._logger_name,
            )
            return [
                PositionedBlock(
                    kind=kind,
                    top_y=y,
                    height=0,
                    left=self.metrics.margin,
                    width=width,
                    degraded=True,
                )
            ]

    def _measure(self, kind: BlockKind, y: int, width: int) -> List[PositionedBlock]:
        if isinstance(kind, Empty):
            return []
        if isinstance(kind, Separator):
            return [self._separator(kind, y, width)]
        if isinstance(kind, Header):
            return self._header(kind, y, width)
        if isinstance(kind, SetextTitle):
            return self._setext(kind, y, width)
        if isinstance(kind, Blockquote):
            return self._blockquote(kind, y, width)
        if isinstance(kind, CodeBlock):
            return self._code(kind, y, width)
        if isinstance(kind, Paragraph):
            return self._paragraph(kind, y, width)
        raise TypeError(f"Unsupported block kind {kind!r}")

    def _separator(self, kind: Separator, y: int, width: int) -> PositionedBlock:
        margin = self.metrics.margin
        return PositionedBlock(
            kind=kind,
            top_y=y,
            height=2 * margin,
            left=margin,
            width=width,
            rule_offset=margin,
            style="rule",
        )

    def _header(self, kind: Header, y: int, width: int) -> List[PositionedBlock]:
        m = self.metrics
        font = self.fonts.heading(m.header_size(kind.level))
        _, text_h = self.measurer.measure_line(kind.text, font.key, font.size)
        height = m.margin + text_h
        rule_offset = None
        # Levels 5 and 6 ("##" and "#") are underlined.
        if kind.level >= 5:
            rule_offset = height + m.font_size // 2
            height += m.heading_rule_allowance
        height += m.margin
        return [
            PositionedBlock(
                kind=kind,
                top_y=y,
                height=height,
                left=m.margin,
                width=width,
                font=font,
                text_offset=m.margin,
                rule_offset=rule_offset,
                style="heading",
            )
        ]

    def _setext(self, kind: SetextTitle, y: int, width: int) -> List[PositionedBlock]:
        m = self.metrics
        font = self.fonts.heading(m.title_size)
        _, title_h = self.measurer.measure_line(kind.text, font.key, font.size)
        title = PositionedBlock(
            kind=kind,
            top_y=y,
            height=m.margin + title_h,
            left=m.margin,
            width=width,
            font=font,
            text_offset=m.margin,
            style="title",
        )
        rule = PositionedBlock(
            kind=SetextRule(),
            top_y=title.bottom_y,
            height=m.font_size + m.margin,
            left=m.margin,
            width=width,
            rule_offset=m.font_size // 2,
            style="rule",
        )
        return [title, rule]

    def _blockquote(
        self, kind: Blockquote, y: int, width: int
    ) -> List[PositionedBlock]:
        m = self.metrics
        return [
            PositionedBlock(
                kind=kind,
                top_y=y,
                height=m.font_size + 2 * m.margin,
                left=m.margin,
                width=width,
                font=self.fonts.body(m.font_size),
                text_offset=m.margin,
                text_inset=m.font_size // 2,
                fill=True,
                style="quote",
            )
        ]

    def _code(self, kind: CodeBlock, y: int, width: int) -> List[PositionedBlock]:
        m = self.metrics
        font = self.fonts.body(m.font_size)
        height = m.paragraph_margin
        for line in kind.lines:
            _, line_h = self.measurer.measure_line(line, font.key, font.size)
            height += line_h + m.code_line_gap
        return [
            PositionedBlock(
                kind=kind,
                top_y=y,
                height=height,
                left=m.margin,
                width=width,
                font=font,
                text_offset=m.paragraph_margin,
                style="code",
            )
        ]

    def _paragraph(self, kind: Paragraph, y: int, width: int) -> List[PositionedBlock]:
        m = self.metrics
        font = self.fonts.body(m.font_size)
        text_h = self.measurer.measure_wrapped(kind.text, font.key, font.size, width)
        return [
            PositionedBlock(
                kind=kind,
                top_y=y,
                height=text_h + m.paragraph_margin,
                left=m.margin,
                width=width,
                font=font,
            )
        ]


__all__ = ["BlockLayoutEngine"]
