from __future__ import annotations

from typing import Sequence

from mdview_engine.blocks import (
    Blockquote,
    CodeBlock,
    Header,
    Paragraph,
    PositionedBlock,
    Separator,
    SetextRule,
    SetextTitle,
)
from mdview_engine.config import LayoutMetrics
from mdview_engine.layout import BlockLayoutEngine, MeasureError, MonospaceMeasurer

ORIGIN = 10
WIDTH = 1004


def make_engine(metrics: LayoutMetrics | None = None) -> BlockLayoutEngine:
    return BlockLayoutEngine(MonospaceMeasurer(), metrics=metrics)


def assert_monotonic(blocks: Sequence[PositionedBlock]) -> None:
    for current, following in zip(blocks, blocks[1:]):
        assert current.top_y + current.height <= following.top_y


def test_separator_block() -> None:
    result = make_engine().layout(["---"], ORIGIN, WIDTH)

    (block,) = result.blocks
    assert block.kind == Separator()
    assert (block.top_y, block.height) == (ORIGIN, 20)
    assert block.rule_y == ORIGIN + 10
    assert result.bottom_y == ORIGIN + 20


def test_empty_lines_emit_nothing() -> None:
    result = make_engine().layout(["", "", ""], ORIGIN, WIDTH)

    assert result.blocks == ()
    assert result.bottom_y == ORIGIN


def test_large_header_gets_rule_allowance() -> None:
    result = make_engine().layout(["# Hello"], ORIGIN, WIDTH)

    (block,) = result.blocks
    # size int(18 * 2.2) = 39: margin + text + (thickness + font) + margin
    assert block.kind == Header(level=6, text="Hello")
    assert block.height == 10 + 39 + 19 + 10
    assert block.font is not None and block.font.bold
    assert block.font.size == 39
    assert block.rule_y == ORIGIN + 10 + 39 + 9


def test_small_header_has_no_rule() -> None:
    (block,) = make_engine().layout(["### three"], ORIGIN, WIDTH).blocks

    assert block.height == 10 + 32 + 10
    assert block.rule_y is None
    assert block.style == "heading"


def test_setext_pair_emits_title_and_rule() -> None:
    result = make_engine().layout(["Title", "====="], ORIGIN, WIDTH)

    title, rule = result.blocks
    assert title.kind == SetextTitle(text="Title")
    assert title.height == 10 + 46
    assert rule.kind == SetextRule()
    assert rule.top_y == title.bottom_y
    assert rule.height == 18 + 10
    assert rule.rule_y == rule.top_y + 9
    assert result.bottom_y == ORIGIN + 56 + 28


def test_blockquote_has_constant_height_and_fill() -> None:
    (block,) = make_engine().layout(["> " + "long " * 200], ORIGIN, WIDTH).blocks

    assert isinstance(block.kind, Blockquote)
    assert block.height == 18 + 2 * 10
    assert block.fill is True
    assert block.width == WIDTH
    assert block.text_inset == 9
    assert block.left + block.text_inset == 9 + 10


def test_code_block_lines_are_measured_unwrapped() -> None:
    long_line = "x" * 500
    lines = ["```", "a", long_line, "```"]

    (block,) = make_engine().layout(lines, ORIGIN, 100).blocks

    assert block.kind == CodeBlock(lines=("a", long_line))
    assert block.style == "code"
    assert block.height == 4 + 2 * (18 + 2)


def test_unterminated_code_block_keeps_the_rest() -> None:
    result = make_engine().layout(["```", "code line", "# not header"], ORIGIN, WIDTH)

    (block,) = result.blocks
    assert isinstance(block.kind, CodeBlock)
    assert block.kind.closed is False
    assert block.height == 4 + 2 * 20


def test_paragraph_single_line_height() -> None:
    (block,) = make_engine().layout(["short"], ORIGIN, WIDTH).blocks

    assert block.kind == Paragraph(text="short")
    assert block.height == 18 + 4


def test_paragraph_wraps_at_content_width() -> None:
    text = "World wraps here if width is small"

    (wide,) = make_engine().layout([text], ORIGIN, WIDTH).blocks
    (narrow,) = make_engine().layout([text], ORIGIN, 90).blocks

    assert wide.height == 22
    assert narrow.height > wide.height
    assert (narrow.height - 4) % 18 == 0


def test_metrics_drive_heights() -> None:
    engine = make_engine(LayoutMetrics(margin=4, font_size=10))

    (block,) = engine.layout(["> quote"], 0, 200).blocks

    assert block.height == 10 + 2 * 4


def test_unmeasurable_block_degrades_without_aborting() -> None:
    lines = ["before", "bad\x00text", "after"]

    result = make_engine().layout(lines, ORIGIN, WIDTH)

    before, bad, after = result.blocks
    assert bad.degraded is True
    assert bad.height == 0
    assert bad.top_y == before.bottom_y
    assert after.kind == Paragraph(text="after")
    assert after.degraded is False
    assert result.bottom_y == ORIGIN + 22 + 22


class ExplodingMeasurer(MonospaceMeasurer):
    def measure_line(self, text, font, size):
        if text == "boom":
            raise MeasureError("cannot size", text=text, font=font)
        return MonospaceMeasurer.measure_line(self, text, font, size)


def test_custom_measurer_failures_are_contained() -> None:
    engine = BlockLayoutEngine(ExplodingMeasurer())

    result = engine.layout(["# boom", "# fine"], ORIGIN, WIDTH)

    first, second = result.blocks
    assert first.degraded and first.height == 0
    assert second.kind == Header(level=6, text="fine")
    assert second.top_y == ORIGIN


def test_blocks_never_overlap_or_reorder() -> None:
    lines = [
        "Title",
        "=====",
        "# One",
        "",
        "paragraph " * 30,
        "> quote",
        "```",
        "code",
        "```",
        "---",
        "###### tiny",
        "## two",
        "```",
        "open fence",
    ]

    result = make_engine().layout(lines, -250, 300)

    assert_monotonic(result.blocks)
    assert result.bottom_y == result.blocks[-1].bottom_y


def test_end_to_end_document_order() -> None:
    lines = ["# Hello", "", "World wraps here if width is small", "> a quote", "---"]

    result = make_engine().layout(lines, ORIGIN, 90)

    kinds = [type(block.kind) for block in result.blocks]
    assert kinds == [Header, Paragraph, Blockquote, Separator]
    tops = [block.top_y for block in result.blocks]
    assert tops == sorted(set(tops))
    assert result.blocks[1].height > 22
    assert_monotonic(result.blocks)


def test_layout_is_recomputed_from_scratch() -> None:
    engine = make_engine()
    lines = ["# Hello", "text"]

    first = engine.layout(lines, ORIGIN, WIDTH)
    shifted = engine.layout(lines, ORIGIN - 100, WIDTH)

    assert [b.top_y - 100 for b in first.blocks] == [b.top_y for b in shifted.blocks]
    assert first.bottom_y - 100 == shifted.bottom_y


def test_format_characters_and_no_break_spaces_are_measured() -> None:
    family = "family \U0001F468\u200d\U0001F469\u200d\U0001F467"
    lines = ["# co\xadoperate", family, "no\xa0break"]

    result = make_engine().layout(lines, ORIGIN, WIDTH)

    header, emoji, nbsp = result.blocks
    assert not any(block.degraded for block in result.blocks)
    assert header.height == 10 + 39 + 19 + 10
    assert (emoji.height, nbsp.height) == (22, 22)


def test_joined_emoji_takes_two_cells_per_glyph() -> None:
    measurer = MonospaceMeasurer()
    family = "\U0001F468\u200d\U0001F469\u200d\U0001F467"

    width, height = measurer.measure_line(family, make_engine().fonts.regular, 18)

    assert width == 6 * 9
    assert height == 18


def test_wrap_keeps_no_break_space_joined() -> None:
    measurer = MonospaceMeasurer()
    regular = make_engine().fonts.regular

    lines = measurer.wrap("aaaa bbbb\xa0cccc", regular, 18, 90)

    assert lines == ["aaaa", "bbbb\xa0cccc"]


def test_wrap_cuts_words_longer_than_a_line() -> None:
    measurer = MonospaceMeasurer()

    lines = measurer.wrap("x" * 25, make_engine().fonts.regular, 18, 90)

    assert lines == ["x" * 10, "x" * 10, "x" * 5]
