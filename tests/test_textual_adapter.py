from __future__ import annotations

from typing import List

from rich.text import Text

from mdview_engine.adapters.textual import (
    CellMetrics,
    TextualPainter,
    TextualUIHooks,
    TextualViewerAdapter,
)
from mdview_engine.adapters.textual.painter import RULE_CHAR
from mdview_engine.config import LayoutMetrics
from mdview_engine.document import SourceDocument
from mdview_engine.layout import BlockLayoutEngine, MonospaceMeasurer
from mdview_engine.viewport import ViewportState


def make_adapter(lines: List[str]) -> tuple[TextualViewerAdapter, dict[str, list]]:
    captured: dict[str, list] = {"views": [], "statuses": [], "logs": []}
    hooks = TextualUIHooks(
        update_view=lambda rows: captured["views"].append(rows),
        update_status=lambda status: captured["statuses"].append(status),
        log=lambda line: captured["logs"].append(line),
    )
    adapter = TextualViewerAdapter(SourceDocument.from_lines(lines, name="doc.md"), hooks)
    return adapter, captured


def render(lines: List[str], viewport: ViewportState):
    measurer = MonospaceMeasurer()
    metrics = LayoutMetrics()
    engine = BlockLayoutEngine(measurer, metrics=metrics)
    result = engine.layout(lines, metrics.margin - viewport.scroll_offset, viewport.width - 20)
    painter = TextualPainter(measurer, CellMetrics.for_layout(metrics, measurer))
    return painter.render(result.blocks, viewport)


def test_cell_metrics_match_body_font() -> None:
    cells = CellMetrics.for_layout(LayoutMetrics(), MonospaceMeasurer())

    assert (cells.width, cells.height) == (9, 18)
    assert cells.pixels(80, 24) == (720, 432)


def test_painter_draws_heading_and_rule() -> None:
    canvas = render(["# Hello"], ViewportState(width=1024, height=768))

    assert canvas.char_at(1, 1) == "H"
    assert canvas.style_at(1, 1) == "bold"
    assert canvas.char_at(3, 1) == RULE_CHAR


def test_painter_fills_blockquote_background() -> None:
    canvas = render(["> quoted"], ViewportState(width=1024, height=768))

    # Block spans y 10..48: rows 0-2, text at y 20 (row 1), col (10 + 9) // 9.
    assert canvas.style_at(0, 5).endswith("grey85")
    assert canvas.char_at(1, 2) == "q"


def test_painter_skips_blocks_above_viewport() -> None:
    lines = [f"line {index}" for index in range(40)]

    canvas = render(lines, ViewportState(scroll_offset=22 * 10, width=1024, height=180))

    first_row = "".join(canvas.char_at(0, col) for col in range(canvas.cols)).strip()
    assert first_row == "line 10"


def test_painter_wraps_paragraph_rows() -> None:
    canvas = render(["alpha beta gamma delta"], ViewportState(width=110, height=180))

    rows = [
        "".join(canvas.char_at(row, col) for col in range(canvas.cols)).strip()
        for row in range(3)
    ]
    assert rows == ["alpha beta", "gamma", "delta"]


def test_canvas_to_text_groups_styles() -> None:
    canvas = render(["```", "code", "```"], ViewportState(width=180, height=54))

    lines = canvas.to_text()

    assert len(lines) == canvas.rows
    assert all(isinstance(line, Text) for line in lines)
    assert lines[0].plain.startswith(" code")


def test_adapter_first_tick_pushes_rows_and_status() -> None:
    adapter, captured = make_adapter(["# Hello", "text"])

    result = adapter.tick()

    assert result.rendered is True
    assert captured["views"]
    assert "offset 0px" in captured["statuses"][-1]
    assert any(line.startswith("frame=1") for line in captured["logs"])


def test_adapter_scroll_keys_move_viewport() -> None:
    adapter, _ = make_adapter([f"line {index}" for index in range(100)])
    adapter.tick()

    assert adapter.handle_key("down") is True
    result = adapter.tick()

    assert result.scroll_offset == 18
    assert adapter.handle_key("up") is True
    assert adapter.tick().scroll_offset == 0


def test_adapter_wheel_and_home() -> None:
    adapter, _ = make_adapter([f"line {index}" for index in range(100)])
    adapter.tick()

    adapter.queue_wheel(5)
    assert adapter.tick().scroll_offset == 90

    assert adapter.handle_key("home") is True
    assert adapter.tick().scroll_offset == 0


def test_adapter_resize_converts_cells_to_pixels() -> None:
    adapter, _ = make_adapter(["text"])

    adapter.queue_resize(40, 10)
    adapter.tick()

    assert (adapter.session.viewport.width, adapter.session.viewport.height) == (360, 180)


def test_adapter_idle_tick_does_not_repaint() -> None:
    adapter, captured = make_adapter(["text"])
    adapter.tick()

    result = adapter.tick()

    assert result.rendered is False
    assert len(captured["views"]) == 1


def test_adapter_quit_key() -> None:
    adapter, _ = make_adapter(["text"])

    assert adapter.handle_key("q") is True
    assert adapter.tick().quit is True
    assert adapter.handle_key("x") is False


def test_painter_gives_wide_glyphs_two_cells() -> None:
    canvas = render(["# 漢字 ok"], ViewportState(width=1024, height=768))

    assert canvas.char_at(1, 1) == "漢"
    assert canvas.char_at(1, 2) == ""
    assert canvas.char_at(1, 3) == "字"
    assert canvas.char_at(1, 6) == "o"
    assert all(line.cell_len == canvas.cols for line in canvas.to_text())


def test_painter_keeps_zero_width_joiner_with_its_glyph() -> None:
    family = "\U0001F468\u200d\U0001F469"

    canvas = render([family], ViewportState(width=1024, height=768))

    assert canvas.char_at(0, 1) == "\U0001F468\u200d"
    assert canvas.char_at(0, 3) == "\U0001F469"
