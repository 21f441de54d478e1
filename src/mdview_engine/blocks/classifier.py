"""Line classifier: maps a source position to a block kind.

Classification is a pure function of ``(lines, index)``. It looks at most one
line ahead, except for fenced code, which runs until its closing fence or the
end of the document.
"""

from __future__ import annotations

from typing import Iterator, Optional, Sequence, Tuple

from .models import (
    Blockquote,
    Classification,
    CodeBlock,
    Empty,
    Header,
    Paragraph,
    Separator,
    SetextTitle,
)

SEPARATORS = frozenset({"---", "___", "***"})
FENCE = "```"
QUOTE_MARKER = ">"
SETEXT_CHAR = "="
_BLANKS = " \t"

# Checked top to bottom; longest prefix first so "##" never matches as "#".
HEADER_PREFIXES: Tuple[Tuple[str, int], ...] = (
    ("######", 1),
    ("#####", 2),
    ("####", 3),
    ("###", 4),
    ("##", 5),
    ("#", 6),
)


def _is_setext_underline(line: Optional[str]) -> bool:
    if not line:
        return False
    return line.strip(SETEXT_CHAR) == ""


def _match_header(line: str) -> Optional[Header]:
    for prefix, level in HEADER_PREFIXES:
        if line.startswith(prefix):
            rest = line[len(prefix):].lstrip("#")
            return Header(level=level, text=rest.lstrip(_BLANKS))
    return None


def _collect_fence(lines: Sequence[str], index: int) -> Classification:
    opening = lines[index]
    body: list[str] = []
    cursor = index + 1
    while cursor < len(lines):
        line = lines[cursor]
        if line == FENCE:
            return Classification(
                CodeBlock(lines=tuple(body), info=opening[len(FENCE):].strip()),
                cursor - index + 1,
            )
        body.append(line)
        cursor += 1
    # Unterminated fence swallows the rest of the document.
    return Classification(
        CodeBlock(lines=tuple(body), info=opening[len(FENCE):].strip(), closed=False),
        cursor - index,
    )


def classify_at(lines: Sequence[str], index: int) -> Classification:
    """Classify ``lines[index]`` and report how many lines it consumes."""

    line = lines[index]
    following = lines[index + 1] if index + 1 < len(lines) else None

    if line in SEPARATORS:
        return Classification(Separator(), 1)
    if not line:
        return Classification(Empty(), 1)
    if not line.startswith("#") and _is_setext_underline(following):
        return Classification(SetextTitle(text=line.strip()), 2)
    header = _match_header(line)
    if header is not None:
        return Classification(header, 1)
    if line.startswith(QUOTE_MARKER):
        return Classification(
            Blockquote(text=line[len(QUOTE_MARKER):].lstrip(_BLANKS)), 1
        )
    if line.startswith(FENCE):
        return _collect_fence(lines, index)
    return Classification(Paragraph(text=line), 1)


def classify(line: str, next_line: Optional[str] = None) -> Classification:
    """Classify a single line with optional one-line lookahead."""

    window = (line,) if next_line is None else (line, next_line)
    return classify_at(window, 0)


def iter_classified(lines: Sequence[str]) -> Iterator[Tuple[int, Classification]]:
    """Walk a whole document, yielding ``(index, classification)`` pairs."""

    index = 0
    while index < len(lines):
        result = classify_at(lines, index)
        yield index, result
        index += result.consumed


__all__ = [
    "FENCE",
    "HEADER_PREFIXES",
    "SEPARATORS",
    "classify",
    "classify_at",
    "iter_classified",
]
