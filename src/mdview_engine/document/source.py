"""Read-only line buffer backing a viewer session."""

from __future__ import annotations

from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Iterable, Iterator, Sequence, Tuple, Union


class DocumentLoadError(RuntimeError):
    """Raised when a source file cannot be read or decoded."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """Immutable list-of-lines document, loaded once per session.

    Lines never change after construction, so the same instance can be laid
    out any number of times and shared freely.
    """

    lines: Tuple[str, ...] = field(default_factory=tuple)
    name: str = "<memory>"

    @classmethod
    def from_lines(cls, lines: Iterable[str], *, name: str = "<memory>") -> "SourceDocument":
        return cls(lines=tuple(lines), name=name)

    @classmethod
    def from_text(cls, text: str, *, name: str = "<memory>") -> "SourceDocument":
        # Only "\n" ends a line; form feeds and Unicode separators stay inline.
        if not text:
            return cls(lines=(), name=name)
        lines = text.split("\n")
        if text.endswith("\n"):
            lines.pop()
        return cls(
            lines=tuple(line[:-1] if line.endswith("\r") else line for line in lines),
            name=name,
        )

    @classmethod
    def from_path(
        cls, path: Union[str, PathLike[str]], *, encoding: str = "utf-8"
    ) -> "SourceDocument":
        target = Path(path)
        try:
            text = target.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentLoadError(
                f"Cannot load document '{target}': {exc}", path=str(target)
            ) from exc
        return cls.from_text(text, name=str(target))

    def snapshot(self) -> Sequence[str]:
        return self.lines

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def get_line(self, index: int) -> str:
        return self.lines[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)
