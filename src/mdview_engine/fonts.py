"""Font identities passed explicitly through layout and measurement."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FontKey:
    """Stable identifier for one loaded face (e.g. ``regular``)."""

    name: str
    path: str | None = None

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class FontSpec:
    """Face plus pixel size, as handed to measurers and painters."""

    key: FontKey
    size: int

    @property
    def bold(self) -> bool:
        return self.key.name == "bold"


@dataclass(frozen=True, slots=True)
class FontSet:
    """The two faces the viewer draws with."""

    regular: FontKey = FontKey("regular")
    bold: FontKey = FontKey("bold")

    @classmethod
    def from_paths(cls, regular: str, bold: str) -> "FontSet":
        return cls(regular=FontKey("regular", regular), bold=FontKey("bold", bold))

    def body(self, size: int) -> FontSpec:
        return FontSpec(self.regular, size)

    def heading(self, size: int) -> FontSpec:
        return FontSpec(self.bold, size)


__all__ = ["FontKey", "FontSet", "FontSpec"]
