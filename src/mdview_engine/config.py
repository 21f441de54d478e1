"""Layout metrics and viewer configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Mapping, Optional, Tuple

ENV_PREFIX = "MDVIEW_"


class ConfigError(ValueError):
    """Raised when an explicit configuration value is out of range."""


class SettlePolicy(str, Enum):
    """How the scroll controller pulls an over-scrolled viewport back."""

    INCREMENTAL = "incremental"
    SNAP = "snap"


# Font scale per header level; index 0 is level 1 (``######``).
HEADER_SCALES: Tuple[float, ...] = (1.2, 1.4, 1.6, 1.8, 2.0, 2.2)


@dataclass(frozen=True, slots=True)
class LayoutMetrics:
    """Spacing constants shared by the layout engine and painters."""

    margin: int = 10
    font_size: int = 18
    paragraph_margin: int = 4
    rule_thickness: int = 1
    code_line_gap: int = 2
    title_scale: float = 2.6
    header_scales: Tuple[float, ...] = HEADER_SCALES

    def __post_init__(self) -> None:
        if self.margin < 0:
            raise ConfigError("margin must be >= 0")
        if self.font_size <= 0:
            raise ConfigError("font_size must be > 0")
        if self.paragraph_margin < 0 or self.code_line_gap < 0:
            raise ConfigError("paragraph_margin and code_line_gap must be >= 0")
        if len(self.header_scales) != 6:
            raise ConfigError("header_scales needs exactly six entries")

    def header_size(self, level: int) -> int:
        return int(self.font_size * self.header_scales[level - 1])

    @property
    def title_size(self) -> int:
        return int(self.font_size * self.title_scale)

    @property
    def heading_rule_allowance(self) -> int:
        return self.rule_thickness + self.font_size


@dataclass(frozen=True, slots=True)
class ViewerConfig:
    """Session-wide settings for a viewer host."""

    metrics: LayoutMetrics = field(default_factory=LayoutMetrics)
    width: int = 1024
    height: int = 768
    title: str = "Markdown viewer"
    document_path: str = "TEST.md"
    fps: int = 60
    regular_font_path: str = "Inter/Inter-Regular.ttf"
    bold_font_path: str = "Inter/Inter-Bold.ttf"
    settle_policy: SettlePolicy = SettlePolicy.INCREMENTAL
    settle_step: Optional[int] = None
    scroll_unit: Optional[int] = None
    held_lines_per_frame: int = 1

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConfigError("viewport dimensions must be > 0")
        if self.fps <= 0:
            raise ConfigError("fps must be > 0")
        if not isinstance(self.settle_policy, SettlePolicy):
            try:
                policy = SettlePolicy(str(self.settle_policy).lower())
            except ValueError as exc:
                raise ConfigError(
                    f"Unknown settle policy '{self.settle_policy}'"
                ) from exc
            object.__setattr__(self, "settle_policy", policy)

    @property
    def effective_scroll_unit(self) -> int:
        return self.scroll_unit or self.metrics.font_size

    @property
    def effective_settle_step(self) -> int:
        return self.settle_step or self.metrics.font_size

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, **overrides: object
    ) -> "ViewerConfig":
        """Build a config from ``MDVIEW_*`` variables.

        Unparseable numbers fall back to the defaults; explicit ``overrides``
        win over the environment.
        """

        env = os.environ if environ is None else environ
        base = cls()
        metrics = replace(
            base.metrics,
            margin=_env_int(env, "MARGIN", base.metrics.margin),
            font_size=_env_int(env, "FONT_SIZE", base.metrics.font_size),
        )
        values: dict[str, object] = {
            "metrics": metrics,
            "width": _env_int(env, "WIDTH", base.width),
            "height": _env_int(env, "HEIGHT", base.height),
            "document_path": env.get(f"{ENV_PREFIX}DOCUMENT", base.document_path),
            "fps": _env_int(env, "FPS", base.fps),
            "regular_font_path": env.get(
                f"{ENV_PREFIX}FONT_REGULAR", base.regular_font_path
            ),
            "bold_font_path": env.get(f"{ENV_PREFIX}FONT_BOLD", base.bold_font_path),
            "settle_policy": env.get(
                f"{ENV_PREFIX}SETTLE_POLICY", base.settle_policy.value
            ),
        }
        step = _env_int(env, "SETTLE_STEP", 0)
        if step > 0:
            values["settle_step"] = step
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]


def _env_int(env: Mapping[str, str], key: str, fallback: int) -> int:
    value = env.get(f"{ENV_PREFIX}{key}")
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


__all__ = [
    "ConfigError",
    "HEADER_SCALES",
    "LayoutMetrics",
    "SettlePolicy",
    "ViewerConfig",
]
