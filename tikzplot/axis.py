from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math

from tikzplot.errors import PlotConfigError


class AxisStyle(str, Enum):
    STANDARD = "standard"
    CENTERED = "centered"


_AXIS_STYLE_ALIASES = {
    "standard": AxisStyle.STANDARD,
    "centered": AxisStyle.CENTERED,
    "center": AxisStyle.CENTERED,
}

LEGEND_POSITIONS = frozenset(
    {
        "north east",
        "north west",
        "south east",
        "south west",
        "outer north east",
    }
)


@dataclass(frozen=True)
class AxisRange:
    min: float
    max: float


def coerce_axis_style(style: AxisStyle | str) -> AxisStyle:
    if isinstance(style, AxisStyle):
        return style
    if isinstance(style, str):
        resolved = _AXIS_STYLE_ALIASES.get(style.strip().lower())
        if resolved is not None:
            return resolved
    raise PlotConfigError(f"axis style must be 'standard' or 'centered', got {style!r}")


def coerce_legend_position(position: str) -> str:
    if not isinstance(position, str):
        raise PlotConfigError(f"legend position must be a string, got {position!r}")
    normalized = " ".join(position.split()).lower()
    if normalized not in LEGEND_POSITIONS:
        allowed = ", ".join(sorted(LEGEND_POSITIONS))
        raise PlotConfigError(f"unsupported legend position {position!r} (expected one of: {allowed})")
    return normalized


def coerce_range(vmin: float, vmax: float, *, axis: str) -> AxisRange:
    lo = _coerce_finite(vmin, f"{axis}min")
    hi = _coerce_finite(vmax, f"{axis}max")
    return AxisRange(min=lo, max=hi)


def coerce_length_cm(value: float, *, name: str) -> float:
    out = _coerce_finite(value, name)
    if out <= 0:
        raise PlotConfigError(f"{name} must be > 0 cm")
    return out


def _coerce_finite(value: float, name: str) -> float:
    if isinstance(value, bool):
        raise PlotConfigError(f"{name} must be a number")
    try:
        out = float(value)
    except (TypeError, ValueError) as exc:
        raise PlotConfigError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(out):
        raise PlotConfigError(f"{name} must be finite")
    return out
