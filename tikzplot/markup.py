"""PGFPlots markup emission for a configured :class:`~tikzplot.figure.Figure`."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from tikzplot.axis import AxisStyle
from tikzplot.errors import PlotConfigError, PlotRenderError
from tikzplot.series import SeriesKind, SeriesSpec

if TYPE_CHECKING:
    from tikzplot.figure import Figure


COORDINATE_DECIMALS = 6
LINE_WIDTH = "1pt"

CENTERED_AXIS_BLOCK = (
    "axis lines=center,",
    "axis x line=middle,",
    "every axis x label/.style={at={(ticklabel* cs:1.0)}, anchor=west},",
    "every axis y label/.style={at={(ticklabel* cs:1.0)}, anchor=south},",
)


def format_number(value: float) -> str:
    text = f"{float(value):.{COORDINATE_DECIMALS}f}"
    # "-0.000000" would otherwise leak from tiny negatives and -0.0.
    if text.startswith("-") and float(text) == 0.0:
        return text[1:]
    return text


def render_markup(fig: "Figure") -> str:
    """Return the ``tikzpicture`` block for ``fig`` as text.

    Pure with respect to ``fig``: rendering twice yields identical output. The axis
    style is checked first so a bad configuration never yields partial text.
    """
    style = fig.axis_style
    if not isinstance(style, AxisStyle):
        raise PlotConfigError(f"axis style must be 'standard' or 'centered', got {style!r}")

    lines: list[str] = ["\\begin{tikzpicture}", "\\begin{axis}["]
    if style is AxisStyle.CENTERED:
        lines.extend(CENTERED_AXIS_BLOCK)
    lines.extend(axis_option_lines(fig))
    lines.append("]")
    for spec in fig.series:
        lines.extend(series_lines(spec))
    lines.append("\\end{axis}")
    lines.append("\\end{tikzpicture}")
    return "\n".join(lines) + "\n"


def axis_option_lines(fig: "Figure") -> list[str]:
    out: list[str] = []
    if fig.x_range is not None:
        out.append(f"xmin={format_number(fig.x_range.min)}, xmax={format_number(fig.x_range.max)},")
    if fig.y_range is not None:
        out.append(f"ymin={format_number(fig.y_range.min)}, ymax={format_number(fig.y_range.max)},")
    if fig.grid:
        out.append("grid=major,")
    if fig.width_cm is not None:
        out.append(f"width={format_number(fig.width_cm)} cm,")
    if fig.height_cm is not None:
        out.append(f"height={format_number(fig.height_cm)} cm,")
    if fig.x_label is not None:
        out.append(f"xlabel={{{fig.x_label}}},")
    if fig.y_label is not None:
        out.append(f"ylabel={{{fig.y_label}}},")
    if fig.legend_position is not None:
        out.append(f"legend pos={fig.legend_position},")
    return out


def series_lines(spec: SeriesSpec) -> list[str]:
    if spec.kind is SeriesKind.LINE:
        options = _join_options(_color_option(spec.color), f"line width={LINE_WIDTH}")
    elif spec.kind is SeriesKind.STEM:
        options = _join_options("ycomb", _color_option(spec.color), "mark=*", "thick")
    else:
        raise PlotRenderError(f"unknown series kind: {spec.kind!r}")

    out = [f"\\addplot [{options}] coordinates {{"]
    out.extend(coordinate_lines(spec.data.x.tolist(), spec.data.y.tolist()))
    out.append("};")
    if spec.legend is not None:
        out.append(f"\\addlegendentry{{{spec.legend}}}")
    return out


def coordinate_lines(xs: Iterable[float], ys: Iterable[float]) -> list[str]:
    return [f"    ({format_number(x)},{format_number(y)})" for x, y in zip(xs, ys)]


def _color_option(color: str | None) -> str | None:
    if color is None:
        return None
    return f"color={color}"


def _join_options(*options: str | None) -> str:
    return ", ".join(opt for opt in options if opt is not None)
