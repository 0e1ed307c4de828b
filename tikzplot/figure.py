from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any

from tikzplot.adapters import normalize_xy
from tikzplot.axis import (
    AxisRange,
    AxisStyle,
    coerce_axis_style,
    coerce_legend_position,
    coerce_length_cm,
    coerce_range,
)
from tikzplot.compile import DocumentCompiler, select_pipeline
from tikzplot.config import RenderSettings
from tikzplot.errors import FigureConsumedError, PlotConfigError
from tikzplot.markup import render_markup
from tikzplot.series import SeriesKind, SeriesSpec

LOGGER = logging.getLogger(__name__)


def _coerce_optional_text(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise PlotConfigError(f"{field_name} must be a string")
    return value


@dataclass
class Figure:
    """A single PGFPlots axis accumulating configuration and series.

    Setters may be called in any order and any number of times before
    :meth:`save`, which renders, writes and then releases the figure.
    """

    output_target: Path
    settings: RenderSettings = field(default_factory=RenderSettings)
    compiler: DocumentCompiler | None = None
    axis_style: AxisStyle = AxisStyle.STANDARD
    x_range: AxisRange | None = None
    y_range: AxisRange | None = None
    grid: bool = False
    width_cm: float | None = None
    height_cm: float | None = None
    x_label: str | None = None
    y_label: str | None = None
    legend_position: str | None = None

    _series: list[SeriesSpec] = field(default_factory=list, init=False, repr=False, compare=False)
    _consumed: bool = field(default=False, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.output_target = Path(self.output_target)
        if not self.output_target.name:
            raise PlotConfigError("output_target must name a file")

    @property
    def series(self) -> tuple[SeriesSpec, ...]:
        return tuple(self._series)

    @property
    def consumed(self) -> bool:
        return self._consumed

    def set_axis_style(self, style: AxisStyle | str) -> "Figure":
        self._require_live()
        self.axis_style = coerce_axis_style(style)
        return self

    def set_x_range(self, xmin: float, xmax: float) -> "Figure":
        self._require_live()
        self.x_range = coerce_range(xmin, xmax, axis="x")
        return self

    def set_y_range(self, ymin: float, ymax: float) -> "Figure":
        self._require_live()
        self.y_range = coerce_range(ymin, ymax, axis="y")
        return self

    def clear_x_range(self) -> "Figure":
        self._require_live()
        self.x_range = None
        return self

    def clear_y_range(self) -> "Figure":
        self._require_live()
        self.y_range = None
        return self

    def set_dimensions(self, width: float, height: float) -> "Figure":
        self._require_live()
        width_cm = coerce_length_cm(width, name="width")
        height_cm = coerce_length_cm(height, name="height")
        self.width_cm = width_cm
        self.height_cm = height_cm
        return self

    def clear_dimensions(self) -> "Figure":
        self._require_live()
        self.width_cm = None
        self.height_cm = None
        return self

    def set_grid(self, on: bool = True) -> "Figure":
        self._require_live()
        self.grid = bool(on)
        return self

    def set_x_label(self, text: str | None) -> "Figure":
        self._require_live()
        self.x_label = _coerce_optional_text(text, "x_label")
        return self

    def set_y_label(self, text: str | None) -> "Figure":
        self._require_live()
        self.y_label = _coerce_optional_text(text, "y_label")
        return self

    def set_legend_position(self, position: str | None) -> "Figure":
        self._require_live()
        self.legend_position = None if position is None else coerce_legend_position(position)
        return self

    def add_line(
        self,
        x: Any,
        y: Any,
        color: str | None = None,
        legend: str | None = None,
        *,
        data: Any = None,
    ) -> "Figure":
        return self._append(SeriesKind.LINE, x, y, color=color, legend=legend, data=data)

    def add_stem(
        self,
        x: Any,
        y: Any,
        color: str | None = None,
        legend: str | None = None,
        *,
        data: Any = None,
    ) -> "Figure":
        return self._append(SeriesKind.STEM, x, y, color=color, legend=legend, data=data)

    def to_markup(self) -> str:
        self._require_live()
        return render_markup(self)

    def save(self) -> Path:
        """Render and write the figure to ``output_target``.

        ``.pdf`` and ``.eps`` targets are compiled through the document compiler;
        every other target receives the raw markup. The figure is consumed whether
        or not the save succeeds.
        """
        self._require_live()
        target = self.output_target
        try:
            pipeline = select_pipeline(target, settings=self.settings, compiler=self.compiler)
            LOGGER.debug("saving %s via %s", target, type(pipeline).__name__)
            markup = render_markup(self)
            written = pipeline.write(markup, target)
        finally:
            self._release()
        LOGGER.info("saved figure to %s", written)
        return written

    def _append(
        self,
        kind: SeriesKind,
        x: Any,
        y: Any,
        *,
        color: str | None,
        legend: str | None,
        data: Any,
    ) -> "Figure":
        self._require_live()
        color = _coerce_optional_text(color, "color")
        legend = _coerce_optional_text(legend, "legend")
        series_data = normalize_xy(x, y, data=data)
        self._series.append(SeriesSpec(kind=kind, data=series_data, color=color, legend=legend))
        return self

    def _require_live(self) -> None:
        if self._consumed:
            raise FigureConsumedError(f"figure for {self.output_target} was already saved")

    def _release(self) -> None:
        self._series.clear()
        self._consumed = True
