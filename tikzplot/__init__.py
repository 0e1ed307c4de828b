from tikzplot.api import figure
from tikzplot.axis import AxisRange, AxisStyle
from tikzplot.compile import CompileResult, DocumentCompiler, LatexCompiler
from tikzplot.config import RenderSettings, load_settings
from tikzplot.errors import (
    ArtifactCleanupError,
    CompileError,
    FigureConsumedError,
    PlotConfigError,
    PlotDataError,
    PlotOutputError,
    PlotRenderError,
    TikzPlotError,
)
from tikzplot.figure import Figure
from tikzplot.markup import render_markup
from tikzplot.series import SeriesData, SeriesKind, SeriesSpec

__all__ = [
    "ArtifactCleanupError",
    "AxisRange",
    "AxisStyle",
    "CompileError",
    "CompileResult",
    "DocumentCompiler",
    "Figure",
    "FigureConsumedError",
    "LatexCompiler",
    "PlotConfigError",
    "PlotDataError",
    "PlotOutputError",
    "PlotRenderError",
    "RenderSettings",
    "SeriesData",
    "SeriesKind",
    "SeriesSpec",
    "TikzPlotError",
    "figure",
    "load_settings",
    "render_markup",
]
