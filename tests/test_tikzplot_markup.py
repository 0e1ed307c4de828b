from __future__ import annotations

from pathlib import Path
import re
import tempfile
import unittest

import numpy as np

from tikzplot import (
    AxisStyle,
    Figure,
    FigureConsumedError,
    PlotConfigError,
    PlotDataError,
    PlotRenderError,
    figure,
)
from tikzplot.config import RenderSettings
from tikzplot.markup import CENTERED_AXIS_BLOCK, format_number, render_markup, series_lines
from tikzplot.series import SeriesData, SeriesSpec


_COORD_RE = re.compile(r"^    \((-?\d+\.\d{6}),(-?\d+\.\d{6})\)$")


def _fig(target: str = "plot.tikz") -> Figure:
    return figure(target, settings=RenderSettings())


def _coordinate_lines(markup: str) -> list[str]:
    return [line for line in markup.splitlines() if _COORD_RE.match(line)]


class FigureMarkupTests(unittest.TestCase):
    def test_single_teal_line_renders_exact_block(self) -> None:
        fig = _fig()
        fig.add_line([0, 1], [0, 1], color="teal")
        expected = (
            "\\begin{tikzpicture}\n"
            "\\begin{axis}[\n"
            "]\n"
            "\\addplot [color=teal, line width=1pt] coordinates {\n"
            "    (0.000000,0.000000)\n"
            "    (1.000000,1.000000)\n"
            "};\n"
            "\\end{axis}\n"
            "\\end{tikzpicture}\n"
        )
        self.assertEqual(fig.to_markup(), expected)

    def test_empty_series_renders_empty_coordinate_block(self) -> None:
        fig = _fig()
        fig.add_line([], [])
        markup = fig.to_markup()
        self.assertIn("\\addplot [line width=1pt] coordinates {\n};\n", markup)

    def test_coordinate_block_has_one_line_per_point_in_order(self) -> None:
        x = np.linspace(-2.0, 3.0, 17)
        y = x**2 - 1.5
        fig = _fig()
        fig.add_stem(x, y, color="red")
        lines = _coordinate_lines(fig.to_markup())
        self.assertEqual(len(lines), 17)
        for line, xi, yi in zip(lines, x, y):
            m = _COORD_RE.match(line)
            assert m is not None
            self.assertAlmostEqual(float(m.group(1)), xi, places=6)
            self.assertAlmostEqual(float(m.group(2)), yi, places=6)

    def test_series_render_in_insertion_order_with_legends(self) -> None:
        fig = _fig()
        fig.add_line([0], [1], color="teal", legend="first")
        fig.add_stem([0], [2], color="red", legend="second")
        fig.add_line([0], [3], legend="third")
        markup = fig.to_markup()
        entries = re.findall(r"\\addlegendentry\{(.*)\}", markup)
        self.assertEqual(entries, ["first", "second", "third"])
        plots = [line for line in markup.splitlines() if line.startswith("\\addplot")]
        self.assertEqual(
            plots,
            [
                "\\addplot [color=teal, line width=1pt] coordinates {",
                "\\addplot [ycomb, color=red, mark=*, thick] coordinates {",
                "\\addplot [line width=1pt] coordinates {",
            ],
        )
        self.assertLess(markup.index("(0.000000,1.000000)"), markup.index("(0.000000,2.000000)"))
        self.assertLess(markup.index("(0.000000,2.000000)"), markup.index("(0.000000,3.000000)"))

    def test_empty_legend_is_emitted_but_missing_legend_is_not(self) -> None:
        fig = _fig()
        fig.add_line([0], [0], legend="")
        fig.add_line([1], [1])
        markup = fig.to_markup()
        self.assertEqual(markup.count("\\addlegendentry"), 1)
        self.assertIn("\\addlegendentry{}", markup)

    def test_unset_options_are_omitted(self) -> None:
        fig = _fig()
        fig.add_line([0], [0])
        lines = fig.to_markup().splitlines()
        self.assertEqual(lines[1:3], ["\\begin{axis}[", "]"])
        self.assertFalse(any(line.startswith("\\addlegendentry") for line in lines))
        self.assertFalse(any("color=" in line for line in lines))

    def test_configured_options_render_in_fixed_order(self) -> None:
        fig = _fig()
        # Configure in reverse order; output order must not depend on call order.
        fig.set_legend_position("south west")
        fig.set_y_label("$y(t)$")
        fig.set_x_label("$t$")
        fig.set_dimensions(12, 8)
        fig.set_grid()
        fig.set_y_range(-1.1, 1.1)
        fig.set_x_range(0, 10)
        lines = fig.to_markup().splitlines()
        start = lines.index("\\begin{axis}[") + 1
        end = lines.index("]")
        self.assertEqual(
            lines[start:end],
            [
                "xmin=0.000000, xmax=10.000000,",
                "ymin=-1.100000, ymax=1.100000,",
                "grid=major,",
                "width=12.000000 cm,",
                "height=8.000000 cm,",
                "xlabel={$t$},",
                "ylabel={$y(t)$},",
                "legend pos=south west,",
            ],
        )

    def test_zero_range_is_a_configured_value(self) -> None:
        fig = _fig()
        fig.set_x_range(0, 0)
        self.assertIn("xmin=0.000000, xmax=0.000000,", fig.to_markup())

    def test_inverted_range_passes_through(self) -> None:
        fig = _fig()
        fig.set_y_range(5, -5)
        self.assertIn("ymin=5.000000, ymax=-5.000000,", fig.to_markup())

    def test_last_setter_call_wins(self) -> None:
        fig = _fig()
        fig.set_x_range(0, 1).set_x_range(-3, 3)
        fig.set_x_label("first").set_x_label("second")
        fig.set_legend_position("north west").set_legend_position("north east")
        markup = fig.to_markup()
        self.assertEqual(markup.count("xmin="), 1)
        self.assertIn("xmin=-3.000000, xmax=3.000000,", markup)
        self.assertNotIn("first", markup)
        self.assertIn("xlabel={second},", markup)
        self.assertEqual(markup.count("legend pos="), 1)
        self.assertIn("legend pos=north east,", markup)

    def test_clear_range_and_grid_off_remove_directives(self) -> None:
        fig = _fig()
        fig.set_x_range(0, 1).clear_x_range()
        fig.set_dimensions(4, 3).clear_dimensions()
        fig.set_grid().set_grid(False)
        markup = fig.to_markup()
        self.assertNotIn("xmin", markup)
        self.assertNotIn("width=", markup)
        self.assertNotIn("grid=major", markup)

    def test_centered_axis_block_is_emitted_verbatim(self) -> None:
        fig = _fig()
        fig.set_axis_style("center")
        lines = fig.to_markup().splitlines()
        start = lines.index("\\begin{axis}[") + 1
        self.assertEqual(tuple(lines[start : start + len(CENTERED_AXIS_BLOCK)]), CENTERED_AXIS_BLOCK)

    def test_standard_axis_never_emits_centered_block(self) -> None:
        fig = _fig()
        fig.set_axis_style(AxisStyle.CENTERED).set_axis_style("standard")
        markup = fig.to_markup()
        for line in CENTERED_AXIS_BLOCK:
            self.assertNotIn(line, markup)

    def test_unknown_axis_style_rejected(self) -> None:
        fig = _fig()
        with self.assertRaises(PlotConfigError):
            fig.set_axis_style("diagonal")
        self.assertIs(fig.axis_style, AxisStyle.STANDARD)

    def test_corrupted_axis_style_aborts_render(self) -> None:
        fig = _fig()
        fig.axis_style = "diagonal"  # type: ignore[assignment]
        with self.assertRaises(PlotConfigError):
            render_markup(fig)

    def test_unknown_legend_position_rejected(self) -> None:
        fig = _fig()
        with self.assertRaises(PlotConfigError):
            fig.set_legend_position("middle")
        fig.set_legend_position("  North   East ")
        self.assertEqual(fig.legend_position, "north east")

    def test_non_finite_range_rejected(self) -> None:
        fig = _fig()
        with self.assertRaises(PlotConfigError):
            fig.set_x_range(float("nan"), 1.0)
        with self.assertRaises(PlotConfigError):
            fig.set_dimensions(0, 5)

    def test_mismatched_lengths_rejected_without_appending(self) -> None:
        fig = _fig()
        with self.assertRaises(PlotDataError):
            fig.add_line([0, 1, 2], [0, 1])
        with self.assertRaises(PlotDataError):
            fig.add_stem([0], [0, 1])
        self.assertEqual(fig.series, ())

    def test_series_copies_caller_buffers(self) -> None:
        x = np.asarray([0.0, 1.0])
        y = np.asarray([2.0, 3.0])
        fig = _fig()
        fig.add_line(x, y)
        x[0] = 99.0
        self.assertEqual(fig.series[0].data.x.tolist(), [0.0, 1.0])

    def test_render_is_deterministic_for_rebuilt_figures(self) -> None:
        def build() -> Figure:
            fig = _fig()
            fig.set_axis_style("centered").set_grid().set_dimensions(12, 8)
            fig.add_line(np.arange(5), np.sin(np.arange(5)), "teal", "$y$")
            fig.add_stem([0, 1], [1, 0.75], "red")
            return fig

        self.assertEqual(build().to_markup(), build().to_markup())

    def test_unknown_series_kind_is_render_error(self) -> None:
        data = SeriesData(x=np.zeros(1), y=np.zeros(1))
        spec = SeriesSpec(kind="bar", data=data)  # type: ignore[arg-type]
        with self.assertRaises(PlotRenderError):
            series_lines(spec)

    def test_format_number_is_fixed_point(self) -> None:
        self.assertEqual(format_number(1e-7), "0.000000")
        self.assertEqual(format_number(-1e-9), "0.000000")
        self.assertEqual(format_number(-0.0), "0.000000")
        self.assertEqual(format_number(1.5e10), "15000000000.000000")
        self.assertEqual(format_number(-2.25), "-2.250000")


class FigureLifecycleTests(unittest.TestCase):
    def test_saved_figure_cannot_be_reused(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            fig = _fig(str(Path(td) / "plot.tikz"))
            fig.add_line([0], [0])
            fig.save()
            self.assertTrue(fig.consumed)
            self.assertEqual(fig.series, ())
            with self.assertRaises(FigureConsumedError):
                fig.add_line([1], [1])
            with self.assertRaises(FigureConsumedError):
                fig.set_grid()
            with self.assertRaises(FigureConsumedError):
                fig.save()

    def test_output_target_must_name_a_file(self) -> None:
        with self.assertRaises(PlotConfigError):
            Figure(output_target=Path(""))

    def test_internal_state_is_not_a_constructor_field(self) -> None:
        with self.assertRaises(TypeError):
            Figure(output_target=Path("p.tikz"), _consumed=True)  # type: ignore[call-arg]
        with self.assertRaises(TypeError):
            Figure(output_target=Path("p.tikz"), _series=[])  # type: ignore[call-arg]
        fig = Figure(output_target=Path("p.tikz"))
        fig.add_line([0, 1], [0, 1])
        self.assertNotIn("_series", repr(fig))
        self.assertNotIn("_consumed", repr(fig))
        self.assertEqual(fig, Figure(output_target=Path("p.tikz")))


if __name__ == "__main__":
    unittest.main()
