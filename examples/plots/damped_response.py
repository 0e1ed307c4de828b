from __future__ import annotations

import argparse
import logging
from pathlib import Path

import numpy as np

from tikzplot import TikzPlotError, figure, load_settings


def build_samples() -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    t = np.arange(1000, dtype=np.float64) * 0.01
    damped_sin = np.exp(-t / 8.0) * np.sin(2.0 * t)
    crit_damped = t * np.exp(-t / 2.0)
    n = np.arange(11, dtype=np.float64)
    decay = np.power(0.75, n)
    return t, damped_sin, crit_damped, n, decay


def main() -> int:
    parser = argparse.ArgumentParser(prog="damped_response")
    parser.add_argument("output", nargs="?", default="out.pdf", help="target file (.pdf/.eps compile, anything else writes markup)")
    parser.add_argument("--settings", type=Path, default=None, help="path to a tikzplot.toml")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    t, y1, y2, n, yd = build_samples()
    fig = figure(args.output, settings=load_settings(args.settings))
    fig.add_line(t, y1, "teal", "$y_1(t)$")
    fig.add_line(t, y2, "orange", "$y_2(t)$")
    fig.add_stem(n, yd, "red", "$y_d[n]$")

    fig.set_axis_style("centered")
    fig.set_x_range(0, 10)
    fig.set_y_range(-1.1, 1.1)
    fig.set_grid()
    fig.set_dimensions(12, 8)
    fig.set_x_label("$t$")
    fig.set_y_label("$y(t)$")

    try:
        written = fig.save()
    except TikzPlotError as exc:
        logging.getLogger("damped_response").error("%s", exc)
        return 1
    print(written)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
