from __future__ import annotations

from pathlib import Path

from tikzplot.compile import DocumentCompiler
from tikzplot.config import RenderSettings, load_settings
from tikzplot.figure import Figure


def figure(
    output_target: str | Path,
    *,
    settings: RenderSettings | None = None,
    compiler: DocumentCompiler | None = None,
) -> Figure:
    if settings is None:
        settings = load_settings()
    return Figure(output_target=Path(output_target), settings=settings, compiler=compiler)
