from __future__ import annotations

from pathlib import Path


class TikzPlotError(Exception):
    """Base class for every error raised by tikzplot."""


class PlotDataError(TikzPlotError, ValueError):
    pass


class PlotConfigError(TikzPlotError, ValueError):
    pass


class FigureConsumedError(TikzPlotError, RuntimeError):
    pass


class PlotRenderError(TikzPlotError, RuntimeError):
    pass


class PlotOutputError(TikzPlotError):
    def __init__(self, message: str, *, path: Path | str) -> None:
        super().__init__(message)
        self.path = Path(path)

    def __str__(self) -> str:
        return f"{self.args[0]}: {self.path}"


class CompileError(PlotOutputError):
    """The markup was written but the document compiler did not produce the target.

    ``markup_path`` points at a copy of the standalone ``.tex`` source when it was
    kept for inspection, ``log`` holds the tail of the compiler output and
    ``cleanup_error`` is set when the build directory could not be removed.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | str,
        markup_path: Path | None = None,
        returncode: int | None = None,
        log: str = "",
    ) -> None:
        super().__init__(message, path=path)
        self.markup_path = markup_path
        self.returncode = returncode
        self.log = log
        self.cleanup_error: ArtifactCleanupError | None = None


class ArtifactCleanupError(PlotOutputError):
    pass
