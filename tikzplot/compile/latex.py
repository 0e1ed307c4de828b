from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import subprocess
from typing import Protocol

from tikzplot.config import RenderSettings

LOGGER = logging.getLogger(__name__)
LOG_TAIL_CHARS = 2000


@dataclass(frozen=True)
class CompileResult:
    ok: bool
    returncode: int | None = None
    log: str = ""


class DocumentCompiler(Protocol):
    def compile(self, source: Path, target: Path, *, timeout: float | None = None) -> CompileResult:
        ...


class LatexCompiler:
    """Runs pdflatex on a standalone document, then pdftops for ``.eps`` targets.

    Auxiliary files land beside ``source``; callers own that directory.
    """

    def __init__(self, settings: RenderSettings | None = None) -> None:
        self._settings = settings or RenderSettings()

    @property
    def settings(self) -> RenderSettings:
        return self._settings

    def latex_command(self, source: Path) -> list[str]:
        return [
            self._settings.latex_command,
            "-interaction=nonstopmode",
            "-halt-on-error",
            f"-output-directory={source.parent}",
            source.name,
        ]

    def eps_command(self, pdf_path: Path, target: Path) -> list[str]:
        return [self._settings.eps_command, "-eps", str(pdf_path), str(target)]

    def compile(self, source: Path, target: Path, *, timeout: float | None = None) -> CompileResult:
        if timeout is None:
            timeout = self._settings.compile_timeout_s
        produced_pdf = source.with_suffix(".pdf")

        result = self._run(self.latex_command(source), cwd=source.parent, timeout=timeout)
        if not result.ok:
            return CompileResult(ok=False, returncode=result.returncode, log=result.log)

        if target.suffix.lower() != ".eps":
            if produced_pdf != target and produced_pdf.exists():
                produced_pdf.replace(target)
            return CompileResult(ok=True, returncode=result.returncode, log=result.log)

        converted = self._run(self.eps_command(produced_pdf, target), cwd=source.parent, timeout=timeout)
        return CompileResult(
            ok=converted.ok,
            returncode=converted.returncode,
            log=(result.log + converted.log)[-LOG_TAIL_CHARS:],
        )

    def _run(self, cmd: list[str], *, cwd: Path, timeout: float) -> CompileResult:
        LOGGER.debug("running %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                cwd=str(cwd),
                capture_output=True,
                text=True,
                check=False,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return CompileResult(ok=False, log=f"{cmd[0]} timed out after {timeout:g}s")
        except OSError as exc:
            return CompileResult(ok=False, log=f"failed to execute {cmd[0]}: {exc}")
        output = ((proc.stdout or "") + (proc.stderr or ""))[-LOG_TAIL_CHARS:]
        return CompileResult(ok=proc.returncode == 0, returncode=proc.returncode, log=output)
