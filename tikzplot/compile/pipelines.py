from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
import shutil
import tempfile
import threading
from typing import Protocol
import uuid
import weakref

from tikzplot.compile.latex import CompileResult, DocumentCompiler, LatexCompiler
from tikzplot.config import RenderSettings
from tikzplot.errors import ArtifactCleanupError, CompileError, PlotOutputError

LOGGER = logging.getLogger(__name__)

COMPILE_SUFFIXES = frozenset({".pdf", ".eps"})
BUILD_DIR_PREFIX = ".tikzplot-build-"
BUILD_JOB_NAME = "figure"

# Entries vanish once no save holds the lock.
_PATH_LOCKS: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()
_PATH_LOCKS_GUARD = threading.Lock()


class OutputPipeline(Protocol):
    def write(self, markup: str, target: Path) -> Path:
        ...


def wrap_standalone(markup: str, *, pgfplots_compat: str = "1.18") -> str:
    return (
        "\\documentclass{standalone}\n"
        "\\usepackage{pgfplots}\n"
        f"\\pgfplotsset{{compat={pgfplots_compat}}}\n"
        "\\begin{document}\n"
        f"{markup}"
        "\\end{document}\n"
    )


def write_text(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` through a sibling part file.

    ``path`` either keeps its previous content or receives the full text.
    """
    part = path.with_name(f".{path.name}.{uuid.uuid4().hex}.part")
    try:
        with part.open("x", encoding="utf-8") as f:
            f.write(text)
        part.replace(path)
    except OSError as exc:
        part.unlink(missing_ok=True)
        raise PlotOutputError(f"cannot write output ({exc.strerror or exc})", path=path) from exc


def path_lock(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _PATH_LOCKS_GUARD:
        lock = _PATH_LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _PATH_LOCKS[key] = lock
        return lock


@dataclass
class RawMarkupPipeline:
    def write(self, markup: str, target: Path) -> Path:
        write_text(target, markup)
        LOGGER.debug("wrote markup to %s", target)
        return target


@dataclass
class CompiledDocumentPipeline:
    """Compiles the markup inside a private build directory next to ``target``.

    Only the finished artifact leaves the build directory; every other file the
    compiler writes is removed with the directory.
    """

    compiler: DocumentCompiler
    settings: RenderSettings

    def write(self, markup: str, target: Path) -> Path:
        lock = path_lock(target)
        with lock:
            build_dir = self._make_build_dir(target)
            pending: BaseException | None = None
            try:
                self._build(markup, build_dir, target)
            except BaseException as exc:
                pending = exc
                raise
            finally:
                self._remove_build_dir(build_dir, pending=pending)
        return target

    def _make_build_dir(self, target: Path) -> Path:
        try:
            return Path(tempfile.mkdtemp(prefix=BUILD_DIR_PREFIX, dir=target.parent))
        except OSError as exc:
            raise PlotOutputError(f"cannot create build directory ({exc.strerror or exc})", path=target) from exc

    def _build(self, markup: str, build_dir: Path, target: Path) -> None:
        source = build_dir / f"{BUILD_JOB_NAME}.tex"
        staged = build_dir / f"{BUILD_JOB_NAME}{target.suffix.lower()}"
        write_text(source, wrap_standalone(markup, pgfplots_compat=self.settings.pgfplots_compat))
        LOGGER.debug("wrote standalone document to %s", source)
        result = self.compiler.compile(source, staged, timeout=self.settings.compile_timeout_s)
        if not result.ok or not staged.is_file():
            self._fail(result, source=source, target=target)
        try:
            staged.replace(target)
        except OSError as exc:
            raise PlotOutputError(f"cannot move compiled artifact ({exc.strerror or exc})", path=target) from exc

    def _fail(self, result: CompileResult, *, source: Path, target: Path) -> None:
        LOGGER.warning("document compile failed for %s (returncode=%s)", target, result.returncode)
        reason = "compiler reported failure" if not result.ok else "compiler produced no output"
        error = CompileError(reason, path=target, returncode=result.returncode, log=result.log)
        if self.settings.keep_failed_markup:
            try:
                error.markup_path = self._keep_markup(source, target)
            except OSError as exc:
                error.add_note(f"failed markup could not be kept: {exc}")
        raise error

    def _keep_markup(self, source: Path, target: Path) -> Path:
        fd, name = tempfile.mkstemp(prefix=f"{target.stem}-", suffix=".tex", dir=target.parent)
        os.close(fd)
        shutil.copyfile(source, name)
        return Path(name)

    def _remove_build_dir(self, build_dir: Path, *, pending: BaseException | None) -> None:
        try:
            shutil.rmtree(build_dir)
        except OSError as exc:
            cleanup_error = ArtifactCleanupError(f"cannot remove build directory {build_dir}", path=build_dir)
            cleanup_error.__cause__ = exc
            if pending is None:
                raise cleanup_error from exc
            LOGGER.warning("%s", cleanup_error)
            if isinstance(pending, CompileError):
                pending.cleanup_error = cleanup_error
            else:
                pending.add_note(str(cleanup_error))


def select_pipeline(
    target: Path,
    *,
    settings: RenderSettings | None = None,
    compiler: DocumentCompiler | None = None,
) -> OutputPipeline:
    if target.suffix.lower() in COMPILE_SUFFIXES:
        resolved = settings or RenderSettings()
        return CompiledDocumentPipeline(compiler=compiler or LatexCompiler(resolved), settings=resolved)
    return RawMarkupPipeline()
