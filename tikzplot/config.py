from __future__ import annotations

from dataclasses import dataclass, replace
import math
import os
from pathlib import Path
import tomllib
from typing import Any, Mapping

from tikzplot.errors import PlotConfigError


DEFAULT_SETTINGS_FILE = "tikzplot.toml"
ENV_LATEX_COMMAND = "TIKZPLOT_LATEX"
ENV_EPS_COMMAND = "TIKZPLOT_EPS_CONVERTER"
ENV_COMPILE_TIMEOUT = "TIKZPLOT_COMPILE_TIMEOUT"


@dataclass(frozen=True)
class RenderSettings:
    latex_command: str = "pdflatex"
    eps_command: str = "pdftops"
    compile_timeout_s: float = 120.0
    pgfplots_compat: str = "1.18"
    keep_failed_markup: bool = True

    def __post_init__(self) -> None:
        if not self.latex_command.strip():
            raise PlotConfigError("latex_command must not be empty")
        if not self.eps_command.strip():
            raise PlotConfigError("eps_command must not be empty")
        if not math.isfinite(self.compile_timeout_s) or self.compile_timeout_s <= 0:
            raise PlotConfigError("compile_timeout_s must be > 0")


def load_settings(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> RenderSettings:
    """Resolve settings from defaults, an optional TOML file, then the environment.

    ``path`` defaults to ``tikzplot.toml`` in the working directory and is skipped
    when that default file does not exist. An explicitly given path must exist.
    Only the ``[render]`` table is read.
    """
    env = os.environ if environ is None else environ
    settings = RenderSettings()

    if path is None:
        candidate = Path.cwd() / DEFAULT_SETTINGS_FILE
        settings_path = candidate if candidate.exists() else None
    else:
        settings_path = Path(path)
        if not settings_path.exists():
            raise FileNotFoundError(f"settings file not found: {settings_path}")

    if settings_path is not None:
        with settings_path.open("rb") as f:
            try:
                raw = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                raise PlotConfigError(f"invalid settings file {settings_path}: {exc}") from exc
        table = raw.get("render", {})
        if not isinstance(table, dict):
            raise PlotConfigError("[render] must be a table")
        settings = _apply_table(settings, table)

    return _apply_environ(settings, env)


def _apply_table(settings: RenderSettings, table: dict[str, Any]) -> RenderSettings:
    known = {"latex_command", "eps_command", "compile_timeout_s", "pgfplots_compat", "keep_failed_markup"}
    unknown = sorted(set(table) - known)
    if unknown:
        raise PlotConfigError(f"unknown [render] keys: {', '.join(unknown)}")
    changes: dict[str, Any] = {}
    for key in ("latex_command", "eps_command", "pgfplots_compat"):
        if key in table:
            changes[key] = _coerce_str(table[key], key)
    if "compile_timeout_s" in table:
        changes["compile_timeout_s"] = _coerce_float(table["compile_timeout_s"], "compile_timeout_s")
    if "keep_failed_markup" in table:
        value = table["keep_failed_markup"]
        if not isinstance(value, bool):
            raise PlotConfigError("keep_failed_markup must be a boolean")
        changes["keep_failed_markup"] = value
    return replace(settings, **changes)


def _apply_environ(settings: RenderSettings, env: Mapping[str, str]) -> RenderSettings:
    changes: dict[str, Any] = {}
    if env.get(ENV_LATEX_COMMAND):
        changes["latex_command"] = env[ENV_LATEX_COMMAND]
    if env.get(ENV_EPS_COMMAND):
        changes["eps_command"] = env[ENV_EPS_COMMAND]
    if env.get(ENV_COMPILE_TIMEOUT):
        changes["compile_timeout_s"] = _coerce_float(env[ENV_COMPILE_TIMEOUT], ENV_COMPILE_TIMEOUT)
    if not changes:
        return settings
    return replace(settings, **changes)


def _coerce_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise PlotConfigError(f"{field_name} must be a string")
    return value


def _coerce_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise PlotConfigError(f"{field_name} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise PlotConfigError(f"{field_name} must be a number, got {value!r}") from exc
