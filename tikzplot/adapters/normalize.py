from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from tikzplot.errors import PlotDataError
from tikzplot.series import SeriesData


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_xy(
    x: Any,
    y: Any,
    *,
    data: Any = None,
    source_name: str | None = None,
) -> SeriesData:
    """Coerce a pair of coordinate inputs into owned, read-only float64 arrays.

    Accepts sequences, numpy arrays, pandas Series, torch tensors, or column names
    of ``data`` when a DataFrame is given. Zero-length input is valid. Raises
    ``PlotDataError`` for mismatched lengths and for values that cannot be written
    as fixed-point coordinates.
    """
    x_values = _resolve_input(x, key="x", data=data)
    y_values = _resolve_input(y, key="y", data=data)
    if x_values is None or y_values is None:
        raise PlotDataError("x and y inputs are required")

    x_arr = _coerce_1d_numeric(x_values, label="x")
    y_arr = _coerce_1d_numeric(y_values, label="y")

    if x_arr.shape != y_arr.shape:
        raise PlotDataError(f"x and y length mismatch: {x_arr.size} != {y_arr.size}")

    bad = ~(np.isfinite(x_arr) & np.isfinite(y_arr))
    if np.any(bad):
        idx = int(np.flatnonzero(bad)[0])
        raise PlotDataError(f"series contains a non-finite point at index {idx}")

    # Never alias caller buffers.
    x_arr = np.array(x_arr, dtype=np.float64, copy=True)
    y_arr = np.array(y_arr, dtype=np.float64, copy=True)
    x_arr.setflags(write=False)
    y_arr.setflags(write=False)
    return SeriesData(x=x_arr, y=y_arr, source_name=source_name)


def _resolve_input(value: Any, key: str, data: Any) -> Any:
    if data is None:
        if isinstance(value, str):
            raise PlotDataError(f"column name {value!r} given for {key} without `data=`")
        return value
    if pd is None:
        raise PlotDataError("pandas is required when using `data=`")
    if not isinstance(data, pd.DataFrame):
        raise PlotDataError("`data` must be a pandas DataFrame")
    if isinstance(value, str):
        if value not in data.columns:
            raise PlotDataError(f"column not found: {value}")
        return data[value]
    return value


def _coerce_1d_numeric(value: Any, *, label: str) -> np.ndarray:
    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return tensor.to(torch.float64).numpy()

    if pd is not None and isinstance(value, pd.Series):
        return _coerce_ndarray(value.to_numpy(), label=label)

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        if len(value) == 0:
            return np.empty(0, dtype=np.float64)
        return _coerce_ndarray(np.asarray(value, dtype=object), label=label)

    raise PlotDataError(f"unsupported {label} input type: {type(value)!r}")


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.ndim != 1:
        raise PlotDataError(f"{label} must be 1-D")
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None or isinstance(raw, (str, bytes)):
            raise PlotDataError(f"{label} contains non-numeric value at index {i}: {raw!r}")
        try:
            out[i] = float(raw)
        except (TypeError, ValueError) as exc:
            raise PlotDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out
