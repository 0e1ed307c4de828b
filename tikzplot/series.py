from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


class SeriesKind(str, Enum):
    LINE = "line"
    STEM = "stem"


@dataclass(frozen=True)
class SeriesData:
    x: np.ndarray
    y: np.ndarray
    source_name: str | None = None

    def __len__(self) -> int:
        return int(self.x.size)

    def points(self) -> list[tuple[float, float]]:
        return list(zip(self.x.tolist(), self.y.tolist()))


@dataclass(frozen=True)
class SeriesSpec:
    kind: SeriesKind
    data: SeriesData
    color: str | None = None
    legend: str | None = None
