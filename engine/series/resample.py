"""
Timeline resampling for timestamped series: bucketing samples into fixed-width windows and filling long gaps with linearly interpolated points.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from config import settings
from engine.exceptions import InvalidParameter


@dataclass(frozen=True)
class Resampled:
    timestamps: Tuple[float, ...]
    values: Tuple[float, ...]

    def __len__(self) -> int:
        return len(self.values)


def _pairs(timestamps: Sequence[float], values: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    if len(timestamps) != len(values):
        raise InvalidParameter(
            f"timestamps length {len(timestamps)} does not match values length {len(values)}"
        )
    return np.asarray(timestamps, dtype=float), np.asarray(values, dtype=float)


def aggregate_by_window(
    timestamps: Sequence[float],
    values: Sequence[float],
    window_ms: float,
) -> Resampled:
    """Average consecutive samples into windows of ``window_ms``.

    A window opens at the first sample not yet assigned and takes every
    following sample less than ``window_ms`` after it. Each window becomes one
    point at the mean timestamp and mean value of its members.
    """
    if not window_ms or window_ms <= 0:
        raise InvalidParameter(f"window_ms must be positive, got {window_ms!r}")
    ts, vals = _pairs(timestamps, values)
    if ts.size == 0:
        return Resampled((), ())

    out_ts: List[float] = []
    out_vals: List[float] = []
    start = 0
    for i in range(1, ts.size + 1):
        if i < ts.size and ts[i] - ts[start] < window_ms:
            continue
        out_ts.append(float(ts[start:i].mean()))
        out_vals.append(float(vals[start:i].mean()))
        start = i
    return Resampled(tuple(out_ts), tuple(out_vals))


def interpolate_gaps(
    timestamps: Sequence[float],
    values: Sequence[float],
    *,
    gap_ms: Optional[float] = None,
    step_ms: Optional[float] = None,
    max_fill: Optional[int] = None,
) -> Resampled:
    """Insert evenly spaced points into every gap wider than ``gap_ms``.

    A gap is split into ``floor(gap / step_ms)`` equal parts and at most
    ``max_fill`` points are inserted, so very long outages stay visible.
    """
    gap = float(settings.gap_fill_threshold_ms if gap_ms is None else gap_ms)
    step = float(settings.gap_fill_step_ms if step_ms is None else step_ms)
    cap = int(settings.gap_fill_max_points if max_fill is None else max_fill)
    if step <= 0:
        raise InvalidParameter(f"step_ms must be positive, got {step_ms!r}")
    ts, vals = _pairs(timestamps, values)
    if ts.size < 2:
        return Resampled(tuple(ts.tolist()), tuple(vals.tolist()))

    out_ts: List[float] = [float(ts[0])]
    out_vals: List[float] = [float(vals[0])]
    for i in range(1, ts.size):
        diff = float(ts[i] - ts[i - 1])
        if diff > gap:
            parts = int(diff // step)
            rise = float(vals[i] - vals[i - 1])
            for j in range(1, min(parts, cap + 1)):
                out_ts.append(float(ts[i - 1]) + diff * j / parts)
                out_vals.append(float(vals[i - 1]) + rise * j / parts)
        out_ts.append(float(ts[i]))
        out_vals.append(float(vals[i]))
    return Resampled(tuple(out_ts), tuple(out_vals))
