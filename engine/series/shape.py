"""
Shape helpers for charting a series: trailing moving average, centered smoothing and min/max rescaling.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from engine.exceptions import InvalidParameter
from engine.numeric import finite


def _window(size: int, name: str) -> int:
    if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size < 1:
        raise InvalidParameter(f"{name} must be a positive integer, got {size!r}")
    return int(size)


def moving_average(values: Sequence[float], period: int) -> List[float]:
    """Trailing mean over ``period`` samples; the first ``period - 1`` samples pass through unchanged."""
    period = _window(period, "period")
    arr = finite(values)
    if arr.size < period:
        return arr.tolist()
    sums = np.cumsum(np.insert(arr, 0, 0.0))
    out = arr.copy()
    out[period - 1:] = (sums[period:] - sums[:-period]) / period
    return out.tolist()


def smooth(values: Sequence[float], window: int = 3) -> List[float]:
    """Centered mean, truncated at both ends of the series."""
    window = _window(window, "window")
    arr = finite(values)
    n = int(arr.size)
    if n < window:
        return arr.tolist()
    half = window // 2
    sums = np.cumsum(np.insert(arr, 0, 0.0))
    idx = np.arange(n)
    start = np.maximum(0, idx - half)
    end = np.minimum(n, idx + half + 1)
    return ((sums[end] - sums[start]) / (end - start)).tolist()


def normalize_range(values: Sequence[float]) -> List[float]:
    arr = finite(values)
    if arr.size == 0:
        return []
    low, high = float(arr.min()), float(arr.max())
    if high == low:
        return [0.5] * int(arr.size)
    return ((arr - low) / (high - low)).tolist()
