"""
Numeric guards shared by every analysis component.

All divide-by-zero handling in the engine goes through this module so that the
statistics calculator, the anomaly detectors, the forecaster and the insight
rules agree on a single epsilon and a single notion of "degenerate".

* :func:`safe_div` replaces a zero or non-finite denominator with a
  caller-chosen default instead of producing ``inf``/``nan``.
* :func:`floor_std` substitutes a replacement for a standard deviation that is
  too small to divide by (forecaster floor of 0.01).
* :data:`EPSILON` is the padding added to standard deviations where the
  algorithm calls for ``std + eps`` rather than a substitution.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Optional, Sequence, Tuple

import numpy as np

EPSILON = 1e-7


def is_finite_number(value: object) -> bool:
    if isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return False


def finite_mask(values: Iterable[object]) -> np.ndarray:
    return np.array([is_finite_number(v) for v in values], dtype=bool)


def finite(values: Sequence[object]) -> np.ndarray:
    """Finite entries of ``values`` as a float array, input order preserved."""
    mask = finite_mask(values)
    if not mask.any():
        return np.array([], dtype=float)
    return np.array([float(v) for v, ok in zip(values, mask) if ok], dtype=float)  # type: ignore[arg-type]


def safe_div(num: float, den: float, default: Any = 0.0) -> Any:
    if den == 0 or not math.isfinite(den) or not math.isfinite(num):
        return default
    result = num / den
    if not math.isfinite(result):
        return default
    return result


def floor_std(std: float, floor: float, replacement: float = 1.0) -> float:
    if not math.isfinite(std) or std < floor:
        return replacement
    return std


def population_moments(arr: np.ndarray) -> Tuple[float, float, float]:
    """Mean, population variance and standard deviation (divide by ``n``)."""
    if arr.size == 0:
        return 0.0, 0.0, 0.0
    mean = float(np.mean(arr))
    variance = float(np.mean((arr - mean) ** 2))
    return mean, variance, math.sqrt(variance)


def pct_change(new: float, base: float) -> Optional[float]:
    return safe_div((new - base) * 100.0, base, None)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
