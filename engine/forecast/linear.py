"""
Deterministic linear-trend forecasting used when the series is too short for the network forecaster or when that forecaster fails, extrapolating the least-squares slope of the most recent samples and dampening it exponentially toward their mean as the horizon grows.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from typing import List, Optional

import numpy as np

from config import settings
from engine.forecast.points import ForecastPoint, step_timestamps
from engine.numeric import safe_div


def _recent_window(arr: np.ndarray) -> np.ndarray:
    lookback = max(settings.forecast_linear_min_lookback, math.floor(arr.size * settings.forecast_lookback_ratio))
    return arr[-lookback:]


def _slope(recent: np.ndarray) -> float:
    n = int(recent.size)
    if n < 2:
        return 0.0
    x = np.arange(n, dtype=float)
    sum_x = n * (n - 1) / 2.0
    sum_y = float(recent.sum())
    sum_xy = float(np.dot(x, recent))
    sum_x2 = n * (n - 1) * (2 * n - 1) / 6.0

    denominator = n * sum_x2 - sum_x * sum_x
    if abs(denominator) < settings.forecast_linear_denominator_eps:
        return 0.0
    return float(safe_div(n * sum_xy - sum_x * sum_y, denominator, 0.0))


def linear_forecast(
    arr: np.ndarray,
    steps: int,
    origin_ms: Optional[int] = None,
    step_ms: Optional[int] = None,
) -> List[ForecastPoint]:
    recent = _recent_window(arr)
    slope = _slope(recent)
    mean = float(np.mean(recent))
    last = float(arr[-1])
    stamps = step_timestamps(steps, origin_ms, step_ms)

    points: List[ForecastPoint] = []
    for i, ts in enumerate(stamps, start=1):
        trend = last + slope * i
        dampening = math.exp(-settings.forecast_linear_dampening * i)
        value = trend * dampening + mean * (1.0 - dampening)
        confidence = max(
            settings.forecast_linear_confidence_floor,
            1.0 - settings.forecast_linear_confidence_slope * (i / steps),
        )
        points.append(ForecastPoint(timestamp=ts, value=value, confidence=confidence))
    return points
