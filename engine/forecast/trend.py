"""
Trend forecasting entry points that validate the requested horizon, try the network forecaster first when the series is long enough, and fall back to the dampened linear trend so that a non-empty series always yields one point per requested step.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from config import settings
from engine.enums import ForecastSource
from engine.exceptions import InvalidParameter
from engine.fallback import first_available
from engine.forecast.linear import linear_forecast
from engine.forecast.network import network_forecast
from engine.forecast.points import ForecastPoint
from engine.numeric import finite

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrendForecast:
    points: Tuple[ForecastPoint, ...]
    source: Optional[ForecastSource]


def _resolve_steps(steps: Optional[int]) -> int:
    if steps is None:
        return int(settings.forecast_default_steps)
    if isinstance(steps, bool) or not isinstance(steps, (int, np.integer)) or steps < 1:
        raise InvalidParameter(f"steps must be a positive integer, got {steps!r}")
    return int(steps)


def forecast(
    values: Sequence[float],
    steps: Optional[int] = None,
    *,
    origin_ms: Optional[int] = None,
    step_ms: Optional[int] = None,
    seed: Optional[int] = None,
    allow_network: bool = True,
) -> TrendForecast:
    n_steps = _resolve_steps(steps)
    arr = finite(values)
    if arr.size == 0:
        return TrendForecast(points=(), source=None)

    # pin the origin so both stages stamp the same timeline
    origin = int(time.time() * 1000) if origin_ms is None else int(origin_ms)

    stages = []
    if allow_network and arr.size >= settings.forecast_min_samples:
        stages.append((
            ForecastSource.network.value,
            lambda: network_forecast(arr, n_steps, origin, step_ms, seed),
        ))
    stages.append((
        ForecastSource.linear.value,
        lambda: linear_forecast(arr, n_steps, origin, step_ms),
    ))

    name, points = first_available(*stages)
    return TrendForecast(points=tuple(points or ()), source=ForecastSource(name) if name else None)


def predict_trend(
    values: Sequence[float],
    steps: Optional[int] = None,
    **kwargs,
) -> List[ForecastPoint]:
    return list(forecast(values, steps, **kwargs).points)
