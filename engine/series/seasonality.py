"""
Seasonality detection by autocorrelation over a bounded range of lags.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from scipy.signal import correlate

from config import settings
from engine.numeric import finite, safe_div


@dataclass(frozen=True)
class SeasonalityResult:
    has_season: bool
    period: Optional[int] = None
    strength: float = 0.0


def detect_seasonality(values: Sequence[float]) -> SeasonalityResult:
    arr = finite(values)
    n = int(arr.size)
    if n < settings.seasonality_min_samples:
        return SeasonalityResult(has_season=False)

    centered = arr - arr.mean()
    energy = float(np.dot(centered, centered))
    # full autocorrelation; entry n - 1 + lag holds the lag-`lag` sum
    acf = correlate(centered, centered, mode="full", method="direct")
    max_lag = min(n // 3, settings.seasonality_max_lag)

    best_corr, best_lag = 0.0, 0
    for lag in range(2, max_lag):
        corr = safe_div(float(acf[n - 1 + lag]), energy, 0.0)
        if corr > best_corr:
            best_corr, best_lag = corr, lag

    if best_corr > settings.seasonality_correlation_cutoff:
        return SeasonalityResult(has_season=True, period=best_lag, strength=round(best_corr, 4))
    return SeasonalityResult(has_season=False, strength=round(best_corr, 4))
