"""
Descriptive statistics (count, mean, median, extremes, population variance and standard deviation) over a numeric sample, used as the leaf input of the anomaly detectors, the forecaster and the insight rules.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from engine.numeric import finite, population_moments


@dataclass(frozen=True)
class DescriptiveStats:
    count: int
    mean: float
    median: float
    min: float
    max: float
    std_dev: float
    variance: float


def compute(values: Sequence[float]) -> Optional[DescriptiveStats]:
    arr = finite(values)
    n = int(arr.size)
    if n == 0:
        return None

    ordered = np.sort(arr)
    mean, variance, std = population_moments(arr)
    return DescriptiveStats(
        count=n,
        mean=mean,
        # upper-middle element for even lengths, no interpolation
        median=float(ordered[n // 2]),
        min=float(ordered[0]),
        max=float(ordered[-1]),
        std_dev=std,
        variance=variance,
    )
