"""
Series helpers: input preparation, sampling-interval inference, timeline resampling, shape transforms and seasonality detection.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.series.prepare import PreparedSeries, infer_step_ms, prepare
from engine.series.resample import Resampled, aggregate_by_window, interpolate_gaps
from engine.series.seasonality import SeasonalityResult, detect_seasonality
from engine.series.shape import moving_average, normalize_range, smooth

__all__ = [
    "PreparedSeries",
    "Resampled",
    "SeasonalityResult",
    "aggregate_by_window",
    "detect_seasonality",
    "infer_step_ms",
    "interpolate_gaps",
    "moving_average",
    "normalize_range",
    "prepare",
    "smooth",
]
