"""
Anomaly detection for univariate series, offering z-score, interquartile-range and sliding-window reconstruction-error methods behind a single `detect` entry point with a uniform record shape.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.anomaly.detection import (
    AnomalyRecord,
    attach_timestamps,
    detect,
    detect_iqr,
    detect_ml,
    detect_zscore,
)

__all__ = [
    "AnomalyRecord",
    "attach_timestamps",
    "detect",
    "detect_iqr",
    "detect_ml",
    "detect_zscore",
]
