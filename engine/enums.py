"""
Enumerations for Anomaly Methods, Insight Types, Visualization Modes, and Forecast Sources

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum

from config import INSIGHT_WEIGHTS


class AnomalyMethod(str, Enum):
    zscore = "zscore"
    iqr = "iqr"
    ml = "ml"

    @property
    def is_heavy(self) -> bool:
        return self is AnomalyMethod.ml

    def default_sensitivity(self) -> float:
        # read at call time so that tests and runtime overrides apply
        from config import settings

        return float(getattr(settings, f"anomaly_default_sensitivity_{self.value}"))


class InsightType(str, Enum):
    info = "info"
    warning = "warning"
    critical = "critical"

    def weight(self) -> int:
        return INSIGHT_WEIGHTS[self.value]


class VisualizationMode(str, Enum):
    chart = "chart"
    gauge = "gauge"
    stats = "stats"
    ai_analysis = "ai-analysis"


class ForecastSource(str, Enum):
    network = "network"
    linear = "linear"
