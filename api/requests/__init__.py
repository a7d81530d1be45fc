"""
Request models for the analysis, anomaly, forecast, insight and statistics endpoints.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field

from engine.enums import AnomalyMethod, VisualizationMode
from api.responses import AnomalyModel, ForecastPointModel


class SeriesRequest(BaseModel):
    values: List[Optional[float]] = Field(default_factory=list)
    timestamps: Optional[List[Optional[float]]] = None


class AnalyzeRequest(SeriesRequest):
    method: AnomalyMethod = AnomalyMethod.zscore
    sensitivity: Optional[float] = Field(default=None, gt=0.0, le=100.0)
    steps: int = Field(default=10, ge=1, le=20)
    mode: VisualizationMode = VisualizationMode.chart
    enable_anomaly_detection: bool = True
    enable_trend_prediction: bool = True
    enable_insights: bool = True


class AnomalyRequest(SeriesRequest):
    method: AnomalyMethod = AnomalyMethod.zscore
    sensitivity: Optional[float] = Field(default=None, gt=0.0, le=100.0)


class ForecastRequest(SeriesRequest):
    steps: int = Field(default=10, ge=1, le=20)


class StatsRequest(SeriesRequest):
    moving_average_period: Optional[int] = Field(default=None, ge=1, le=500)
    smoothing_window: Optional[int] = Field(default=None, ge=1, le=50)
    normalize: bool = False
    aggregate_window_ms: Optional[float] = Field(default=None, gt=0.0)
    fill_gaps: bool = False


class InsightRequest(BaseModel):
    values: List[Optional[float]] = Field(default_factory=list)
    anomalies: List[AnomalyModel] = Field(default_factory=list)
    forecasts: List[ForecastPointModel] = Field(default_factory=list)
