"""
Response models for API endpoints and internal data structures.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any, List, Optional

import numpy as np
from pydantic import BaseModel, Field, model_serializer

from engine.enums import AnomalyMethod, ForecastSource, InsightType


def _coerce(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _coerce(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_coerce(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    return obj


class NpModel(BaseModel):

    @model_serializer(mode="wrap")
    def _serialize(self, handler: Any) -> Any:
        return _coerce(handler(self))

    @classmethod
    def from_record(cls, record: Any) -> "NpModel":
        return cls(**dataclasses.asdict(record))


class AnomalyModel(NpModel):

    index: int = Field(ge=0)
    value: float
    timestamp: int
    score: float = Field(ge=0.0)
    method: AnomalyMethod


class ForecastPointModel(NpModel):

    timestamp: int
    value: float
    confidence: float = Field(ge=0.0, le=1.0)


class InsightModel(NpModel):

    type: InsightType
    message: str
    confidence: float = Field(ge=0.0, le=1.0)
    rule: str = ""


class StatsModel(NpModel):

    count: int
    mean: float
    median: float
    min: float
    max: float
    std_dev: float
    variance: float


class SeasonalityModel(NpModel):

    has_season: bool
    period: Optional[int] = None
    strength: float = 0.0


class ForecastResponse(NpModel):

    points: List[ForecastPointModel]
    source: Optional[ForecastSource] = None


class ResampledModel(NpModel):

    timestamps: List[float]
    values: List[float]


class StatsResponse(NpModel):

    stats: Optional[StatsModel] = None
    seasonality: SeasonalityModel
    moving_average: Optional[List[float]] = None
    smoothed: Optional[List[float]] = None
    normalized: Optional[List[float]] = None
    resampled: Optional[ResampledModel] = None


class AnalysisReport(NpModel):

    sample_count: int
    dropped_count: int = 0
    stats: Optional[StatsModel] = None
    seasonality: Optional[SeasonalityModel] = None
    anomalies: List[AnomalyModel] = []
    forecasts: List[ForecastPointModel] = []
    insights: List[InsightModel] = []
    method_used: Optional[AnomalyMethod] = None
    forecast_source: Optional[ForecastSource] = None
    warnings: List[str] = []
    generated_at: int
    overall_severity: Optional[InsightType] = None
    summary: str = ""


class SessionStatus(str, Enum):

    IDLE = "idle"
    PENDING = "pending"
    RUNNING = "running"
    READY = "ready"
    FAILED = "failed"


class SessionResponse(BaseModel):

    session_id: str
    status: SessionStatus
    revision: int
    completed_revision: Optional[int] = None
    error: Optional[str] = None
    report: Optional[AnalysisReport] = None
