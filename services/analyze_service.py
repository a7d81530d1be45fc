"""
Analyze service that runs the synchronous analysis engine off the event loop with a bounded wait.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Any, Callable, List, Optional, TypeVar

from api.requests import AnalyzeRequest, AnomalyRequest, ForecastRequest, InsightRequest, StatsRequest
from api.responses import (
    AnalysisReport,
    AnomalyModel,
    ForecastPointModel,
    ForecastResponse,
    InsightModel,
    ResampledModel,
    SeasonalityModel,
    StatsModel,
    StatsResponse,
)
from config import settings
from engine import anomaly, insights, stats
from engine.analyzer import run
from engine.anomaly import AnomalyRecord
from engine.exceptions import InvalidParameter
from engine.forecast import ForecastPoint, forecast
from engine.series import (
    aggregate_by_window,
    detect_seasonality,
    infer_step_ms,
    interpolate_gaps,
    moving_average,
    normalize_range,
    prepare,
    smooth,
)

_T = TypeVar("_T")


async def _offload(func: Callable[..., _T], *args: Any, **kwargs: Any) -> _T:
    timeout = float(settings.analyze_timeout_seconds)
    return await asyncio.wait_for(asyncio.to_thread(func, *args, **kwargs), timeout=timeout)


async def run_analysis(req: AnalyzeRequest, now_ms: Optional[int] = None) -> AnalysisReport:
    return await _offload(run, req, now_ms=now_ms)


def _anomalies(req: AnomalyRequest) -> List[AnomalyModel]:
    series = prepare(req.values, req.timestamps)
    found = anomaly.detect(series.values, req.method, req.sensitivity)
    found = anomaly.attach_timestamps(found, series.timestamps)
    return [AnomalyModel.from_record(replace(a, index=series.source_index(a.index))) for a in found]


async def detect_anomalies(req: AnomalyRequest) -> List[AnomalyModel]:
    return await _offload(_anomalies, req)


def _forecast(req: ForecastRequest) -> ForecastResponse:
    series = prepare(req.values, req.timestamps)
    origin_ms, step_ms = None, None
    if series.timestamps:
        origin_ms, step_ms = series.timestamps[-1], infer_step_ms(series.timestamps)
    predicted = forecast(
        series.values,
        min(req.steps, settings.forecast_max_steps),
        origin_ms=origin_ms,
        step_ms=step_ms,
        allow_network=len(series) <= settings.heavy_method_max_samples,
    )
    return ForecastResponse(
        points=[ForecastPointModel.from_record(p) for p in predicted.points],
        source=predicted.source,
    )


async def predict(req: ForecastRequest) -> ForecastResponse:
    return await _offload(_forecast, req)


def _insights(req: InsightRequest) -> List[InsightModel]:
    found = [AnomalyRecord(**a.model_dump()) for a in req.anomalies]
    points = [ForecastPoint(**p.model_dump()) for p in req.forecasts]
    return [InsightModel.from_record(i) for i in insights.generate(req.values, found, points)]


async def derive_insights(req: InsightRequest) -> List[InsightModel]:
    return await _offload(_insights, req)


def _resample(req: StatsRequest, values: List[float], timestamps: Optional[List[int]]) -> Optional[ResampledModel]:
    if not req.fill_gaps and req.aggregate_window_ms is None:
        return None
    if timestamps is None:
        raise InvalidParameter("resampling needs timestamps")
    ts, vals = list(timestamps), list(values)
    if req.fill_gaps:
        filled = interpolate_gaps(ts, vals)
        ts, vals = list(filled.timestamps), list(filled.values)
    if req.aggregate_window_ms is not None:
        bucketed = aggregate_by_window(ts, vals, req.aggregate_window_ms)
        ts, vals = list(bucketed.timestamps), list(bucketed.values)
    return ResampledModel(timestamps=ts, values=vals)


def _describe(req: StatsRequest) -> StatsResponse:
    series = prepare(req.values, req.timestamps)
    described = stats.compute(series.values)
    return StatsResponse(
        stats=StatsModel.from_record(described) if described else None,
        seasonality=SeasonalityModel.from_record(detect_seasonality(series.values)),
        moving_average=(
            moving_average(series.values, req.moving_average_period) if req.moving_average_period else None
        ),
        smoothed=smooth(series.values, req.smoothing_window) if req.smoothing_window else None,
        normalized=normalize_range(series.values) if req.normalize else None,
        resampled=_resample(req, series.values, series.timestamps),
    )


async def describe(req: StatsRequest) -> StatsResponse:
    return await _offload(_describe, req)
