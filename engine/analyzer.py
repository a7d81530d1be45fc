"""
Analysis orchestrator that takes one request (a series, an anomaly method, a sensitivity, a forecast horizon and the enabled features) and returns one complete report, applying the size bounds for the heavier detectors and carrying real timestamps and caller positions through to the results.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import dataclasses
import logging
import time
from typing import List, Optional, Sequence, Tuple

from config import settings
from engine import anomaly, forecast as trend, insights, stats
from engine.anomaly import AnomalyRecord
from engine.enums import AnomalyMethod, ForecastSource, InsightType, VisualizationMode
from engine.forecast import ForecastPoint
from engine.insights import Insight
from engine.series import PreparedSeries, detect_seasonality, infer_step_ms, prepare
from api.requests import AnalyzeRequest
from api.responses import (
    AnalysisReport,
    AnomalyModel,
    ForecastPointModel,
    InsightModel,
    SeasonalityModel,
    StatsModel,
)

log = logging.getLogger(__name__)


def _enabled(req: AnalyzeRequest) -> Tuple[bool, bool, bool]:
    if req.mode is VisualizationMode.ai_analysis:
        return True, True, True
    return req.enable_anomaly_detection, req.enable_trend_prediction, req.enable_insights


def _resolve_detector(
    req: AnalyzeRequest, n: int, warnings: List[str]
) -> Tuple[AnomalyMethod, Optional[float]]:
    method = req.method
    if method.is_heavy and n > settings.heavy_method_max_samples:
        warnings.append(
            f"{method.value} detection is limited to {settings.heavy_method_max_samples} samples; "
            f"zscore was used for {n} samples"
        )
        log.debug("substituting zscore for %s on %d samples", method.value, n)
        return AnomalyMethod.zscore, req.sensitivity
    if method is AnomalyMethod.ml and req.sensitivity is not None:
        return method, req.sensitivity * settings.ml_sensitivity_scale
    return method, req.sensitivity


def _detect(
    req: AnalyzeRequest, series: PreparedSeries, now_ms: int, warnings: List[str]
) -> Tuple[AnomalyMethod, List[AnomalyRecord]]:
    method, sensitivity = _resolve_detector(req, len(series), warnings)
    found = anomaly.detect(series.values, method, sensitivity, now_ms=now_ms)
    found = anomaly.attach_timestamps(found, series.timestamps)
    return method, found


def _forecast(
    req: AnalyzeRequest, series: PreparedSeries, now_ms: int, warnings: List[str]
) -> trend.TrendForecast:
    steps = min(req.steps, settings.forecast_max_steps)
    if steps < req.steps:
        warnings.append(f"forecast horizon capped at {steps} steps")

    allow_network = len(series) <= settings.heavy_method_max_samples
    if not allow_network:
        warnings.append(
            f"network forecasting is limited to {settings.heavy_method_max_samples} samples; "
            "linear trend was used"
        )

    origin_ms, step_ms = now_ms, None
    if series.timestamps:
        origin_ms = series.timestamps[-1]
        step_ms = infer_step_ms(series.timestamps)
    return trend.forecast(
        series.values,
        steps,
        origin_ms=origin_ms,
        step_ms=step_ms,
        allow_network=allow_network,
    )


def _to_caller_positions(series: PreparedSeries, found: Sequence[AnomalyRecord]) -> List[AnomalyRecord]:
    return [dataclasses.replace(a, index=series.source_index(a.index)) for a in found]


def _overall_severity(found: Sequence[Insight]) -> Optional[InsightType]:
    best: Optional[InsightType] = None
    for item in found:
        if best is None or item.type.weight() > best.weight():
            best = item.type
    return best


def _summary(report: AnalysisReport) -> str:
    parts = []
    if report.anomalies:
        parts.append(f"{len(report.anomalies)} anomaly(ies) by {report.method_used.value}")
    if report.forecasts:
        parts.append(f"{len(report.forecasts)}-step {report.forecast_source.value} forecast")
    if report.seasonality and report.seasonality.has_season:
        parts.append(f"seasonal period {report.seasonality.period}")
    if not parts:
        return f"{report.sample_count} sample(s) analysed; nothing notable found."
    head = f"[{report.overall_severity.value.upper()}] " if report.overall_severity else ""
    return f"{head}{' | '.join(parts)}."


def run(req: AnalyzeRequest, *, now_ms: Optional[int] = None) -> AnalysisReport:
    now = int(time.time() * 1000) if now_ms is None else int(now_ms)
    series = prepare(req.values, req.timestamps, settings.max_points)
    warnings = list(series.warnings)
    n = len(series)

    described = stats.compute(series.values)
    seasonality = detect_seasonality(series.values)
    want_anomalies, want_forecast, want_insights = _enabled(req)

    method_used: Optional[AnomalyMethod] = None
    found: List[AnomalyRecord] = []
    points: List[ForecastPoint] = []
    source: Optional[ForecastSource] = None
    derived: List[Insight] = []

    if n < settings.insight_min_samples:
        log.debug("analysis short-circuited on %d sample(s)", n)
        if want_insights:
            derived = insights.generate(series.values)
    else:
        if want_anomalies:
            method_used, found = _detect(req, series, now, warnings)
        if want_forecast:
            predicted = _forecast(req, series, now, warnings)
            points, source = list(predicted.points), predicted.source
        if want_insights:
            derived = insights.generate(series.values, found, points)

    report = AnalysisReport(
        sample_count=n,
        dropped_count=series.dropped,
        stats=StatsModel.from_record(described) if described else None,
        seasonality=SeasonalityModel.from_record(seasonality),
        anomalies=[AnomalyModel.from_record(a) for a in _to_caller_positions(series, found)],
        forecasts=[ForecastPointModel.from_record(p) for p in points],
        insights=[InsightModel.from_record(i) for i in derived],
        method_used=method_used,
        forecast_source=source,
        warnings=warnings,
        generated_at=now,
        overall_severity=_overall_severity(derived),
        summary="",
    )
    report.summary = _summary(report)
    return report
