"""
Rule engine that turns a numeric series, its detected anomalies and its forecast into natural-language insights. Each rule is an independent function of a shared read-only context and contributes at most one insight; rules never see each other's output, so evaluation order only affects the order of the raw list, which is ranked by severity and confidence before it is returned.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from config import settings
from engine.anomaly.detection import AnomalyRecord
from engine.enums import InsightType
from engine.forecast.points import ForecastPoint
from engine.numeric import finite, pct_change, population_moments, safe_div


@dataclass(frozen=True)
class Insight:
    type: InsightType
    message: str
    confidence: float
    rule: str = ""


@dataclass(frozen=True)
class InsightContext:
    count: int
    mean: float
    std: float
    latest: float
    previous: float
    first_half_mean: float
    second_half_mean: float
    anomaly_count: int
    forecast_mean: Optional[float]


Rule = Callable[[InsightContext], Optional[Insight]]


def build_context(
    values: Sequence[float],
    anomalies: Sequence[AnomalyRecord],
    forecasts: Sequence[ForecastPoint],
) -> InsightContext:
    arr = finite(values)
    n = int(arr.size)
    mean, _, std = population_moments(arr)
    mid = n // 2
    predicted = finite([p.value for p in forecasts])
    return InsightContext(
        count=n,
        mean=mean,
        std=std,
        latest=float(arr[-1]) if n else 0.0,
        previous=float(arr[-2]) if n > 1 else 0.0,
        first_half_mean=float(np.mean(arr[:mid])) if mid else 0.0,
        second_half_mean=float(np.mean(arr[mid:])) if n else 0.0,
        anomaly_count=len(anomalies),
        forecast_mean=float(np.mean(predicted)) if predicted.size else None,
    )


def anomaly_presence(ctx: InsightContext) -> Optional[Insight]:
    if ctx.anomaly_count == 0:
        return None
    critical = ctx.anomaly_count > ctx.count * settings.insight_anomaly_critical_ratio
    noun = "anomalies" if ctx.anomaly_count > 1 else "anomaly"
    follow_up = "Immediate attention required!" if critical else "Investigation recommended."
    return Insight(
        type=InsightType.critical if critical else InsightType.warning,
        message=f"Detected {ctx.anomaly_count} {noun} in the data. {follow_up}",
        confidence=settings.insight_anomaly_confidence,
        rule="anomaly_presence",
    )


def latest_swing(ctx: InsightContext) -> Optional[Insight]:
    change = pct_change(ctx.latest, ctx.previous)
    if change is None or abs(change) <= settings.insight_swing_pct:
        return None
    direction = "increase" if change > 0 else "decrease"
    return Insight(
        type=InsightType.info if change > 0 else InsightType.warning,
        message=f"Significant {direction} of {abs(change):.1f}% detected in latest value.",
        confidence=settings.insight_swing_confidence,
        rule="latest_swing",
    )


def half_series_trend(ctx: InsightContext) -> Optional[Insight]:
    change = pct_change(ctx.second_half_mean, ctx.first_half_mean)
    if change is None or abs(change) <= settings.insight_trend_pct:
        return None
    direction = "upward" if change > 0 else "downward"
    return Insight(
        type=InsightType.info,
        message=f"Overall trend shows {direction} movement of {abs(change):.1f}% over time.",
        confidence=settings.insight_trend_confidence,
        rule="half_series_trend",
    )


def forecast_divergence(ctx: InsightContext) -> Optional[Insight]:
    if ctx.forecast_mean is None:
        return None
    change = pct_change(ctx.forecast_mean, ctx.mean)
    if change is None or abs(change) <= settings.insight_forecast_pct:
        return None
    direction = "increase" if change > 0 else "decrease"
    return Insight(
        type=InsightType.warning if abs(change) > settings.insight_forecast_warning_pct else InsightType.info,
        message=f"Forecast predicts {direction} of {abs(change):.1f}% in upcoming values.",
        confidence=settings.insight_forecast_confidence,
        rule="forecast_divergence",
    )


def extreme_current_value(ctx: InsightContext) -> Optional[Insight]:
    if ctx.mean == 0:
        return None
    if ctx.latest > ctx.mean * settings.insight_extreme_high_ratio:
        above = safe_div((ctx.latest - ctx.mean) * 100.0, ctx.mean, 0.0)
        return Insight(
            type=InsightType.info,
            message=f"Current value ({ctx.latest:.2f}) is {above:.0f}% above average.",
            confidence=settings.insight_extreme_confidence,
            rule="extreme_current_value",
        )
    if ctx.latest < ctx.mean * settings.insight_extreme_low_ratio:
        below = safe_div((ctx.mean - ctx.latest) * 100.0, ctx.mean, 0.0)
        return Insight(
            type=InsightType.warning,
            message=f"Current value ({ctx.latest:.2f}) is {below:.0f}% below average.",
            confidence=settings.insight_extreme_confidence,
            rule="extreme_current_value",
        )
    return None


def volatility(ctx: InsightContext) -> Optional[Insight]:
    cv = safe_div(ctx.std, ctx.mean, None)
    if cv is None:
        return None
    if cv > settings.insight_volatility_high:
        return Insight(
            type=InsightType.warning,
            message=f"High volatility detected ({cv * 100:.1f}%). Data shows significant fluctuations.",
            confidence=settings.insight_volatility_high_confidence,
            rule="volatility",
        )
    if cv < settings.insight_volatility_low:
        return Insight(
            type=InsightType.info,
            message="Low volatility detected. Data is stable and consistent.",
            confidence=settings.insight_volatility_low_confidence,
            rule="volatility",
        )
    return None


RULES: Tuple[Rule, ...] = (
    anomaly_presence,
    latest_swing,
    half_series_trend,
    forecast_divergence,
    extreme_current_value,
    volatility,
)


def rank(insights: Sequence[Insight]) -> List[Insight]:
    return sorted(insights, key=lambda i: (-i.type.weight(), -i.confidence))


def generate(
    values: Sequence[float],
    anomalies: Sequence[AnomalyRecord] = (),
    forecasts: Sequence[ForecastPoint] = (),
) -> List[Insight]:
    ctx = build_context(values, anomalies, forecasts)
    if ctx.count < settings.insight_min_samples:
        return [Insight(
            type=InsightType.info,
            message=(
                "Not enough data points for analysis. "
                f"Need at least {settings.insight_min_samples} data points."
            ),
            confidence=1.0,
            rule="insufficient_data",
        )]

    insights = [insight for insight in (rule(ctx) for rule in RULES) if insight is not None]
    return rank(insights)
