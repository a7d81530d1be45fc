"""
Route-level tests for the analysis, forecast, statistics and health endpoints, including error translation.
"""

from __future__ import annotations

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from api.requests import AnalyzeRequest, AnomalyRequest, ForecastRequest, InsightRequest, StatsRequest
from api.responses import AnomalyModel
from api.routes import analyze as analyze_route
from api.routes import forecast as forecast_route
from api.routes import health as health_route
from engine.enums import AnomalyMethod, ForecastSource, InsightType
from services import analyze_service


@pytest.mark.asyncio
async def test_health_reports_limits():
    body = await health_route.health()
    assert body["status"] == "ok"
    assert body["methods"] == ["zscore", "iqr", "ml"]
    assert body["heavy_method_max_samples"] == 100


@pytest.mark.asyncio
async def test_analyze_route_returns_report(reference_series):
    report = await analyze_route.analyze(AnalyzeRequest(values=reference_series, method="iqr", steps=3))
    assert [a.index for a in report.anomalies] == [8, 16]
    assert len(report.forecasts) == 3
    dumped = report.model_dump(mode="json")
    assert dumped["method_used"] == "iqr"
    assert isinstance(dumped["stats"]["mean"], float)


@pytest.mark.asyncio
async def test_analyze_route_maps_invalid_parameter_to_400(reference_series):
    with pytest.raises(HTTPException) as exc:
        await analyze_route.analyze(AnalyzeRequest(values=reference_series, timestamps=[1.0]))
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_analyze_route_maps_failures_to_500(monkeypatch, reference_series):
    async def broken(req, now_ms=None):
        raise RuntimeError("engine exploded")

    monkeypatch.setattr(analyze_service, "run_analysis", broken)
    with pytest.raises(HTTPException) as exc:
        await analyze_route.analyze(AnalyzeRequest(values=reference_series))
    assert exc.value.status_code == 500
    assert exc.value.detail == "engine exploded"


@pytest.mark.asyncio
async def test_anomalies_route(reference_series):
    found = await analyze_route.anomalies(AnomalyRequest(values=reference_series, sensitivity=2.5))
    assert [a.index for a in found] == [8, 16]
    assert all(a.method == AnomalyMethod.zscore for a in found)


@pytest.mark.asyncio
async def test_anomalies_route_reports_caller_positions(reference_series):
    values = reference_series[:8] + [None, None] + reference_series[8:]
    found = await analyze_route.anomalies(AnomalyRequest(values=values, method="iqr"))
    assert [a.index for a in found] == [10, 18]


@pytest.mark.asyncio
async def test_forecast_route():
    resp = await forecast_route.forecast(ForecastRequest(values=[1.0, 2.0, 3.0], steps=4))
    assert resp.source == ForecastSource.linear
    assert len(resp.points) == 4


@pytest.mark.asyncio
async def test_forecast_route_continues_timestamps():
    values = [float(v) for v in range(1, 13)]
    timestamps = [10_000 + i * 5_000 for i in range(12)]
    resp = await forecast_route.forecast(ForecastRequest(values=values, timestamps=timestamps, steps=2))
    assert [p.timestamp for p in resp.points] == [70_000, 75_000]


@pytest.mark.asyncio
async def test_insights_route():
    anomaly = AnomalyModel(index=1, value=50.0, timestamp=0, score=4.2, method=AnomalyMethod.iqr)
    found = await analyze_route.insights(InsightRequest(values=[10.0, 50.0, 10.0], anomalies=[anomaly]))
    assert found[0].type == InsightType.critical
    assert found[0].rule == "anomaly_presence"


@pytest.mark.asyncio
async def test_stats_route(reference_series):
    resp = await analyze_route.describe(StatsRequest(values=reference_series))
    assert resp.stats.count == 20
    assert resp.stats.median == 24.8
    assert resp.seasonality.has_season is False


def test_request_validation():
    with pytest.raises(ValidationError):
        AnalyzeRequest(values=[1.0], sensitivity=0)
    with pytest.raises(ValidationError):
        AnomalyRequest(values=[1.0], method="fourier")
    with pytest.raises(ValidationError):
        ForecastRequest(values=[1.0], steps=0)
    assert AnalyzeRequest(values=[1.0], mode="ai-analysis").mode.value == "ai-analysis"


@pytest.mark.asyncio
async def test_stats_route_shape_transforms():
    resp = await analyze_route.describe(
        StatsRequest(values=[1.0, 2.0, 3.0, 4.0, 5.0], moving_average_period=2, smoothing_window=3, normalize=True)
    )
    assert resp.moving_average == pytest.approx([1.0, 1.5, 2.5, 3.5, 4.5])
    assert resp.smoothed == pytest.approx([1.5, 2.0, 3.0, 4.0, 4.5])
    assert resp.normalized == pytest.approx([0.0, 0.25, 0.5, 0.75, 1.0])
    plain = await analyze_route.describe(StatsRequest(values=[1.0, 2.0]))
    assert plain.moving_average is None and plain.smoothed is None and plain.normalized is None
    assert plain.resampled is None


@pytest.mark.asyncio
async def test_stats_route_resamples_timeline():
    req = StatsRequest(values=[0.0, 1.0, 6.0], timestamps=[0, 60_000, 360_000], fill_gaps=True)
    resp = await analyze_route.describe(req)
    assert resp.resampled.values == pytest.approx([0.0, 1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    assert resp.stats.count == 3

    req = StatsRequest(values=[1.0, 3.0, 10.0], timestamps=[0, 1_000, 90_000], aggregate_window_ms=60_000)
    resp = await analyze_route.describe(req)
    assert resp.resampled.timestamps == [500.0, 90_000.0]
    assert resp.resampled.values == [2.0, 10.0]


@pytest.mark.asyncio
async def test_stats_route_resampling_needs_timestamps():
    with pytest.raises(HTTPException) as exc:
        await analyze_route.describe(StatsRequest(values=[1.0, 2.0], fill_gaps=True))
    assert exc.value.status_code == 400
