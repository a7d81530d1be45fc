"""
Test cases for the analysis orchestrator, covering feature flags, size bounds for the heavier methods, timestamp handling and caller positions.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

import engine.anomaly as anomaly_pkg
from api.requests import AnalyzeRequest
from engine.analyzer import run
from engine.enums import AnomalyMethod, ForecastSource, InsightType, VisualizationMode
from engine.exceptions import InvalidParameter


def test_full_analysis_of_reference_series(reference_series, fixed_now):
    report = run(AnalyzeRequest(values=reference_series), now_ms=fixed_now)
    assert report.sample_count == 20
    assert report.dropped_count == 0
    assert report.stats.count == 20
    assert report.stats.max == 108.3
    assert report.method_used == AnomalyMethod.zscore
    assert [a.index for a in report.anomalies] == [16]
    assert report.forecast_source == ForecastSource.network
    assert len(report.forecasts) == 10
    assert report.forecasts[0].timestamp == fixed_now + 60_000
    assert report.insights
    assert report.generated_at == fixed_now
    assert report.overall_severity == InsightType.warning
    assert report.summary.startswith("[WARNING]")


def test_analysis_is_repeatable(reference_series, fixed_now):
    req = AnalyzeRequest(values=reference_series, method="iqr")
    assert run(req, now_ms=fixed_now).model_dump() == run(req, now_ms=fixed_now).model_dump()


def test_disabled_features_in_chart_mode(reference_series, fixed_now):
    req = AnalyzeRequest(
        values=reference_series,
        enable_anomaly_detection=False,
        enable_trend_prediction=False,
        enable_insights=False,
    )
    report = run(req, now_ms=fixed_now)
    assert report.stats is not None
    assert report.anomalies == []
    assert report.forecasts == []
    assert report.insights == []
    assert report.method_used is None
    assert report.forecast_source is None


def test_ai_analysis_mode_enables_everything(reference_series, fixed_now):
    req = AnalyzeRequest(
        values=reference_series,
        mode=VisualizationMode.ai_analysis,
        enable_anomaly_detection=False,
        enable_trend_prediction=False,
        enable_insights=False,
    )
    report = run(req, now_ms=fixed_now)
    assert report.method_used == AnomalyMethod.zscore
    assert report.forecasts
    assert report.insights


def test_single_sample_short_circuits(fixed_now):
    report = run(AnalyzeRequest(values=[5.0]), now_ms=fixed_now)
    assert report.stats.count == 1
    assert report.anomalies == []
    assert report.forecasts == []
    assert len(report.insights) == 1
    assert "Not enough data points" in report.insights[0].message


def test_single_sample_respects_disabled_insights(fixed_now):
    report = run(AnalyzeRequest(values=[5.0], enable_insights=False), now_ms=fixed_now)
    assert report.stats.count == 1
    assert report.insights == []
    assert report.overall_severity is None


def test_empty_series(fixed_now):
    report = run(AnalyzeRequest(values=[]), now_ms=fixed_now)
    assert report.stats is None
    assert report.sample_count == 0
    assert report.seasonality.has_season is False


def test_ml_receives_scaled_sensitivity(reference_series, fixed_now, monkeypatch):
    seen = {}
    original = anomaly_pkg.detect

    def recording_detect(values, method, sensitivity=None, **kwargs):
        seen["method"], seen["sensitivity"] = method, sensitivity
        return original(values, method, sensitivity, **kwargs)

    monkeypatch.setattr(anomaly_pkg, "detect", recording_detect)
    run(AnalyzeRequest(values=reference_series, method="ml", sensitivity=3.0), now_ms=fixed_now)
    assert seen["method"] == AnomalyMethod.ml
    assert seen["sensitivity"] == pytest.approx(0.3)


def test_heavy_methods_are_replaced_on_long_series(fixed_now):
    values = [float(i % 7) for i in range(150)]
    report = run(AnalyzeRequest(values=values, method="ml", sensitivity=2.0), now_ms=fixed_now)
    assert report.method_used == AnomalyMethod.zscore
    assert report.forecast_source == ForecastSource.linear
    assert any("zscore was used" in w for w in report.warnings)
    assert any("linear trend was used" in w for w in report.warnings)


def test_steps_are_capped(reference_series, fixed_now):
    report = run(AnalyzeRequest(values=reference_series, steps=20), now_ms=fixed_now)
    assert len(report.forecasts) == 10
    assert any("capped" in w for w in report.warnings)


def test_real_timestamps_flow_into_results(reference_series):
    timestamps = [1_000_000 + i * 60_000 for i in range(len(reference_series))]
    report = run(AnalyzeRequest(values=reference_series, timestamps=timestamps, steps=3))
    assert report.anomalies[0].timestamp == timestamps[16]
    assert [f.timestamp for f in report.forecasts] == [timestamps[-1] + i * 60_000 for i in (1, 2, 3)]


def test_anomaly_indices_refer_to_caller_positions(reference_series, fixed_now):
    report = run(AnalyzeRequest(values=[None] + reference_series), now_ms=fixed_now)
    assert report.dropped_count == 1
    assert report.sample_count == 20
    assert [a.index for a in report.anomalies] == [17]
    assert report.anomalies[0].value == 108.3


def test_timestamp_length_mismatch(reference_series):
    with pytest.raises(InvalidParameter):
        run(AnalyzeRequest(values=reference_series, timestamps=[1, 2, 3]))
