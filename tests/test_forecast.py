"""
Test cases for trend forecasting: the network forecaster, the dampened linear fallback and the horizon checks.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from engine.enums import ForecastSource
from engine.exceptions import InvalidParameter
from engine.forecast import forecast, predict_trend
from engine.forecast import network as network_module
from engine.forecast import trend as trend_module
from engine.forecast.linear import linear_forecast
from engine.forecast.network import network_forecast
from engine.forecast.points import step_timestamps

RISING = [float(v) for v in range(1, 31)]


def test_linear_confidence_strictly_decreases_and_values_stay_bounded():
    points = linear_forecast(np.array([1.0, 2.0, 3.0, 4.0, 5.0, 6.0]), 5, origin_ms=0, step_ms=1000)
    confidences = [p.confidence for p in points]
    assert confidences == pytest.approx([0.88, 0.76, 0.64, 0.52, 0.4])
    assert all(a > b for a, b in zip(confidences, confidences[1:]))
    assert [p.timestamp for p in points] == [1000, 2000, 3000, 4000, 5000]
    assert all(4.0 <= p.value <= 10.0 for p in points)


def test_linear_long_horizon_dampens_toward_recent_mean():
    points = linear_forecast(np.array([1.0, 2.0, 3.0, 4.0, 5.0, 6.0]), 50, origin_ms=0)
    assert max(p.value for p in points) < 10.0
    assert points[-1].value == pytest.approx(4.13, abs=0.05)
    assert points[-1].confidence == pytest.approx(0.4)
    assert all(p.confidence >= 0.3 for p in points)


def test_step_timestamps_default_spacing():
    assert step_timestamps(3, 0, None) == [60_000, 120_000, 180_000]


def test_empty_series_has_no_forecast():
    result = forecast([], 5)
    assert result.points == ()
    assert result.source is None


def test_single_value_uses_flat_linear_trend():
    result = forecast([7.0], 3, origin_ms=0)
    assert result.source == ForecastSource.linear
    assert [p.value for p in result.points] == pytest.approx([7.0, 7.0, 7.0])


def test_short_series_skips_network():
    assert forecast([1.0, 2.0, 3.0, 4.0], 4, origin_ms=0).source == ForecastSource.linear
    # five samples yield only two training pairs
    assert forecast([1.0, 2.0, 3.0, 4.0, 5.0], 4, origin_ms=0).source == ForecastSource.linear


def test_network_forecast_shape_and_confidence():
    result = forecast(RISING, 10, origin_ms=0, step_ms=1000)
    assert result.source == ForecastSource.network
    assert len(result.points) == 10
    confidences = [p.confidence for p in result.points]
    assert all(0.4 <= c <= 0.95 for c in confidences)
    assert all(a >= b for a, b in zip(confidences, confidences[1:]))
    assert all(np.isfinite(p.value) for p in result.points)
    assert [p.timestamp for p in result.points] == [i * 1000 for i in range(1, 11)]


def test_network_forecast_is_deterministic():
    first = network_forecast(np.array(RISING), 5, origin_ms=0)
    second = network_forecast(np.array(RISING), 5, origin_ms=0)
    assert first == second


def test_network_forecast_is_stable_across_threads():
    series = [np.array(RISING), np.array(RISING[::-1])]
    serial = [network_forecast(arr, 3, origin_ms=0) for arr in series]
    jobs = [series[i % 2] for i in range(16)]
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda arr: network_forecast(arr, 3, origin_ms=0), jobs))
    for i, result in enumerate(results):
        assert result == serial[i % 2]


def test_network_failure_falls_back_to_linear(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("training failed")

    monkeypatch.setattr(network_module, "_fit", boom)
    result = forecast(RISING, 5, origin_ms=0)
    assert result.source == ForecastSource.linear
    assert len(result.points) == 5


def test_network_unavailable_falls_back_to_linear(monkeypatch):
    monkeypatch.setattr(trend_module, "network_forecast", lambda *a, **k: None)
    result = forecast(RISING, 3, origin_ms=0)
    assert result.source == ForecastSource.linear
    assert list(result.points) == linear_forecast(np.array(RISING), 3, 0)


def test_network_can_be_disabled():
    assert forecast(RISING, 3, origin_ms=0, allow_network=False).source == ForecastSource.linear


def test_default_steps():
    assert len(predict_trend(RISING, origin_ms=0)) == 10


@pytest.mark.parametrize("steps", [0, -1, 2.5, True, "3"])
def test_invalid_steps_are_rejected(steps):
    with pytest.raises(InvalidParameter):
        forecast(RISING, steps)
