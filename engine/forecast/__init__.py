"""
Forecasting logic for short-horizon trend prediction, combining a small feed-forward network retrained on every call with a deterministic dampened linear trend used when the series is short or the network fails, to produce one confidence-scored point per requested step.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""


from engine.forecast.points import ForecastPoint
from engine.forecast.trend import TrendForecast, forecast, predict_trend

__all__ = ["ForecastPoint", "TrendForecast", "forecast", "predict_trend"]
