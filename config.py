"""
Constants and configuration for TrendLens.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
from typing import Dict, Tuple

from pydantic_settings import BaseSettings


TRENDLENS_HOST: str = os.getenv("TRENDLENS_HOST", "0.0.0.0")
TRENDLENS_PORT: int = int(os.getenv("TRENDLENS_PORT", "4323"))
TRENDLENS_LOG_LEVEL: str = os.getenv("TRENDLENS_LOG_LEVEL", "info").lower()

HEALTH_PATH = "/health"

# weight values assigned to insight types for ranking
INSIGHT_WEIGHTS: Dict[str, int] = {
    "info": 1,
    "warning": 2,
    "critical": 4,
}


class Settings(BaseSettings):
    host: str = TRENDLENS_HOST
    port: int = TRENDLENS_PORT
    log_level: str = TRENDLENS_LOG_LEVEL

    # anomaly detection defaults; sensitivity is used directly as the cutoff
    anomaly_default_sensitivity_zscore: float = 3.0
    anomaly_default_sensitivity_iqr: float = 2.0
    anomaly_default_sensitivity_ml: float = 0.3
    anomaly_zscore_min_samples: int = 3
    anomaly_iqr_min_samples: int = 4
    anomaly_ml_min_samples: int = 5
    anomaly_iqr_q1: float = 0.25
    anomaly_iqr_q3: float = 0.75
    anomaly_placeholder_spacing_ms: int = 1000

    # reconstruction-error detector
    ml_window_max: int = 5
    ml_window_divisor: int = 3
    ml_threshold_scale: float = 0.8
    ml_fallback_sensitivity_multiplier: float = 10.0

    # forecaster, network path
    forecast_min_samples: int = 5
    forecast_lookback_ratio: float = 0.3
    forecast_lookback_min: int = 10
    forecast_lookback_max: int = 30
    forecast_std_floor: float = 0.01
    forecast_sequence_length: int = 3
    forecast_min_pairs: int = 3
    forecast_hidden_units: Tuple[int, int] = (8, 4)
    forecast_dropout: float = 0.1
    forecast_learning_rate: float = 0.01
    forecast_epochs: int = 20
    forecast_batch_size: int = 8
    forecast_random_seed: int = 42
    forecast_step_decay: float = 0.92
    forecast_distance_weight: float = 0.5
    forecast_confidence_min: float = 0.4
    forecast_confidence_max: float = 0.95

    # forecaster, linear fallback
    forecast_linear_min_lookback: int = 5
    forecast_linear_denominator_eps: float = 1e-4
    forecast_linear_dampening: float = 0.12
    forecast_linear_confidence_slope: float = 0.6
    forecast_linear_confidence_floor: float = 0.3

    forecast_default_steps: int = 10
    forecast_step_ms: int = 60_000

    # insight rules: thresholds are percentages unless noted
    insight_min_samples: int = 2
    insight_anomaly_critical_ratio: float = 0.1
    insight_anomaly_confidence: float = 0.9
    insight_swing_pct: float = 20.0
    insight_swing_confidence: float = 0.85
    insight_trend_pct: float = 15.0
    insight_trend_confidence: float = 0.8
    insight_forecast_pct: float = 10.0
    insight_forecast_warning_pct: float = 30.0
    insight_forecast_confidence: float = 0.75
    insight_extreme_high_ratio: float = 1.5
    insight_extreme_low_ratio: float = 0.5
    insight_extreme_confidence: float = 0.9
    insight_volatility_high: float = 0.3
    insight_volatility_low: float = 0.05
    insight_volatility_high_confidence: float = 0.85
    insight_volatility_low_confidence: float = 0.8

    # seasonality helper
    seasonality_min_samples: int = 10
    seasonality_max_lag: int = 50
    seasonality_correlation_cutoff: float = 0.5

    # timeline resampling
    gap_fill_threshold_ms: int = 120_000
    gap_fill_step_ms: int = 60_000
    gap_fill_max_points: int = 9

    # orchestration bounds
    max_points: int = 1000
    heavy_method_max_samples: int = 100
    ml_sensitivity_scale: float = 0.1
    forecast_max_steps: int = 10
    debounce_seconds: float = 0.5
    analyze_timeout_seconds: float = 30.0
    # idle sessions past this age are evicted on the next submit or read; 0 keeps them forever
    session_idle_ttl_seconds: float = 900.0

    model_config = {
        "env_prefix": "TRENDLENS_",
        "extra": "ignore",
    }


settings = Settings()
