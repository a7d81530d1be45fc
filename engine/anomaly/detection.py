"""
Detection logic for identifying anomalous samples in a univariate series using one of three caller-selected methods: a global z-score cutoff, an interquartile-range fence, or a sliding-window reconstruction error over the standardized series that falls back to the z-score method when it cannot run.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from config import settings
from engine.enums import AnomalyMethod
from engine.exceptions import InvalidParameter
from engine.fallback import first_available
from engine.numeric import (
    EPSILON,
    finite,
    finite_mask,
    is_finite_number,
    population_moments,
    safe_div,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnomalyRecord:
    index: int
    value: float
    timestamp: int
    score: float
    method: AnomalyMethod


def _now_ms() -> int:
    return int(time.time() * 1000)


def _placeholder_timestamp(length: int, index: int, now_ms: int) -> int:
    return now_ms - (length - index) * int(settings.anomaly_placeholder_spacing_ms)


def _resolve_sensitivity(method: AnomalyMethod, sensitivity: Optional[float]) -> float:
    if sensitivity is None:
        return method.default_sensitivity()
    if not is_finite_number(sensitivity) or float(sensitivity) <= 0:
        raise InvalidParameter(f"sensitivity must be a positive finite number, got {sensitivity!r}")
    return float(sensitivity)


def _resolve_method(method: AnomalyMethod | str) -> AnomalyMethod:
    try:
        return AnomalyMethod(method)
    except ValueError as exc:
        allowed = ", ".join(m.value for m in AnomalyMethod)
        raise InvalidParameter(f"unknown anomaly method {method!r}; expected one of {allowed}") from exc


def detect_zscore(
    values: Sequence[float],
    sensitivity: Optional[float] = None,
    *,
    now_ms: Optional[int] = None,
) -> List[AnomalyRecord]:
    cutoff = _resolve_sensitivity(AnomalyMethod.zscore, sensitivity)
    arr = finite(values)
    if arr.size < settings.anomaly_zscore_min_samples:
        return []

    mean, _, std = population_moments(arr)
    std = std or 1.0
    now = _now_ms() if now_ms is None else now_ms
    length = len(values)

    anomalies: List[AnomalyRecord] = []
    for index, (ok, raw) in enumerate(zip(finite_mask(values), values)):
        if not ok:
            continue
        value = float(raw)
        score = abs(value - mean) / std
        if score > cutoff:
            anomalies.append(AnomalyRecord(
                index=index,
                value=value,
                timestamp=_placeholder_timestamp(length, index, now),
                score=score,
                method=AnomalyMethod.zscore,
            ))
    return anomalies


def detect_iqr(
    values: Sequence[float],
    sensitivity: Optional[float] = None,
    *,
    now_ms: Optional[int] = None,
) -> List[AnomalyRecord]:
    k = _resolve_sensitivity(AnomalyMethod.iqr, sensitivity)
    arr = finite(values)
    n = int(arr.size)
    if n < settings.anomaly_iqr_min_samples:
        return []

    ordered = np.sort(arr)
    q1 = float(ordered[math.floor(n * settings.anomaly_iqr_q1)])
    q3 = float(ordered[math.floor(n * settings.anomaly_iqr_q3)])
    iqr = q3 - q1
    lower = q1 - k * iqr
    upper = q3 + k * iqr
    now = _now_ms() if now_ms is None else now_ms
    length = len(values)

    anomalies: List[AnomalyRecord] = []
    for index, (ok, raw) in enumerate(zip(finite_mask(values), values)):
        if not ok:
            continue
        value = float(raw)
        if lower <= value <= upper:
            continue
        distance = min(abs(value - lower), abs(value - upper))
        anomalies.append(AnomalyRecord(
            index=index,
            value=value,
            timestamp=_placeholder_timestamp(length, index, now),
            # zero-width fence: still flagged, reported with score 0
            score=safe_div(distance, iqr, 0.0),
            method=AnomalyMethod.iqr,
        ))
    return anomalies


def _reconstruction_anomalies(
    values: Sequence[float],
    sensitivity: float,
    now_ms: int,
) -> Optional[List[AnomalyRecord]]:
    try:
        arr = np.asarray(values, dtype=float)
    except (TypeError, ValueError) as exc:
        log.warning("reconstruction detector could not read input: %s", exc)
        return None
    if arr.ndim != 1 or not np.isfinite(arr).all():
        log.warning("reconstruction detector received non-finite samples")
        return None

    n = int(arr.size)
    window = min(settings.ml_window_max, n // settings.ml_window_divisor)
    if window < 1:
        return []
    threshold = sensitivity * settings.ml_threshold_scale

    anomalies: List[AnomalyRecord] = []
    try:
        with np.errstate(over="raise", invalid="raise", divide="raise"):
            mean, _, std = population_moments(arr)
            standardized = (arr - mean) / (std + EPSILON)
            for i in range(window, n):
                local_mean, _, local_std = population_moments(standardized[i - window:i])
                error = abs(float(standardized[i]) - local_mean) / (local_std + EPSILON)
                if not math.isfinite(error):
                    log.warning("reconstruction error at index %d is not finite", i)
                    return None
                if error > threshold:
                    anomalies.append(AnomalyRecord(
                        index=i,
                        value=float(arr[i]),
                        timestamp=_placeholder_timestamp(n, i, now_ms),
                        score=error,
                        method=AnomalyMethod.ml,
                    ))
    except FloatingPointError as exc:
        log.warning("reconstruction detector numeric failure: %s", exc)
        return None
    return anomalies


def detect_ml(
    values: Sequence[float],
    sensitivity: Optional[float] = None,
    *,
    now_ms: Optional[int] = None,
) -> List[AnomalyRecord]:
    threshold = _resolve_sensitivity(AnomalyMethod.ml, sensitivity)
    if finite(values).size < settings.anomaly_ml_min_samples:
        return []

    now = _now_ms() if now_ms is None else now_ms
    fallback_sensitivity = threshold * settings.ml_fallback_sensitivity_multiplier
    _, anomalies = first_available(
        ("reconstruction", lambda: _reconstruction_anomalies(values, threshold, now)),
        ("zscore", lambda: detect_zscore(values, fallback_sensitivity, now_ms=now)),
    )
    return anomalies or []


_DETECTORS: Dict[AnomalyMethod, Callable[..., List[AnomalyRecord]]] = {
    AnomalyMethod.zscore: detect_zscore,
    AnomalyMethod.iqr: detect_iqr,
    AnomalyMethod.ml: detect_ml,
}


def detect(
    values: Sequence[float],
    method: AnomalyMethod | str = AnomalyMethod.zscore,
    sensitivity: Optional[float] = None,
    *,
    now_ms: Optional[int] = None,
) -> List[AnomalyRecord]:
    resolved = _resolve_method(method)
    return _DETECTORS[resolved](values, sensitivity, now_ms=now_ms)


def attach_timestamps(
    anomalies: List[AnomalyRecord],
    timestamps: Optional[Sequence[int]],
) -> List[AnomalyRecord]:
    if not timestamps:
        return anomalies
    out: List[AnomalyRecord] = []
    for a in anomalies:
        if a.index < len(timestamps) and is_finite_number(timestamps[a.index]):
            out.append(replace(a, timestamp=int(timestamps[a.index])))
        else:
            out.append(a)
    return out
