"""
Short-horizon forecasting with a small feed-forward network trained from scratch on each call: the most recent window of the series is normalized, turned into supervised pairs of three consecutive values and the value that follows them, fitted with Adam on mean-squared error, then rolled out autoregressively with a confidence that decays with the step and with the distance from the last observation.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import math
import threading
from typing import List, Optional, Tuple

import numpy as np
import torch
from torch import nn
from torch.utils.data import DataLoader, TensorDataset

from config import settings
from engine.forecast.points import ForecastPoint, step_timestamps
from engine.numeric import clamp, floor_std, population_moments

log = logging.getLogger(__name__)

# torch seeds, weight init and dropout all draw from the process-wide generator
_seeded_lock = threading.Lock()


class TrendNetwork(nn.Module):
    def __init__(self, sequence_length: int, hidden: Tuple[int, int], dropout: float) -> None:
        super().__init__()
        first, second = hidden
        self.layers = nn.Sequential(
            nn.Linear(sequence_length, first),
            nn.ReLU(),
            nn.Dropout(dropout),
            nn.Linear(first, second),
            nn.ReLU(),
            nn.Linear(second, 1),
        )

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return self.layers(x).squeeze(-1)


def _lookback(n: int) -> int:
    raw = math.floor(n * settings.forecast_lookback_ratio)
    return int(clamp(raw, settings.forecast_lookback_min, settings.forecast_lookback_max))


def _training_pairs(normalized: np.ndarray, sequence_length: int) -> Tuple[np.ndarray, np.ndarray]:
    xs, ys = [], []
    for i in range(sequence_length, len(normalized)):
        xs.append(normalized[i - sequence_length:i])
        ys.append(normalized[i])
    return np.array(xs, dtype=np.float32).reshape(-1, sequence_length), np.array(ys, dtype=np.float32)


def _fit(xs: np.ndarray, ys: np.ndarray, seed: int) -> TrendNetwork:
    model = TrendNetwork(
        sequence_length=xs.shape[1],
        hidden=tuple(settings.forecast_hidden_units),
        dropout=settings.forecast_dropout,
    )
    dataset = TensorDataset(torch.from_numpy(xs), torch.from_numpy(ys))
    loader = DataLoader(
        dataset,
        batch_size=max(1, min(settings.forecast_batch_size, len(dataset))),
        shuffle=True,
        generator=torch.Generator().manual_seed(seed),
    )
    criterion = nn.MSELoss()
    optimizer = torch.optim.Adam(model.parameters(), lr=settings.forecast_learning_rate)

    model.train()
    for epoch in range(settings.forecast_epochs):
        total_loss = 0.0
        for batch_x, batch_y in loader:
            optimizer.zero_grad()
            loss = criterion(model(batch_x), batch_y)
            loss.backward()
            optimizer.step()
            total_loss += float(loss.item())
        if not math.isfinite(total_loss):
            raise FloatingPointError(f"training loss diverged at epoch {epoch}")
    log.debug("trend network trained on %d pairs, final epoch loss %.6f", len(dataset), total_loss)
    model.eval()
    return model


def _rollout(
    model: TrendNetwork,
    seed_window: np.ndarray,
    steps: int,
    mean: float,
    std: float,
    last_actual: float,
    stamps: List[int],
) -> Optional[List[ForecastPoint]]:
    window = [float(v) for v in seed_window]
    penalty = 1.0
    points: List[ForecastPoint] = []

    with torch.no_grad():
        for step in range(1, steps + 1):
            x = torch.tensor([window], dtype=torch.float32)
            normalized_prediction = float(model(x).item())
            if not math.isfinite(normalized_prediction):
                log.warning("trend network produced a non-finite prediction at step %d", step)
                return None
            predicted = normalized_prediction * std + mean

            distance_ratio = abs(predicted - last_actual) / (abs(last_actual) + 1.0)
            # running minimum keeps the confidence non-increasing across steps
            penalty = min(penalty, max(0.0, 1.0 - settings.forecast_distance_weight * distance_ratio))
            decay = settings.forecast_step_decay ** (step - 1)
            confidence = clamp(decay * penalty, settings.forecast_confidence_min, settings.forecast_confidence_max)

            points.append(ForecastPoint(timestamp=stamps[step - 1], value=predicted, confidence=confidence))
            window = window[1:] + [normalized_prediction]
    return points


def _network_forecast(
    arr: np.ndarray,
    steps: int,
    origin_ms: Optional[int],
    step_ms: Optional[int],
    seed: int,
) -> Optional[List[ForecastPoint]]:
    training = arr[-_lookback(arr.size):]
    mean, _, std = population_moments(training)
    std = floor_std(std, settings.forecast_std_floor, 1.0)
    normalized = (training - mean) / std

    sequence_length = settings.forecast_sequence_length
    xs, ys = _training_pairs(normalized, sequence_length)
    if len(xs) < settings.forecast_min_pairs:
        log.debug("only %d training pairs; network forecast skipped", len(xs))
        return None

    stamps = step_timestamps(steps, origin_ms, step_ms)
    with _seeded_lock, torch.random.fork_rng(devices=[]):
        torch.manual_seed(seed)
        model = _fit(xs, ys, seed)
        return _rollout(
            model,
            normalized[-sequence_length:],
            steps,
            mean,
            std,
            float(arr[-1]),
            stamps,
        )


def network_forecast(
    arr: np.ndarray,
    steps: int,
    origin_ms: Optional[int] = None,
    step_ms: Optional[int] = None,
    seed: Optional[int] = None,
) -> Optional[List[ForecastPoint]]:
    """Return network forecast points, or ``None`` when the network cannot answer."""
    if seed is None:
        seed = settings.forecast_random_seed
    try:
        return _network_forecast(arr, steps, origin_ms, step_ms, seed)
    except Exception as exc:
        log.warning("network forecast failed, falling back to linear trend: %s", exc)
        return None
