"""
Series preparation for incoming sample sequences, dropping non-finite samples (and samples whose timestamp is unusable), keeping the most recent window of points, and remembering where each kept sample sat in the caller's sequence so that results can be reported against the original positions.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from engine.exceptions import InvalidParameter
from engine.numeric import is_finite_number

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedSeries:
    values: List[float]
    timestamps: Optional[List[int]]
    positions: List[int]
    dropped: int = 0
    truncated: int = 0
    warnings: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.values)

    def source_index(self, index: int) -> int:
        return self.positions[index]


def prepare(
    values: Sequence[object],
    timestamps: Optional[Sequence[object]] = None,
    max_points: Optional[int] = None,
) -> PreparedSeries:
    if max_points is None:
        from config import settings

        max_points = settings.max_points
    if timestamps is not None and len(timestamps) != len(values):
        raise InvalidParameter(
            f"timestamps length {len(timestamps)} does not match values length {len(values)}"
        )

    kept_values: List[float] = []
    kept_ts: List[int] = []
    positions: List[int] = []
    for i, raw in enumerate(values):
        if not is_finite_number(raw):
            continue
        if timestamps is not None:
            ts = timestamps[i]
            if not is_finite_number(ts):
                continue
            kept_ts.append(int(float(ts)))  # type: ignore[arg-type]
        kept_values.append(float(raw))  # type: ignore[arg-type]
        positions.append(i)

    dropped = len(values) - len(kept_values)
    warnings: List[str] = []
    if dropped:
        log.debug("prepare dropped %d unusable sample(s)", dropped)
        warnings.append(f"{dropped} non-finite or malformed sample(s) ignored")

    truncated = max(0, len(kept_values) - max_points)
    if truncated:
        kept_values = kept_values[-max_points:]
        kept_ts = kept_ts[-max_points:]
        positions = positions[-max_points:]
        warnings.append(f"series truncated to the most recent {max_points} samples")

    if timestamps is not None and any(b < a for a, b in zip(kept_ts, kept_ts[1:])):
        log.warning("prepare received timestamps that are not in ascending order")
        warnings.append("timestamps are not in ascending order; sample order was kept")

    return PreparedSeries(
        values=kept_values,
        timestamps=kept_ts if timestamps is not None else None,
        positions=positions,
        dropped=dropped,
        truncated=truncated,
        warnings=warnings,
    )


def infer_step_ms(timestamps: Optional[Sequence[int]]) -> Optional[int]:
    if not timestamps or len(timestamps) < 2:
        return None
    diffs = np.diff(np.asarray(timestamps, dtype=float))
    positive = diffs[diffs > 0]
    if positive.size == 0:
        return None
    return int(np.median(positive))
