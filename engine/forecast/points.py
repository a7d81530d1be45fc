"""
Forecast point record and the timeline helper that stamps one point per step after an origin.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Optional

from config import settings


@dataclass(frozen=True)
class ForecastPoint:
    timestamp: int
    value: float
    confidence: float


def step_timestamps(steps: int, origin_ms: Optional[int], step_ms: Optional[int]) -> List[int]:
    origin = int(time.time() * 1000) if origin_ms is None else int(origin_ms)
    spacing = int(settings.forecast_step_ms if step_ms is None else step_ms)
    return [origin + i * spacing for i in range(1, steps + 1)]
