"""
Health check route reporting service status and the active analysis limits.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter

from config import HEALTH_PATH, settings
from engine.enums import AnomalyMethod
from api.routes.exception import handle_exceptions

router = APIRouter(tags=["Health"])


@router.get(HEALTH_PATH)
@handle_exceptions
async def health() -> Dict[str, Any]:
    return {
        "status": "ok",
        "methods": [m.value for m in AnomalyMethod],
        "max_points": settings.max_points,
        "heavy_method_max_samples": settings.heavy_method_max_samples,
        "forecast_max_steps": settings.forecast_max_steps,
    }
