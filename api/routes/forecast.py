"""
Forecast route for short-horizon trend prediction with per-step confidence.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import APIRouter

from api.requests import ForecastRequest
from api.responses import ForecastResponse
from api.routes.exception import handle_exceptions
from services import analyze_service

router = APIRouter(tags=["Forecast"])


@router.post("/forecast", response_model=ForecastResponse, summary="Predict the next steps of a series")
@handle_exceptions
async def forecast(req: ForecastRequest) -> ForecastResponse:
    return await analyze_service.predict(req)
