"""
Analysis routes: the full single-request analysis plus the individual anomaly, insight and statistics operations.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter

from api.requests import AnalyzeRequest, AnomalyRequest, InsightRequest, StatsRequest
from api.responses import AnalysisReport, AnomalyModel, InsightModel, StatsResponse
from api.routes.exception import handle_exceptions
from services import analyze_service

router = APIRouter(tags=["Analysis"])


@router.post("/analyze", response_model=AnalysisReport, summary="Statistics, anomalies, forecast and insights in one pass")
@handle_exceptions
async def analyze(req: AnalyzeRequest) -> AnalysisReport:
    return await analyze_service.run_analysis(req)


@router.post("/anomalies", response_model=List[AnomalyModel], summary="Flag anomalous samples with one method")
@handle_exceptions
async def anomalies(req: AnomalyRequest) -> List[AnomalyModel]:
    return await analyze_service.detect_anomalies(req)


@router.post("/insights", response_model=List[InsightModel], summary="Rule-based insights for a series")
@handle_exceptions
async def insights(req: InsightRequest) -> List[InsightModel]:
    return await analyze_service.derive_insights(req)


@router.post("/stats", response_model=StatsResponse, summary="Descriptive statistics and seasonality")
@handle_exceptions
async def describe(req: StatsRequest) -> StatsResponse:
    return await analyze_service.describe(req)
