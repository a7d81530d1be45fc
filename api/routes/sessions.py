"""
Session routes for debounced, superseding re-analysis of a series that keeps changing.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, HTTPException, Query, status

from api.requests import AnalyzeRequest
from api.responses import SessionResponse
from api.routes.common import coerce_query_value
from api.routes.exception import handle_exceptions
from services.session_service import SessionView, session_service

router = APIRouter(tags=["Sessions"])


def _response(view: SessionView) -> SessionResponse:
    return SessionResponse(
        session_id=view.session_id,
        status=view.status,
        revision=view.revision,
        completed_revision=view.completed_revision,
        error=view.error,
        report=view.report,
    )


@router.post(
    "/sessions/{session_id}",
    response_model=SessionResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Submit the newest series for a session",
)
@handle_exceptions
async def submit(session_id: str, req: AnalyzeRequest) -> SessionResponse:
    return _response(await session_service.submit(session_id, req))


@router.get("/sessions/{session_id}", response_model=SessionResponse, summary="Latest published analysis of a session")
@handle_exceptions
async def latest(session_id: str, wait: bool = Query(default=False)) -> SessionResponse:
    wait = coerce_query_value(wait, bool)
    view = await (session_service.settle(session_id) if wait else session_service.latest(session_id))
    if view is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="session not found")
    return _response(view)


@router.delete("/sessions/{session_id}", summary="Cancel and forget a session")
@handle_exceptions
async def drop(session_id: str) -> Dict[str, str]:
    if not await session_service.drop(session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="session not found")
    return {"status": "deleted", "session_id": session_id}
