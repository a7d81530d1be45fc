"""
Entry point for the TrendLens Analysis Engine API server.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI

from api.routes import router
from config import settings
from services.session_service import session_service

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    stream=sys.stdout,
)
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    log.info(
        "TrendLens starting (max_points=%d, heavy_method_max_samples=%d)",
        settings.max_points,
        settings.heavy_method_max_samples,
    )
    try:
        yield
    finally:
        await session_service.shutdown()
        log.info("TrendLens stopped")


app = FastAPI(
    title="TrendLens Analysis Engine",
    description="Anomaly detection, short-horizon trend forecasting and rule-based insights over univariate time series.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router, prefix="/api/v1")


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
        access_log=True,
    )
