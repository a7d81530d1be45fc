"""
Test cases for application wiring: mounted routes and the lifespan shutdown of session work.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

import main


def test_routes_are_mounted_under_api_prefix():
    paths = {route.path for route in main.app.routes}
    for path in (
        "/api/v1/health",
        "/api/v1/analyze",
        "/api/v1/anomalies",
        "/api/v1/forecast",
        "/api/v1/insights",
        "/api/v1/stats",
        "/api/v1/sessions/{session_id}",
    ):
        assert path in paths


@pytest.mark.asyncio
async def test_lifespan_shuts_down_sessions(monkeypatch):
    called = []

    async def fake_shutdown():
        called.append(True)

    monkeypatch.setattr(main.session_service, "shutdown", fake_shutdown)
    async with main.lifespan(main.app):
        assert called == []
    assert called == [True]
