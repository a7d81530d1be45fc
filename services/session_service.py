"""
Session service that recomputes a series analysis on every change without flooding the engine: each submission supersedes the previous one, recomputation waits out a short debounce window, at most one analysis runs per session at a time, and a finished analysis is only published when its request is still the newest one for the session. Sessions left idle past the configured age are evicted.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from api.requests import AnalyzeRequest
from api.responses import AnalysisReport, SessionStatus
from config import settings
from services.analyze_service import run_analysis

log = logging.getLogger(__name__)


@dataclass
class SessionView:
    session_id: str
    status: SessionStatus
    revision: int
    completed_revision: Optional[int] = None
    error: Optional[str] = None
    report: Optional[AnalysisReport] = None


@dataclass
class _Session:
    revision: int = 0
    request: Optional[AnalyzeRequest] = None
    status: SessionStatus = SessionStatus.IDLE
    report: Optional[AnalysisReport] = None
    completed_revision: Optional[int] = None
    error: Optional[str] = None
    waiting: Optional[asyncio.Task] = None
    latest_task: Optional[asyncio.Task] = None
    run_lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    touched_at: float = 0.0


class SessionService:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = asyncio.Lock()
        self._sessions: dict[str, _Session] = {}
        self._tasks: set[asyncio.Task] = set()

    @staticmethod
    def _view(session_id: str, session: _Session) -> SessionView:
        return SessionView(
            session_id=session_id,
            status=session.status,
            revision=session.revision,
            completed_revision=session.completed_revision,
            error=session.error,
            report=session.report,
        )

    def _prune_locked(self) -> None:
        ttl = float(settings.session_idle_ttl_seconds)
        if ttl <= 0:
            return
        now = self._clock()
        for session_id, session in list(self._sessions.items()):
            task = session.latest_task
            if task is not None and not task.done():
                continue
            if now - session.touched_at > ttl:
                del self._sessions[session_id]
                log.debug("session %s: evicted after %.0fs idle", session_id, now - session.touched_at)

    async def submit(self, session_id: str, request: AnalyzeRequest) -> SessionView:
        async with self._lock:
            self._prune_locked()
            session = self._sessions.setdefault(session_id, _Session())
            if session.waiting is not None and not session.waiting.done():
                log.debug("session %s: superseding revision %d", session_id, session.revision)
                session.waiting.cancel()
            session.revision += 1
            session.request = request
            session.status = SessionStatus.PENDING
            session.touched_at = self._clock()
            task = asyncio.create_task(self._recompute(session_id, session, session.revision))
            session.waiting = task
            session.latest_task = task
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            return self._view(session_id, session)

    async def _recompute(self, session_id: str, session: _Session, revision: int) -> None:
        await asyncio.sleep(float(settings.debounce_seconds))
        if session.waiting is asyncio.current_task():
            session.waiting = None

        async with session.run_lock:
            if revision != session.revision or session.request is None:
                return
            request = session.request
            session.status = SessionStatus.RUNNING
            try:
                report = await run_analysis(request)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                log.warning("session %s: analysis of revision %d failed: %s", session_id, revision, exc)
                if revision == session.revision:
                    session.status = SessionStatus.FAILED
                    session.error = str(exc) or exc.__class__.__name__
                    session.touched_at = self._clock()
                return

            if revision != session.revision:
                log.debug("session %s: discarding stale revision %d", session_id, revision)
                return
            session.report = report
            session.completed_revision = revision
            session.error = None
            session.status = SessionStatus.READY
            session.touched_at = self._clock()

    async def latest(self, session_id: str) -> Optional[SessionView]:
        async with self._lock:
            self._prune_locked()
            session = self._sessions.get(session_id)
            return self._view(session_id, session) if session is not None else None

    async def settle(self, session_id: str) -> Optional[SessionView]:
        """Wait for the newest submission of a session to finish, then return its view."""
        async with self._lock:
            session = self._sessions.get(session_id)
            task = session.latest_task if session is not None else None
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)
        return await self.latest(session_id)

    async def drop(self, session_id: str) -> bool:
        async with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        for task in (session.waiting, session.latest_task):
            if task is not None and not task.done():
                task.cancel()
        return True

    async def shutdown(self) -> None:
        async with self._lock:
            self._sessions.clear()
            tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)


session_service = SessionService()
