# checklist/services/workflow_sessions.py
from __future__ import annotations

import logging
import threading
import time
from typing import Callable
from uuid import UUID, uuid4

from checklist.services.inspection_workflow import InspectionWorkflow

logger = logging.getLogger(__name__)


class SessionNotFound(KeyError):
    pass


class WorkflowSessions:
    """
    In-process registry of open wizard sessions (session id -> workflow).

    Request handlers run in a thread pool, so the dictionary is locked; the
    workflows themselves are not (one session = one client).

    Sessions not touched for `ttl_seconds` are dropped on the next registry
    access. A ttl of None keeps sessions until they are closed.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = threading.Lock()
        self._sessions: dict[UUID, tuple[InspectionWorkflow, float]] = {}
        self._ttl = ttl_seconds
        self._clock = clock

    def open(self, workflow: InspectionWorkflow) -> UUID:
        session_id = uuid4()
        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            self._sessions[session_id] = (workflow, now)
        return session_id

    def get(self, session_id: UUID) -> InspectionWorkflow:
        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            entry = self._sessions.get(session_id)
            if entry is not None:
                self._sessions[session_id] = (entry[0], now)
        if entry is None:
            raise SessionNotFound(f"Workflow session {session_id} not found")
        return entry[0]

    def close(self, session_id: UUID) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFound(f"Workflow session {session_id} not found")

    def __len__(self) -> int:
        with self._lock:
            self._evict_idle(self._clock())
            return len(self._sessions)

    def _evict_idle(self, now: float) -> None:
        # caller holds the lock
        if self._ttl is None:
            return
        expired = [sid for sid, (_, seen) in self._sessions.items() if now - seen >= self._ttl]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("Dropped %d idle workflow sessions", len(expired))
