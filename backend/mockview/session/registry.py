from __future__ import annotations

import time
import uuid
from threading import Lock
from typing import Callable

from core.logger import log_event
from mockview.errors import SessionNotFoundError
from mockview.session.conversation import ConversationSession


class SessionRegistry:
    def __init__(
        self,
        ttl_sec: float = 0.0,
        max_prompt_turns: int = 0,
        clock: Callable[[], float] = time.time,
    ):
        self._lock = Lock()
        self._sessions: dict[str, ConversationSession] = {}
        self._ttl_sec = max(0.0, float(ttl_sec or 0.0))
        self._max_prompt_turns = max(0, int(max_prompt_turns or 0))
        self._clock = clock

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def create(self, resume_context: str) -> str:
        with self._lock:
            session_id = f"session_{uuid.uuid4().hex}"
            while session_id in self._sessions:
                session_id = f"session_{uuid.uuid4().hex}"
            self._sessions[session_id] = ConversationSession(
                session_id=session_id,
                resume_context=resume_context,
                max_prompt_turns=self._max_prompt_turns,
                clock=self._clock,
            )
        log_event("registry", "session_created", session_id, resume=resume_context)
        return session_id

    def get(self, session_id: str) -> ConversationSession:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None and not session.is_busy and session.is_expired(self._ttl_sec, self._clock()):
                self._sessions.pop(session_id, None)
                log_event("registry", "session_expired", session_id)
                session = None
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def remove(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            log_event("registry", "session_removed", session_id)
        return removed

    def cleanup_expired(self) -> int:
        if self._ttl_sec <= 0:
            return 0
        now_ts = self._clock()
        removed = 0
        with self._lock:
            for session_id, session in list(self._sessions.items()):
                if session.is_busy:
                    continue
                if session.is_expired(self._ttl_sec, now_ts):
                    self._sessions.pop(session_id, None)
                    removed += 1
        return removed
