from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from mockview.prompts import build_system_prompt


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class PromptMessage:
    role: Role
    text: str

    def to_openai(self) -> dict:
        return {"role": self.role.value, "content": self.text}


class ConversationSession:
    """
    Conversation memory for one uploaded resume.

    `turns` only ever holds matched (user, assistant) pairs: it is appended to
    by record_turn() after a generation round succeeds and by nothing else.
    Callers serialize rounds through `lock`.
    """

    def __init__(
        self,
        session_id: str,
        resume_context: str,
        max_prompt_turns: int = 0,
        clock: Callable[[], float] = time.time,
    ):
        self.id = session_id
        self.resume_context = resume_context
        self.turns: list[PromptMessage] = []
        self.max_prompt_turns = max(0, int(max_prompt_turns or 0))
        self._clock = clock
        self.created_at = clock()
        self.last_active_at = self.created_at
        self.lock = asyncio.Lock()

    @property
    def turn_count(self) -> int:
        return len(self.turns) // 2

    @property
    def is_busy(self) -> bool:
        return self.lock.locked()

    def build_prompt(self, question: str) -> list[PromptMessage]:
        history = self.turns
        if self.max_prompt_turns:
            history = history[-2 * self.max_prompt_turns:]

        messages = [PromptMessage(Role.SYSTEM, build_system_prompt(self.resume_context))]
        messages.extend(history)
        messages.append(PromptMessage(Role.USER, question))
        return messages

    def record_turn(self, question: str, answer: str) -> None:
        self.turns.extend([
            PromptMessage(Role.USER, question),
            PromptMessage(Role.ASSISTANT, answer),
        ])
        self.touch()

    def touch(self) -> None:
        self.last_active_at = self._clock()

    def is_expired(self, ttl_sec: float, now_ts: float | None = None) -> bool:
        if not ttl_sec or ttl_sec <= 0:
            return False
        now_value = self._clock() if now_ts is None else now_ts
        return now_value - self.last_active_at > ttl_sec

    def snapshot(self) -> dict:
        return {
            "session_id": self.id,
            "turns": self.turn_count,
            "created_at": self.created_at,
            "last_active_at": self.last_active_at,
            "busy": self.is_busy,
        }
