import asyncio
import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    monkeypatch.setenv("SPEECH_CONTINUOUS", "true")


class FakeSpeechDevice:
    def __init__(self, supported: bool = True):
        self.supported = supported
        self.listener = None
        self.running = False
        self.start_calls = 0
        self.stop_calls = 0
        self.fail_start_with: Exception | None = None
        self.fail_stop_with: Exception | None = None
        self.start_gate: asyncio.Event | None = None

    def is_supported(self) -> bool:
        return self.supported

    async def start(self, listener) -> None:
        self.start_calls += 1
        self.listener = listener
        if self.start_gate is not None:
            await self.start_gate.wait()
        if self.fail_start_with is not None:
            raise self.fail_start_with
        self.running = True

    async def stop(self) -> None:
        self.stop_calls += 1
        self.running = False
        if self.fail_stop_with is not None:
            raise self.fail_stop_with


class FakeAnswerGenerator:
    def __init__(self, answers=None, error: Exception | None = None, delay_sec: float = 0.0):
        self.answers = list(answers or [])
        self.error = error
        self.delay_sec = delay_sec
        self.calls: list[list] = []

    async def complete(self, messages) -> str:
        self.calls.append(list(messages))
        if self.delay_sec:
            await asyncio.sleep(self.delay_sec)
        if self.error is not None:
            raise self.error
        if self.answers:
            return self.answers.pop(0)
        return f"answer {len(self.calls)}"


@pytest.fixture
def fake_device() -> FakeSpeechDevice:
    return FakeSpeechDevice()


@pytest.fixture
def fake_generator() -> FakeAnswerGenerator:
    return FakeAnswerGenerator()


@pytest.fixture
def resume_text() -> str:
    return (
        "Jordan Lee - Backend Engineer. 5 years building Python services with FastAPI and PostgreSQL. "
        "Led migration of a monolith to event-driven microservices, cutting p95 latency by 40%."
    )
