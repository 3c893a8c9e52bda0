import asyncio
import logging
import time

from core.config import GENERATION_TIMEOUT_SEC
from core.logger import log_event
from mockview.errors import GenerationError, GenerationTimeoutError, SessionBusyError
from mockview.services.openai_service import AnswerGenerator
from mockview.session.registry import SessionRegistry

logger = logging.getLogger("mockview.services.interview_service")


class InterviewService:
    """
    Resume upload, question answering and conversation teardown
    on top of an injected SessionRegistry.

    One generation round per session at a time: concurrent questions for the
    same session wait on the session lock, or fail with SessionBusyError
    when reject_when_busy is set.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        generator: AnswerGenerator,
        timeout_sec: float = GENERATION_TIMEOUT_SEC,
        reject_when_busy: bool = False,
    ):
        self.registry = registry
        self.generator = generator
        self.timeout_sec = max(0.01, float(timeout_sec))
        self.reject_when_busy = reject_when_busy

    def upload_resume(self, content: str) -> str:
        text = str(content or "").strip()
        if not text:
            raise ValueError("Resume content is empty")
        return self.registry.create(text)

    async def get_answer(self, question: str, session_id: str) -> str:
        question = str(question or "").strip()
        if not question:
            raise ValueError("Question is empty")

        session = self.registry.get(session_id)
        if self.reject_when_busy and session.is_busy:
            raise SessionBusyError(session_id)

        async with session.lock:
            # cleared while this request was queued behind another round
            session = self.registry.get(session_id)
            session.touch()
            prompt = session.build_prompt(question)
            started = time.monotonic()

            try:
                answer = await asyncio.wait_for(self.generator.complete(prompt), timeout=self.timeout_sec)
            except asyncio.TimeoutError as exc:
                log_event("interview", "generation_timeout", session_id, timeout_sec=self.timeout_sec)
                raise GenerationTimeoutError(
                    f"Answer generation timed out after {self.timeout_sec:.1f}s"
                ) from exc
            except GenerationError as exc:
                log_event("interview", "generation_failed", session_id, error=exc.message)
                raise
            except Exception as exc:
                logger.warning("generator raised unexpected error | session_id=%s err=%s", session_id, exc)
                raise GenerationError(str(exc) or exc.__class__.__name__) from exc

            session.record_turn(question, answer)
            log_event(
                "interview",
                "answer_generated",
                session_id,
                question=question,
                answer=answer,
                turns=session.turn_count,
                prompt_messages=len(prompt),
                latency_ms=round((time.monotonic() - started) * 1000.0, 1),
            )
            return answer

    def clear_conversation(self, session_id: str) -> None:
        self.registry.remove(session_id)
