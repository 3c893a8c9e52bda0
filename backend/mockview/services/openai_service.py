import logging
from typing import Protocol, Sequence

from openai import AsyncOpenAI

from core.config import (
    ANSWER_FREQUENCY_PENALTY,
    ANSWER_MAX_TOKENS,
    ANSWER_MODEL,
    ANSWER_PRESENCE_PENALTY,
    ANSWER_TEMPERATURE,
    OPENAI_API_KEY,
)
from mockview.errors import GenerationError
from mockview.prompts import EMPTY_COMPLETION_FALLBACK
from mockview.session.conversation import PromptMessage

logger = logging.getLogger("mockview.services.openai_service")


class AnswerGenerator(Protocol):
    async def complete(self, messages: Sequence[PromptMessage]) -> str: ...


class OpenAIAnswerGenerator:
    """
    Chat-completions backed answer generator.
    Any transport or provider failure surfaces as GenerationError.
    """

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        model: str = ANSWER_MODEL,
        temperature: float = ANSWER_TEMPERATURE,
        max_tokens: int = ANSWER_MAX_TOKENS,
        presence_penalty: float = ANSWER_PRESENCE_PENALTY,
        frequency_penalty: float = ANSWER_FREQUENCY_PENALTY,
    ):
        self._client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.presence_penalty = presence_penalty
        self.frequency_penalty = frequency_penalty

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=OPENAI_API_KEY or None)
        return self._client

    async def complete(self, messages: Sequence[PromptMessage]) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[message.to_openai() for message in messages],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                presence_penalty=self.presence_penalty,
                frequency_penalty=self.frequency_penalty,
            )
        except Exception as exc:
            logger.warning("OpenAI API error | model=%s err=%s", self.model, exc)
            raise GenerationError(str(exc) or exc.__class__.__name__) from exc

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices else None
        return str(content or "").strip() or EMPTY_COMPLETION_FALLBACK
