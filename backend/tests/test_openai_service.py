from types import SimpleNamespace

import pytest

from mockview.errors import GenerationError
from mockview.prompts import EMPTY_COMPLETION_FALLBACK
from mockview.services.openai_service import OpenAIAnswerGenerator
from mockview.session.conversation import PromptMessage, Role


def _client(create_fn):
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create_fn)))


def _response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


_MESSAGES = [
    PromptMessage(Role.SYSTEM, "resume context"),
    PromptMessage(Role.USER, "Why should we hire you?"),
]


@pytest.mark.asyncio
async def test_complete_sends_messages_and_params():
    captured = {}

    async def _fake_create(**kwargs):
        captured.update(kwargs)
        return _response("  Because I ship.  ")

    generator = OpenAIAnswerGenerator(client=_client(_fake_create), model="test-model", max_tokens=123)

    result = await generator.complete(_MESSAGES)

    assert result == "Because I ship."
    assert captured["model"] == "test-model"
    assert captured["max_tokens"] == 123
    assert captured["messages"] == [
        {"role": "system", "content": "resume context"},
        {"role": "user", "content": "Why should we hire you?"},
    ]


@pytest.mark.asyncio
async def test_empty_completion_uses_fallback():
    async def _fake_create(**kwargs):
        return _response(None)

    generator = OpenAIAnswerGenerator(client=_client(_fake_create))

    assert await generator.complete(_MESSAGES) == EMPTY_COMPLETION_FALLBACK


@pytest.mark.asyncio
async def test_no_choices_uses_fallback():
    async def _fake_create(**kwargs):
        return SimpleNamespace(choices=[])

    generator = OpenAIAnswerGenerator(client=_client(_fake_create))

    assert await generator.complete(_MESSAGES) == EMPTY_COMPLETION_FALLBACK


@pytest.mark.asyncio
async def test_provider_failure_raises_generation_error():
    async def _boom(**kwargs):
        raise RuntimeError("forced")

    generator = OpenAIAnswerGenerator(client=_client(_boom))

    with pytest.raises(GenerationError, match="forced"):
        await generator.complete(_MESSAGES)
