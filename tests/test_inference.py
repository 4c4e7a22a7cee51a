"""Tests for the openai-backed inference adapter."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import pytest
from openai import APIConnectionError

from chatrel.config import Settings
from chatrel.engine.errors import ServiceUnavailableError
from chatrel.engine.inference import OpenAIInferenceClient, build_call_kwargs, build_messages
from chatrel.models.chat import ChatRole, ChatTurn

from conftest import SAMPLE_TRANSCRIPT


def _fake_sdk(create: AsyncMock) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def _completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class TestBuildMessages:
    def test_chat_roles_mapped(self, builder):
        history = [
            ChatTurn(role=ChatRole.MODEL, text="welcome"),
            ChatTurn(role=ChatRole.USER, text="q1"),
        ]
        request = builder.build_chat(SAMPLE_TRANSCRIPT, history, "q2")
        messages = build_messages(request)

        assert messages[0]["role"] == "system"
        assert SAMPLE_TRANSCRIPT in messages[0]["content"]
        assert [(m["role"], m["content"]) for m in messages[1:]] == [
            ("assistant", "welcome"),
            ("user", "q1"),
            ("user", "q2"),
        ]

    def test_structured_request_single_user_message(self, builder):
        request = builder.build_quick_scan(SAMPLE_TRANSCRIPT)
        messages = build_messages(request)
        assert len(messages) == 1
        assert messages[0]["role"] == "user"


class TestBuildCallKwargs:
    def test_deep_analysis_has_schema_and_effort(self, builder):
        kwargs = build_call_kwargs(builder.build_deep_analysis(SAMPLE_TRANSCRIPT))
        assert kwargs["response_format"]["type"] == "json_schema"
        assert kwargs["response_format"]["json_schema"]["name"] == "relationship_analysis"
        assert kwargs["reasoning_effort"] == "high"

    def test_quick_scan_has_no_effort(self, builder):
        kwargs = build_call_kwargs(builder.build_quick_scan(SAMPLE_TRANSCRIPT))
        assert "reasoning_effort" not in kwargs
        assert "response_format" in kwargs

    def test_chat_is_free_text(self, builder):
        kwargs = build_call_kwargs(builder.build_chat(SAMPLE_TRANSCRIPT, [], "hi"))
        assert "response_format" not in kwargs


class TestOpenAIInferenceClient:
    @pytest.mark.asyncio
    async def test_returns_text(self, builder, settings):
        create = AsyncMock(return_value=_completion('  {"ok": true}  '))
        client = OpenAIInferenceClient(settings, client=_fake_sdk(create))

        text = await client.complete(builder.build_quick_scan(SAMPLE_TRANSCRIPT))

        assert text == '{"ok": true}'
        create.assert_awaited_once()
        assert create.await_args.kwargs["model"] == settings.quick_model

    @pytest.mark.asyncio
    async def test_network_error_is_service_unavailable(self, builder, settings):
        error = APIConnectionError(request=httpx.Request("POST", "https://example.invalid"))
        client = OpenAIInferenceClient(settings, client=_fake_sdk(AsyncMock(side_effect=error)))

        with pytest.raises(ServiceUnavailableError):
            await client.complete(builder.build_deep_analysis(SAMPLE_TRANSCRIPT))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   "])
    async def test_empty_reply_is_service_unavailable(self, builder, settings, content):
        client = OpenAIInferenceClient(
            settings, client=_fake_sdk(AsyncMock(return_value=_completion(content)))
        )
        with pytest.raises(ServiceUnavailableError):
            await client.complete(builder.build_chat(SAMPLE_TRANSCRIPT, [], "hi"))

    @pytest.mark.asyncio
    async def test_no_choices_is_service_unavailable(self, builder, settings):
        client = OpenAIInferenceClient(
            settings, client=_fake_sdk(AsyncMock(return_value=SimpleNamespace(choices=[])))
        )
        with pytest.raises(ServiceUnavailableError):
            await client.complete(builder.build_quick_scan(SAMPLE_TRANSCRIPT))

    @pytest.mark.asyncio
    async def test_missing_api_key(self, builder):
        client = OpenAIInferenceClient(Settings(inference_api_key=""))
        with pytest.raises(ServiceUnavailableError):
            await client.complete(builder.build_quick_scan(SAMPLE_TRANSCRIPT))
