"""
Inference service adapter.

Submits a ``BuiltRequest`` to an OpenAI-compatible chat-completions endpoint
and returns the raw text of the reply. One outbound call per invocation:
no retries (the SDK's own retry loop is switched off), no caching, and no
timeout beyond the transport default.

Every failure on the way, a transport error, an error status, or a reply
without text, surfaces as ``ServiceUnavailableError``. Whether that text is
usable JSON is the normalizer's business.
"""

import logging
import time
from typing import Any, Protocol

from openai import APIError, AsyncOpenAI

from chatrel.config import Settings, get_settings
from chatrel.engine.errors import ServiceUnavailableError
from chatrel.engine.request_builder import BuiltRequest
from chatrel.models.chat import ChatRole

logger = logging.getLogger(__name__)

# Chat-completions names the model side "assistant"
_ROLE_MAP = {
    ChatRole.USER: "user",
    ChatRole.MODEL: "assistant",
}


class InferenceClient(Protocol):
    async def complete(self, request: BuiltRequest) -> str:
        """Run ``request`` and return the reply text."""
        ...


def build_messages(request: BuiltRequest) -> list[dict[str, str]]:
    """Translate a built request into chat-completions messages."""
    messages: list[dict[str, str]] = []
    if request.system_instruction:
        messages.append({"role": "system", "content": request.system_instruction})
    for turn in request.turns:
        messages.append({"role": _ROLE_MAP[turn.role], "content": turn.text})
    return messages


def build_call_kwargs(request: BuiltRequest) -> dict[str, Any]:
    """Keyword arguments for ``chat.completions.create``."""
    kwargs: dict[str, Any] = {
        "model": request.model,
        "messages": build_messages(request),
    }
    if request.schema is not None:
        kwargs["response_format"] = {
            "type": "json_schema",
            "json_schema": {
                "name": request.schema_name or "result",
                "schema": request.schema,
            },
        }
    if request.reasoning_effort:
        kwargs["reasoning_effort"] = request.reasoning_effort
    return kwargs


class OpenAIInferenceClient:
    """``InferenceClient`` backed by the openai SDK's async client."""

    def __init__(self, settings: Settings | None = None, client: AsyncOpenAI | None = None) -> None:
        self.settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.settings.inference_api_key:
                raise ServiceUnavailableError("INFERENCE_API_KEY is not set")
            self._client = AsyncOpenAI(
                base_url=self.settings.inference_base_url,
                api_key=self.settings.inference_api_key,
                max_retries=0,
            )
        return self._client

    async def complete(self, request: BuiltRequest) -> str:
        client = self._get_client()
        start = time.perf_counter()
        try:
            response = await client.chat.completions.create(**build_call_kwargs(request))
        except APIError as exc:
            logger.warning(
                "Inference call failed | task=%s | model=%s | error=%s",
                request.kind.value,
                request.model,
                type(exc).__name__,
            )
            raise ServiceUnavailableError(f"Inference service error: {exc}") from exc

        elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
        text = ""
        if response.choices:
            text = (response.choices[0].message.content or "").strip()

        logger.info(
            "Inference call done | task=%s | model=%s | chars=%d | %.2fms",
            request.kind.value,
            request.model,
            len(text),
            elapsed_ms,
        )

        if not text:
            raise ServiceUnavailableError(f"Empty response from {request.model}")
        return text
