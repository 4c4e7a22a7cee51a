"""
Request construction for the inference service.

Turns a transcript plus a task kind into a bounded prompt, an optional
structured-output schema and the model parameters for that kind. Building a
request is a pure transformation and never fails; every failure happens at
submission time.

Budgets (characters of transcript embedded in the request):
- deep analysis: 100,000
- quick scan: 5,000
- follow-up chat context: 30,000

When a transcript is cut, ``TRUNCATION_MARKER`` is appended right after the
retained prefix.
"""

import logging
from dataclasses import dataclass
from typing import Any

from chatrel.config import Settings, get_settings
from chatrel.engine.schemas import (
    ANALYSIS_SCHEMA,
    ANALYSIS_SCHEMA_NAME,
    CHAT_SYSTEM_PROMPT,
    DEEP_ANALYSIS_PROMPT,
    QUICK_SCAN_PROMPT,
    QUICK_SCAN_SCHEMA,
    QUICK_SCAN_SCHEMA_NAME,
)
from chatrel.models.chat import ChatRole, ChatTurn
from chatrel.models.session import TaskKind

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "\n...[truncated due to length]"


@dataclass(frozen=True)
class BuiltRequest:
    """A fully prepared inference request."""

    kind: TaskKind
    model: str
    prompt: str
    system_instruction: str | None = None
    history: tuple[ChatTurn, ...] = ()
    schema: dict[str, Any] | None = None
    schema_name: str | None = None
    reasoning_effort: str | None = None
    truncated: bool = False

    @property
    def expects_json(self) -> bool:
        return self.schema is not None

    @property
    def turns(self) -> tuple[ChatTurn, ...]:
        """Prior history followed by the new user prompt."""
        return (*self.history, ChatTurn(role=ChatRole.USER, text=self.prompt))


def truncate(text: str, max_chars: int) -> tuple[str, bool]:
    """
    Cap ``text`` at ``max_chars`` characters.

    Returns the possibly shortened text and whether it was cut. A cut text is
    exactly the first ``max_chars`` characters followed by the marker.
    """
    if len(text) <= max_chars:
        return text, False
    return text[:max_chars] + TRUNCATION_MARKER, True


class RequestBuilder:
    """Builds ``BuiltRequest`` values for each task kind."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def build_deep_analysis(self, transcript: str) -> BuiltRequest:
        """Full relationship assessment with high reasoning effort."""
        body, truncated = truncate(transcript, self.settings.deep_max_chars)
        self._log_truncation(TaskKind.DEEP_ANALYSIS, transcript, truncated)
        return BuiltRequest(
            kind=TaskKind.DEEP_ANALYSIS,
            model=self.settings.deep_model,
            prompt=DEEP_ANALYSIS_PROMPT.format(transcript=body),
            schema=ANALYSIS_SCHEMA,
            schema_name=ANALYSIS_SCHEMA_NAME,
            reasoning_effort=self.settings.deep_reasoning_effort,
            truncated=truncated,
        )

    def build_quick_scan(self, transcript: str) -> BuiltRequest:
        """Lightweight pulse check on the low-latency model, no extended reasoning."""
        body, truncated = truncate(transcript, self.settings.quick_max_chars)
        self._log_truncation(TaskKind.QUICK_SCAN, transcript, truncated)
        return BuiltRequest(
            kind=TaskKind.QUICK_SCAN,
            model=self.settings.quick_model,
            prompt=QUICK_SCAN_PROMPT.format(transcript=body),
            schema=QUICK_SCAN_SCHEMA,
            schema_name=QUICK_SCAN_SCHEMA_NAME,
            truncated=truncated,
        )

    def build_chat(
        self,
        transcript: str,
        history: list[ChatTurn],
        message: str,
    ) -> BuiltRequest:
        """
        Follow-up question grounded in the transcript.

        ``history`` is every prior turn in order; ``message`` goes last as
        the prompt. No output schema, the reply is free text.
        """
        context, truncated = truncate(transcript, self.settings.chat_context_max_chars)
        return BuiltRequest(
            kind=TaskKind.CHAT,
            model=self.settings.chat_model,
            prompt=message,
            system_instruction=CHAT_SYSTEM_PROMPT.format(transcript=context),
            history=tuple(history),
            reasoning_effort=self.settings.chat_reasoning_effort,
            truncated=truncated,
        )

    @staticmethod
    def _log_truncation(kind: TaskKind, transcript: str, truncated: bool) -> None:
        if truncated:
            logger.info(
                "Transcript truncated | task=%s | original_chars=%d",
                kind.value,
                len(transcript),
            )
