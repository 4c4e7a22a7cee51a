"""
Analysis orchestration.

Each public coroutine runs exactly one inference call for one session:
build the request, hold the task gate while the call is in flight, then
normalize the reply. Results are stored only if the session still holds the
transcript snapshot the call was made for; on any failure the previously
stored results stay untouched and the error propagates to the caller.
"""

import logging
from functools import lru_cache

from chatrel.config import get_settings
from chatrel.engine.errors import InputRejectedError
from chatrel.engine.inference import InferenceClient, OpenAIInferenceClient
from chatrel.engine.normalizer import parse_analysis, parse_quick_scan
from chatrel.engine.request_builder import RequestBuilder
from chatrel.models.chat import ChatReply, ChatRole
from chatrel.models.session import AnalysisResponse, QuickScanResponse, TaskKind
from chatrel.store.session_store import SessionData

logger = logging.getLogger(__name__)


class Analyzer:
    """Runs deep analyses, quick scans and analyst chat turns."""

    def __init__(self, client: InferenceClient, builder: RequestBuilder | None = None) -> None:
        self.client = client
        self.builder = builder or RequestBuilder()

    async def run_deep_analysis(self, session: SessionData) -> AnalysisResponse:
        with session.task_gate(TaskKind.DEEP_ANALYSIS):
            snapshot = session.transcript
            request = self.builder.build_deep_analysis(snapshot.text)
            raw = await self.client.complete(request)

        result = parse_analysis(raw)
        if session.is_current(snapshot.transcript_id):
            session.analysis = result
        else:
            self._log_stale(session, TaskKind.DEEP_ANALYSIS)

        logger.info(
            "Deep analysis complete | session=%s | type=%s | health=%.0f | truncated=%s",
            session.session_id,
            result.relationship_type.value,
            result.health_score,
            request.truncated,
        )
        return AnalysisResponse(
            session_id=session.session_id,
            transcript_id=snapshot.transcript_id,
            result=result,
        )

    async def run_quick_scan(self, session: SessionData) -> QuickScanResponse:
        with session.task_gate(TaskKind.QUICK_SCAN):
            snapshot = session.transcript
            request = self.builder.build_quick_scan(snapshot.text)
            raw = await self.client.complete(request)

        result = parse_quick_scan(raw)
        if session.is_current(snapshot.transcript_id):
            session.quick_scan = result
        else:
            self._log_stale(session, TaskKind.QUICK_SCAN)

        logger.info(
            "Quick scan complete | session=%s | sentiment=%s",
            session.session_id,
            result.sentiment.value,
        )
        return QuickScanResponse(
            session_id=session.session_id,
            transcript_id=snapshot.transcript_id,
            result=result,
        )

    async def send_chat_message(self, session: SessionData, text: str) -> ChatReply:
        """
        Ask the analyst a follow-up question.

        The user message and the reply are appended together once the call
        succeeds, so a failed call leaves the history exactly as it was.
        """
        if not text or not text.strip():
            raise InputRejectedError("Chat message is empty")

        with session.task_gate(TaskKind.CHAT):
            snapshot = session.transcript
            conversation = session.conversation
            request = self.builder.build_chat(
                snapshot.text,
                conversation.build_history_for_request(),
                text,
            )
            reply_text = await self.client.complete(request)

        # A transcript switch mid-call replaced the conversation; the exchange
        # lands in the discarded log only.
        if conversation is not session.conversation:
            self._log_stale(session, TaskKind.CHAT)
        conversation.append(ChatRole.USER, text)
        reply = conversation.append(ChatRole.MODEL, reply_text)

        logger.info(
            "Chat turn complete | session=%s | history_turns=%d | reply_chars=%d",
            session.session_id,
            len(request.history),
            len(reply_text),
        )
        return ChatReply(
            session_id=session.session_id,
            reply=reply,
            history=session.conversation.messages,
        )

    @staticmethod
    def _log_stale(session: SessionData, kind: TaskKind) -> None:
        logger.info(
            "Transcript changed during call, result not stored | session=%s | task=%s",
            session.session_id,
            kind.value,
        )


@lru_cache
def get_analyzer() -> Analyzer:
    """Process-wide analyzer; routers receive it through ``Depends``."""
    settings = get_settings()
    return Analyzer(
        client=OpenAIInferenceClient(settings),
        builder=RequestBuilder(settings),
    )
