"""
Analyst chat endpoints.

Follow-up questions are answered by the model with the session's transcript
as grounding context and the full prior conversation as history.
"""

from fastapi import APIRouter, Depends

from chatrel.api.sessions import get_session_or_404
from chatrel.engine.analyzer import Analyzer, get_analyzer
from chatrel.models.chat import ChatHistory, ChatReply, ChatRequest

router = APIRouter(prefix="/sessions/{session_id}/chat", tags=["Analyst Chat"])


@router.get(
    "",
    response_model=ChatHistory,
    summary="Get chat history",
    description="Returns the conversation in order, starting with the welcome message.",
)
async def get_chat_history(session_id: str) -> ChatHistory:
    session = await get_session_or_404(session_id)
    return ChatHistory(
        session_id=session.session_id,
        transcript_id=session.transcript.transcript_id,
        messages=session.conversation.messages,
    )


@router.post(
    "",
    response_model=ChatReply,
    summary="Ask the analyst",
    description=(
        "Sends a follow-up question. The question and the reply are added to "
        "the history only when the model answers."
    ),
)
async def send_chat_message(
    session_id: str,
    body: ChatRequest,
    analyzer: Analyzer = Depends(get_analyzer),
) -> ChatReply:
    session = await get_session_or_404(session_id)
    return await analyzer.send_chat_message(session, body.message)
