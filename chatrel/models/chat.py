"""
Pydantic models for the follow-up analyst chat.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ChatRole(str, Enum):
    """Who authored a chat message."""

    USER = "user"
    MODEL = "model"


class ChatMessage(BaseModel):
    """A single message in the analyst conversation."""

    id: str
    role: ChatRole
    text: str
    timestamp: datetime

    model_config = {"frozen": True}


class ChatTurn(BaseModel):
    """Role/text pair handed to the request builder."""

    role: ChatRole
    text: str

    model_config = {"frozen": True}


class ChatRequest(BaseModel):
    """Body of ``POST /sessions/{id}/chat``."""

    message: str = Field(..., description="The user's follow-up question.")


class ChatReply(BaseModel):
    """Response to a chat message: the model's reply plus the updated history."""

    session_id: str
    reply: ChatMessage
    history: list[ChatMessage] = []


class ChatHistory(BaseModel):
    session_id: str
    transcript_id: str
    messages: list[ChatMessage] = []
