"""
Append-only conversation log for the follow-up analyst chat.

Turn order is what the model reads as the flow of the conversation, so the
log never reorders or drops entries. A transcript switch does not edit the
log; it discards it and starts a fresh one seeded with the welcome message.
"""

import uuid
from datetime import datetime, timezone

from chatrel.engine.schemas import WELCOME_MESSAGE
from chatrel.models.chat import ChatMessage, ChatRole, ChatTurn

WELCOME_MESSAGE_ID = "welcome"


class ConversationSession:
    """Ordered chat history for one transcript snapshot."""

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []

    @classmethod
    def seeded(cls) -> "ConversationSession":
        """A new conversation holding only the standing welcome message."""
        session = cls()
        session._messages.append(
            ChatMessage(
                id=WELCOME_MESSAGE_ID,
                role=ChatRole.MODEL,
                text=WELCOME_MESSAGE,
                timestamp=_now(),
            )
        )
        return session

    def append(self, role: ChatRole, text: str) -> ChatMessage:
        """Add a message with a fresh id and the current time."""
        message = ChatMessage(
            id=uuid.uuid4().hex,
            role=role,
            text=text,
            timestamp=_now(),
        )
        self._messages.append(message)
        return message

    def build_history_for_request(self) -> list[ChatTurn]:
        """Project the log into role/text pairs, in insertion order."""
        return [ChatTurn(role=m.role, text=m.text) for m in self._messages]

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)


def _now() -> datetime:
    return datetime.now(timezone.utc)
