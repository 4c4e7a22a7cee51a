"""
In-memory session store for analysis sessions.

One session stands for one browsing session of the dashboard. It holds a
single transcript snapshot, the results computed for that snapshot, the
analyst chat log and the busy gates. Nothing is persisted; a restart drops
everything.

An ``asyncio.Lock`` protects the session map. The lock is never held across
an inference call, so a slow deep analysis does not block other sessions.
"""

import asyncio
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterator

from chatrel.engine.conversation import ConversationSession
from chatrel.engine.errors import InputRejectedError, TaskBusyError
from chatrel.models.analysis import AnalysisResult, QuickScanResult
from chatrel.models.session import SessionView, TaskKind, TaskState, TranscriptInfo


@dataclass(frozen=True)
class TranscriptSnapshot:
    """Immutable transcript text captured for one analysis cycle."""

    text: str
    transcript_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    captured_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def capture(cls, text: str) -> "TranscriptSnapshot":
        """Capture ``text``, rejecting empty or whitespace-only input."""
        if not text or not text.strip():
            raise InputRejectedError("Transcript is empty")
        return cls(text=text)

    def info(self) -> TranscriptInfo:
        return TranscriptInfo(
            transcript_id=self.transcript_id,
            length=len(self.text),
            captured_at=self.captured_at,
        )


@dataclass
class SessionData:
    """Container for all data associated with a single analysis session."""

    session_id: str
    transcript: TranscriptSnapshot
    analysis: AnalysisResult | None = None
    quick_scan: QuickScanResult | None = None
    conversation: ConversationSession = field(default_factory=ConversationSession.seeded)
    tasks: dict[TaskKind, TaskState] = field(
        default_factory=lambda: {kind: TaskState.IDLE for kind in TaskKind}
    )

    # ── Transcript lifecycle ───────────────────────────────────────────

    def replace_transcript(self, snapshot: TranscriptSnapshot) -> None:
        """
        Switch to a new transcript.

        Results keyed to the old snapshot are dropped and the chat starts
        over from the welcome message. Task gates are left as they are: a
        call already in flight still holds its gate until it finishes.
        """
        self.transcript = snapshot
        self.analysis = None
        self.quick_scan = None
        self.conversation = ConversationSession.seeded()

    def is_current(self, transcript_id: str) -> bool:
        return self.transcript.transcript_id == transcript_id

    # ── Busy gates ─────────────────────────────────────────────────────

    @contextmanager
    def task_gate(self, kind: TaskKind) -> Iterator[None]:
        """
        Hold the ``kind`` gate for the duration of a call.

        Raises TaskBusyError if a call of the same kind is already pending.
        The gate returns to idle whether the call succeeds or fails.
        """
        if self.tasks[kind] is TaskState.PENDING:
            raise TaskBusyError(f"A {kind.value} call is already pending")
        self.tasks[kind] = TaskState.PENDING
        try:
            yield
        finally:
            self.tasks[kind] = TaskState.IDLE

    # ── Serialization ──────────────────────────────────────────────────

    def to_view(self) -> SessionView:
        return SessionView(
            session_id=self.session_id,
            transcript=self.transcript.info(),
            analysis=self.analysis,
            quick_scan=self.quick_scan,
            message_count=len(self.conversation),
            tasks=dict(self.tasks),
        )


class SessionStore:
    """
    In-memory store for analysis sessions.

    Each session is keyed by its ``session_id``. An asyncio lock
    protects concurrent access to the map.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, SessionData] = {}
        self._lock = asyncio.Lock()

    async def create_session(self, text: str) -> SessionData:
        """Capture a transcript and open a new session for it."""
        snapshot = TranscriptSnapshot.capture(text)
        session = SessionData(session_id=uuid.uuid4().hex, transcript=snapshot)
        async with self._lock:
            self._sessions[session.session_id] = session
        return session

    async def get_session(self, session_id: str) -> SessionData | None:
        """Retrieve session data, or None if the session doesn't exist."""
        async with self._lock:
            return self._sessions.get(session_id)

    async def replace_transcript(self, session_id: str, text: str) -> SessionData | None:
        """Switch a session to a new transcript. Returns None for unknown sessions."""
        snapshot = TranscriptSnapshot.capture(text)
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            session.replace_transcript(snapshot)
            return session

    async def delete_session(self, session_id: str) -> bool:
        async with self._lock:
            return self._sessions.pop(session_id, None) is not None

    async def get_stats(self) -> dict[str, Any]:
        """Return summary statistics across all sessions."""
        async with self._lock:
            return {
                "active_sessions": len(self._sessions),
                "pending_tasks": sum(
                    1
                    for s in self._sessions.values()
                    for state in s.tasks.values()
                    if state is TaskState.PENDING
                ),
            }


# ── Module-level singleton ────────────────────────────────────────────
# Imported by the routers and the health probe.
session_store = SessionStore()
