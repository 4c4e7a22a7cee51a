"""
Request and response models for analysis sessions.

A session holds one transcript snapshot at a time, together with whatever
results have been computed for it and the task gates guarding new calls.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from chatrel.models.analysis import AnalysisResult, QuickScanResult


class TaskKind(str, Enum):
    """Kinds of inference call a session can make."""

    DEEP_ANALYSIS = "deep_analysis"
    QUICK_SCAN = "quick_scan"
    CHAT = "chat"


class TaskState(str, Enum):
    """Busy gate state for one task kind."""

    IDLE = "idle"
    PENDING = "pending"


class TranscriptSubmission(BaseModel):
    """Body of ``POST /sessions`` and ``PUT /sessions/{id}/transcript``."""

    text: str = Field(
        ...,
        description="Raw exported chat log (WhatsApp, iMessage, ...).",
    )


class TranscriptInfo(BaseModel):
    """Metadata describing the transcript snapshot a session is keyed to."""

    transcript_id: str
    length: int = Field(..., description="Transcript length in characters.")
    captured_at: datetime


class SessionView(BaseModel):
    """Everything the dashboard needs to render one session."""

    session_id: str
    transcript: TranscriptInfo
    analysis: AnalysisResult | None = None
    quick_scan: QuickScanResult | None = None
    message_count: int = 0
    tasks: dict[TaskKind, TaskState] = Field(default_factory=dict)


class AnalysisResponse(BaseModel):
    session_id: str
    transcript_id: str
    result: AnalysisResult


class QuickScanResponse(BaseModel):
    session_id: str
    transcript_id: str
    result: QuickScanResult


class ExampleTranscript(BaseModel):
    text: str
