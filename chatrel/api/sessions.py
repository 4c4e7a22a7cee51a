"""
Session, analysis and quick-scan endpoints.

A session is opened by submitting a transcript. Analyses run against the
session's current transcript snapshot; switching the transcript clears the
stored results and restarts the analyst chat.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from chatrel.engine.analyzer import Analyzer, get_analyzer
from chatrel.engine.schemas import EXAMPLE_TRANSCRIPT
from chatrel.models.analysis import AnalysisResult, QuickScanResult
from chatrel.models.session import (
    AnalysisResponse,
    ExampleTranscript,
    QuickScanResponse,
    SessionView,
    TranscriptSubmission,
)
from chatrel.store.session_store import SessionData, session_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Sessions"])


# ── Helpers ────────────────────────────────────────────────────────────

async def get_session_or_404(session_id: str) -> SessionData:
    """Retrieve a session or raise 404."""
    session = await session_store.get_session(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session '{session_id}' not found.",
        )
    return session


# ── Transcript ─────────────────────────────────────────────────────────

@router.get(
    "/example-transcript",
    response_model=ExampleTranscript,
    summary="Sample chat log",
    description="A short two-party chat export for trying the analysis.",
)
async def example_transcript() -> ExampleTranscript:
    return ExampleTranscript(text=EXAMPLE_TRANSCRIPT)


@router.post(
    "/sessions",
    response_model=SessionView,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a transcript",
    description="Captures a chat transcript and opens an analysis session for it.",
)
async def create_session(body: TranscriptSubmission) -> SessionView:
    session = await session_store.create_session(body.text)
    logger.info(
        "Session created | session=%s | transcript_chars=%d",
        session.session_id,
        len(body.text),
    )
    return session.to_view()


@router.get(
    "/sessions/{session_id}",
    response_model=SessionView,
    summary="Get session state",
    description="Returns transcript metadata, stored results and task states.",
)
async def get_session(session_id: str) -> SessionView:
    session = await get_session_or_404(session_id)
    return session.to_view()


@router.put(
    "/sessions/{session_id}/transcript",
    response_model=SessionView,
    summary="Switch transcript",
    description="Replaces the transcript. Prior results and chat history are discarded.",
)
async def replace_transcript(session_id: str, body: TranscriptSubmission) -> SessionView:
    session = await session_store.replace_transcript(session_id, body.text)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session '{session_id}' not found.",
        )
    logger.info(
        "Transcript replaced | session=%s | transcript=%s",
        session_id,
        session.transcript.transcript_id,
    )
    return session.to_view()


@router.delete(
    "/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Discard session",
)
async def delete_session(session_id: str) -> Response:
    if not await session_store.delete_session(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session '{session_id}' not found.",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Deep analysis ─────────────────────────────────────────────────────

@router.post(
    "/sessions/{session_id}/analysis",
    response_model=AnalysisResponse,
    summary="Run deep analysis",
    description=(
        "Runs the high-effort relationship analysis on the current transcript. "
        "Returns 409 while another deep analysis for this session is pending."
    ),
)
async def run_analysis(
    session_id: str,
    analyzer: Analyzer = Depends(get_analyzer),
) -> AnalysisResponse:
    session = await get_session_or_404(session_id)
    return await analyzer.run_deep_analysis(session)


@router.get(
    "/sessions/{session_id}/analysis",
    response_model=AnalysisResult,
    summary="Get stored analysis",
)
async def get_analysis(session_id: str) -> AnalysisResult:
    session = await get_session_or_404(session_id)
    if session.analysis is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No analysis for the current transcript yet.",
        )
    return session.analysis


# ── Quick scan ────────────────────────────────────────────────────────

@router.post(
    "/sessions/{session_id}/quick-scan",
    response_model=QuickScanResponse,
    summary="Run quick scan",
    description="Low-latency sentiment, topic and one-line summary.",
)
async def run_quick_scan(
    session_id: str,
    analyzer: Analyzer = Depends(get_analyzer),
) -> QuickScanResponse:
    session = await get_session_or_404(session_id)
    return await analyzer.run_quick_scan(session)


@router.get(
    "/sessions/{session_id}/quick-scan",
    response_model=QuickScanResult,
    summary="Get stored quick scan",
)
async def get_quick_scan(session_id: str) -> QuickScanResult:
    session = await get_session_or_404(session_id)
    if session.quick_scan is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No quick scan for the current transcript yet.",
        )
    return session.quick_scan
