"""
Shared fixtures for ChatREL tests.

Provides an in-process fake inference client and canned model payloads, so
no test touches the network.
"""

import asyncio
import json
from typing import Any

import pytest

from chatrel.config import Settings
from chatrel.engine.analyzer import Analyzer
from chatrel.engine.request_builder import BuiltRequest, RequestBuilder
from chatrel.store.session_store import SessionData, TranscriptSnapshot

SAMPLE_TRANSCRIPT = "Alice: hi\nBob: hi"


def analysis_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "relationshipType": "Friends",
        "typeConfidence": 82,
        "healthScore": 64,
        "subscores": [
            {"category": "Emotional Tone", "score": 70, "reasoning": "Warm but guarded."},
            {"category": "Responsiveness", "score": 40, "reasoning": "Long gaps from Bob."},
        ],
        "sentimentTimeline": [
            {"index": 0, "sentiment": 60, "label": "Warm opener"},
            {"index": 50, "sentiment": -30, "label": "Raincheck again"},
            {"index": 100, "sentiment": 20, "label": "Apology call"},
        ],
        "wordCloud": [
            {"word": "raincheck", "count": 9},
            {"word": "busy", "count": 7},
            {"word": "🌮", "count": 3},
        ],
        "keyInsights": [
            "Plans are repeatedly postponed by one side.",
            "Repair attempts happen the same day.",
        ],
        "summary": "A friendship under strain from repeated cancellations.",
        "participants": ["Alice", "Bob"],
    }
    payload.update(overrides)
    return payload


def quick_scan_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "sentiment": "Mixed",
        "topic": "Cancelled dinner plans",
        "quickSummary": "Bob cancels again, then apologizes and suggests a call.",
    }
    payload.update(overrides)
    return payload


class FakeInferenceClient:
    """Returns queued replies (or raises queued exceptions) and records requests."""

    def __init__(self, *replies: str | Exception) -> None:
        self.replies = list(replies)
        self.requests: list[BuiltRequest] = []

    def queue(self, *replies: str | Exception) -> None:
        self.replies.extend(replies)

    async def complete(self, request: BuiltRequest) -> str:
        self.requests.append(request)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class BlockingInferenceClient:
    """Holds every call open until ``release`` is set."""

    def __init__(self, reply: str) -> None:
        self.reply = reply
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def complete(self, request: BuiltRequest) -> str:
        self.started.set()
        await self.release.wait()
        return self.reply


@pytest.fixture
def settings() -> Settings:
    return Settings(inference_api_key="test-key")


@pytest.fixture
def builder(settings: Settings) -> RequestBuilder:
    return RequestBuilder(settings)


@pytest.fixture
def fake_client() -> FakeInferenceClient:
    return FakeInferenceClient()


@pytest.fixture
def analyzer(fake_client: FakeInferenceClient, builder: RequestBuilder) -> Analyzer:
    return Analyzer(client=fake_client, builder=builder)


@pytest.fixture
def session() -> SessionData:
    return SessionData(
        session_id="test-session",
        transcript=TranscriptSnapshot.capture(SAMPLE_TRANSCRIPT),
    )


@pytest.fixture
def analysis_json() -> str:
    return json.dumps(analysis_payload())


@pytest.fixture
def quick_scan_json() -> str:
    return json.dumps(quick_scan_payload())
