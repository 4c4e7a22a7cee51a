"""
Response normalization: raw model text -> typed result.

Parsing is all or nothing. Anything that is not JSON of the expected shape,
including out-of-range scores and unknown enum values, becomes a
``MalformedResponseError`` so the caller can tell model misbehaviour apart
from an unreachable service.
"""

import logging
import re
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from chatrel.engine.errors import MalformedResponseError
from chatrel.models.analysis import AnalysisResult, QuickScanResult

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT", bound=BaseModel)

# A single ```json ... ``` fence around the whole payload
_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?```$", re.DOTALL | re.IGNORECASE)


def _strip_fence(text: str) -> str:
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    return match.group(1).strip() if match else stripped


def parse_result(raw_text: str, model: type[ResultT]) -> ResultT:
    """Validate ``raw_text`` as JSON for ``model`` or raise MalformedResponseError."""
    payload = _strip_fence(raw_text or "")
    if not payload:
        raise MalformedResponseError(f"Empty payload for {model.__name__}", raw_text=raw_text)

    try:
        return model.model_validate_json(payload)
    except ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        logger.warning(
            "Malformed response | shape=%s | errors=%d | first=%s at %s",
            model.__name__,
            exc.error_count(),
            first.get("msg", ""),
            ".".join(str(p) for p in first.get("loc", ())),
        )
        raise MalformedResponseError(
            f"Response does not match {model.__name__}: {exc.error_count()} error(s)",
            raw_text=raw_text,
        ) from exc


def parse_analysis(raw_text: str) -> AnalysisResult:
    return parse_result(raw_text, AnalysisResult)


def parse_quick_scan(raw_text: str) -> QuickScanResult:
    return parse_result(raw_text, QuickScanResult)
