"""
Health check endpoint.

Reports service status together with the inference configuration the
process is running with, without calling the inference service.
"""

import time
from typing import Any

from fastapi import APIRouter, Depends

from chatrel.config import Settings, get_settings
from chatrel.store.session_store import session_store

router = APIRouter(tags=["Health"])

# Record server start time for uptime calculation
_start_time = time.time()


@router.get(
    "/health",
    summary="Health Check",
    description="Returns service status, configured models and session counts.",
    response_model=dict[str, Any],
)
async def health_check(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    stats = await session_store.get_stats()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "uptime_seconds": round(time.time() - _start_time, 2),
        "inference": {
            "configured": bool(settings.inference_api_key),
            "deep_model": settings.deep_model,
            "quick_model": settings.quick_model,
            "chat_model": settings.chat_model,
        },
        **stats,
    }
