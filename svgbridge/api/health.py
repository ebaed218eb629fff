"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from svgbridge import __version__
from svgbridge.models.responses import HealthResponse
from svgbridge.svg.registry import get_registry, register_builders

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    register_builders()
    return HealthResponse(
        status="ok",
        version=__version__,
        builders_registered=get_registry().count,
    )
