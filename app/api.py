"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.schemas import DisplayStatePayload
from services.display import ReadingDisplay, build_default_display

router = APIRouter()


def get_display() -> ReadingDisplay:
    return build_default_display()


@router.get(
    "/reading",
    response_model=DisplayStatePayload,
    summary="Current CO2 reading with its loading/error/success state.",
)
def get_reading(display: ReadingDisplay = Depends(get_display)) -> DisplayStatePayload:
    return DisplayStatePayload.from_snapshot(display.ensure_loaded())


@router.post(
    "/reading/refresh",
    response_model=DisplayStatePayload,
    summary="Fetch a fresh reading unless a refresh is already running.",
)
def refresh_reading(display: ReadingDisplay = Depends(get_display)) -> DisplayStatePayload:
    return DisplayStatePayload.from_snapshot(display.refresh())


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /ui for the current CO2 reading."}
