from __future__ import annotations
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app.api import router
from app.web import router as web_router
from logging_config import configure_logging
from services.display import build_default_display
from services.readings import build_default_service


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    try:
        yield
    finally:
        if build_default_service.cache_info().currsize:
            build_default_service().close()
        build_default_service.cache_clear()
        build_default_display.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Global CO2 Tracker",
        description="Latest global atmospheric CO2 concentration, fetched on demand via web search.",
        version="0.1.0",
        lifespan=lifespan,
    )
    static_dir = Path(__file__).resolve().parent.parent / "static"
    app.mount("/static", StaticFiles(directory=static_dir), name="static")
    app.include_router(router)
    app.include_router(web_router)
    return app

app = create_app()
