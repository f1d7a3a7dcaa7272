from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from app.schemas import DisplayStatePayload
from services.display import ReadingDisplay, build_default_display, format_timestamp


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))
templates.env.filters["localtime"] = format_timestamp


def get_display() -> ReadingDisplay:
    return build_default_display()


router = APIRouter(include_in_schema=False)


@router.get("/ui", name="ui_index", response_class=HTMLResponse)
def ui_index(
    request: Request,
    display: ReadingDisplay = Depends(get_display),
) -> HTMLResponse:
    state = DisplayStatePayload.from_snapshot(display.ensure_loaded())
    return templates.TemplateResponse(
        request,
        "ui/index.html",
        {"state": state},
    )


@router.post("/ui/refresh", name="ui_refresh")
def ui_refresh(
    request: Request,
    display: ReadingDisplay = Depends(get_display),
) -> RedirectResponse:
    display.refresh()
    return RedirectResponse(
        url=request.url_for("ui_index"),
        status_code=status.HTTP_303_SEE_OTHER,
    )
