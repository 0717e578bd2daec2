"""Jinja2 template rendering shared by the public and admin routes."""

from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from app.core.config import Settings

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

MAIN_LAYOUT = "main"
ADMIN_LAYOUT = "admin"
LOGIN_LAYOUT = "login"


def render(
    request: Request,
    view: str,
    settings: Settings,
    *,
    title: str | None = None,
    layout: str = MAIN_LAYOUT,
    current_route: str = "",
    status_code: int = 200,
    **context: Any,
) -> Response:
    """Render a view inside a layout with the page title/description every layout expects."""
    page = {
        "title": title or settings.SITE_TITLE,
        "description": settings.SITE_DESCRIPTION,
    }
    return templates.TemplateResponse(
        request,
        f"{view}.html",
        {
            "locals": page,
            "site_title": settings.SITE_TITLE,
            "layout": f"layouts/{layout}.html",
            "current_route": current_route,
            **context,
        },
        status_code=status_code,
    )
