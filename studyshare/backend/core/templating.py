"""
Template Rendering.

Shared Jinja2Templates instance for the page routes. Templates live in
studyshare/frontend/templates.
"""

from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from studyshare.backend.core.config import get_app_config
from studyshare.backend.core.session import load_identity
from studyshare.backend.core.utils import format_rating

TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "frontend" / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["rating"] = format_rating


def upload_url(name: str) -> str:
    """Public URL of a stored upload."""
    prefix = get_app_config().application.uploads.url_prefix.rstrip("/")
    return f"{prefix}/{name}"


templates.env.globals["upload_url"] = upload_url


def render(
    request: Request,
    name: str,
    context: dict[str, Any] | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    """Render a page with the request's identity available as `identity`."""
    page_context = {"identity": load_identity(request), "app_name": get_app_config().application.name}
    page_context.update(context or {})
    return templates.TemplateResponse(request, name, page_context, status_code=status_code)
