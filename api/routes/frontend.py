"""
Frontend HTML routes.

Serves the server-rendered dashboard page.

Routes:
    GET /dashboard   → dashboard.html (filter bar, KPI cards, Chart.js and SVG charts)

The filter bar is a plain GET form, so every filter combination is a
bookmarkable URL and the page works with JavaScript disabled (minus the
Chart.js canvases).
"""

import sqlite3

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from api.database import get_db
from api.params import filter_params
from api.routes.filters import cached_filter_options
from dashboard.render import build_dashboard_context
from utils.filters import FilterState
from utils.store import fetch_insights

router = APIRouter(tags=["frontend"])

# Templates instance is set by create_app() after mounting.
_templates: Jinja2Templates | None = None


def set_templates(t: Jinja2Templates) -> None:
    global _templates
    _templates = t


def _tmpl() -> Jinja2Templates:
    if _templates is None:
        raise RuntimeError("Templates not initialised; call set_templates() first")
    return _templates


@router.get("/dashboard", response_class=HTMLResponse, include_in_schema=False)
def dashboard(
    request: Request,
    filters: FilterState = Depends(filter_params),
    conn: sqlite3.Connection = Depends(get_db),
) -> HTMLResponse:
    """Dashboard page computed from the filtered records."""
    records = fetch_insights(conn, filters)
    context = build_dashboard_context(
        records, filters, cached_filter_options(conn), action=str(request.url.path),
    )
    return _tmpl().TemplateResponse(request, "dashboard.html", context)
