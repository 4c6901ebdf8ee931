"""
FastAPI application factory for the insights dashboard API.

Usage:
    python -m api.app                    # Dev server on port 5000
    APP_DB_PATH=/data/insights.sqlite python -m api.app

OpenAPI docs available at http://localhost:5000/docs after starting.

Logging: plain text by default, newline-delimited JSON when APP_LOG_FORMAT=json.
Rate limiting: RATE_LIMIT_DEFAULT requests per minute per client IP and path;
/health is exempt.
"""

import json
import logging
import time
import uuid
from collections import defaultdict
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.database import check_database, get_db_path
from api.routes import charts, data, filters, stats
from api.routes import frontend as frontend_routes
from dashboard.render import register_filters
from utils.config import AppConfig

# ── Configuration ─────────────────────────────────────────────────────────────
_cfg = AppConfig.from_env()

API_NAME = "Data Visualization Dashboard API"
API_VERSION = "1.0.0"
API_ENDPOINTS = ["/api/data", "/api/filters", "/api/stats", "/health"]

# ── Structured JSON logging ──────────────────────────────────────────────────


class _JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge extra fields added via logger.info("...", extra={...})
        for key in ("method", "path", "status", "duration_ms", "client_ip",
                    "request_id"):
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


_logger = logging.getLogger("insights_api")
_handler = logging.StreamHandler()
if _cfg.log_format == "json":
    _handler.setFormatter(_JsonFormatter())
else:
    _handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    )
logging.basicConfig(handlers=[_handler], level=logging.INFO, force=True)

# ── Rate limiting state with memory bounds ───────────────────────────────────
_DEFAULT_RATE_LIMIT = _cfg.rate_limit_default
_rate_counters: dict[str, dict[str, list]] = defaultdict(lambda: defaultdict(list))
_MAX_TRACKED_IPS = 10_000
_last_cleanup: float = 0.0
_CLEANUP_INTERVAL = 300.0  # 5 minutes
_RATE_EXEMPT_PATHS = {"/health"}


def _cleanup_rate_counters() -> None:
    """Remove stale rate counter entries to bound memory usage."""
    global _last_cleanup
    now = time.time()
    if now - _last_cleanup < _CLEANUP_INTERVAL:
        return
    _last_cleanup = now
    window_start = now - 60.0
    to_delete = []
    for ip, paths in _rate_counters.items():
        for path in list(paths.keys()):
            paths[path] = [t for t in paths[path] if t > window_start]
            if not paths[path]:
                del paths[path]
        if not paths:
            to_delete.append(ip)
    for ip in to_delete:
        del _rate_counters[ip]
    # If still over limit, evict the IPs with the fewest recent hits
    if len(_rate_counters) > _MAX_TRACKED_IPS:
        excess = len(_rate_counters) - _MAX_TRACKED_IPS
        quietest = sorted(
            _rate_counters.keys(),
            key=lambda ip: sum(len(v) for v in _rate_counters[ip].values()),
        )[:excess]
        for ip in quietest:
            del _rate_counters[ip]


def _get_client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _error_body(message: str, error: str | None = None) -> dict:
    body: dict = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    return body


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Report the store's state on startup."""
    db_path = get_db_path()
    connected, count = check_database()
    if not connected:
        _logger.warning(
            "Database not available at %s. Run 'python build_insights_db.py' first.",
            db_path,
        )
    else:
        _logger.info("%d records in database %s", count, db_path)
        if count == 0:
            _logger.warning("Database is empty. Run 'python build_insights_db.py' to seed it.")
    yield


def create_app(db_path: Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        db_path: Override the database path (useful for testing).

    Returns:
        Configured FastAPI application instance.
    """
    if db_path is not None:
        import api.database as _db_mod
        _db_mod._DB_PATH = db_path

    app = FastAPI(
        title=API_NAME,
        summary="Filterable insights records, aggregate statistics and chart data.",
        description=(
            "## Insights API\n\n"
            "Serves a curated dataset of market and geopolitical insights, each "
            "scored for intensity, likelihood and relevance, and tagged by year, "
            "topic, sector, region, PESTLE category, source, SWOT category, "
            "country and city.\n\n"
            "### Filtering\n"
            "Every list, statistics and chart endpoint accepts the same filter "
            "query parameters. Year filters must be numeric (other values are "
            "ignored); all other filters are exact matches. `search` is a "
            "case-insensitive literal substring match.\n\n"
            "### Rate limits\n"
            f"- {_cfg.rate_limit_default} req/min per IP and path (`/health` exempt)\n\n"
            "Returns `429 Too Many Requests` with `Retry-After: 60` when exceeded."
        ),
        version=API_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {"name": "data", "description": "Filtered insight records."},
            {"name": "filters", "description": "Distinct values for filter dropdowns."},
            {"name": "stats", "description": "Totals, score averages and top categories."},
            {"name": "charts", "description": "Chart-ready series and server-rendered SVG charts."},
            {"name": "meta", "description": "Health check and API metadata."},
        ],
    )

    # ── CORS middleware ───────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Request logging + rate limiting middleware ───────────────────────────

    @app.middleware("http")
    async def log_and_rate_limit(request: Request, call_next):
        """Log each request and enforce per-IP rate limits."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        client_ip = _get_client_ip(request)
        path = request.url.path

        _cleanup_rate_counters()

        if path not in _RATE_EXEMPT_PATHS:
            now = time.time()
            window_start = now - 60.0
            hits = [t for t in _rate_counters[client_ip][path] if t > window_start]
            _rate_counters[client_ip][path] = hits
            if len(hits) >= _DEFAULT_RATE_LIMIT:
                _logger.warning(
                    "rate_limited ip=%s path=%s limit=%d", client_ip, path, _DEFAULT_RATE_LIMIT
                )
                return JSONResponse(
                    status_code=429,
                    content=_error_body("Too many requests"),
                    headers={"Retry-After": "60", "X-Request-ID": request_id},
                )
            hits.append(now)

        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        if _cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "client_ip": client_ip,
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f ip=%s rid=%s",
                request.method, path, response.status_code, duration_ms,
                client_ip, request_id,
            )
        if duration_ms > 500:
            _logger.warning(
                "slow_request method=%s path=%s duration_ms=%.1f",
                request.method, path, duration_ms,
            )
        return response

    # ── Content Security Policy + security headers ───────────────────────────

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        """Add Content-Security-Policy, X-Content-Type-Options, and X-Frame-Options."""
        response = await call_next(request)
        # Chart.js is loaded from jsDelivr; the dashboard template has inline scripts.
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self' cdn.jsdelivr.net 'unsafe-inline'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "font-src 'self'; "
            "connect-src 'self';"
        )
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response

    # ── Error handling ────────────────────────────────────────────────────────

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            body = _error_body("Endpoint not found")
        else:
            body = _error_body(str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content=body,
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content=_error_body("Invalid request parameters", json.dumps(jsonable_errors(exc))),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Catch unhandled exceptions and return JSON instead of an HTML traceback."""
        _logger.exception("API Error: %s", exc)
        return JSONResponse(status_code=500, content=_error_body("Server error", str(exc)))

    # ── Root + health check ──────────────────────────────────────────────────

    @app.get("/", tags=["meta"], summary="API information")
    def root():
        return {"name": API_NAME, "version": API_VERSION, "endpoints": API_ENDPOINTS}

    @app.get("/health", tags=["meta"], summary="Health check")
    def health():
        """Return 200 if the store is reachable, 503 otherwise."""
        connected, count = check_database()
        if connected:
            return {"status": "ok", "database": "connected", "records": count}
        return JSONResponse(
            status_code=503,
            content={"status": "degraded", "database": "disconnected", "records": 0},
        )

    # ── Register routers ──────────────────────────────────────────────────────

    prefix = "/api"
    app.include_router(data.router,    prefix=prefix)
    app.include_router(filters.router, prefix=prefix)
    app.include_router(stats.router,   prefix=prefix)
    app.include_router(charts.router,  prefix=prefix)

    # ── Jinja2 templates ──────────────────────────────────────────────────────
    templates_dir = Path(__file__).parent.parent / "templates"

    if templates_dir.exists():
        templates = Jinja2Templates(directory=str(templates_dir))
        register_filters(templates.env)

        # Wire templates into the frontend router
        frontend_routes.set_templates(templates)
        app.include_router(frontend_routes.router)

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors reduced to JSON-safe location/message pairs."""
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


# Singleton instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.app:app",
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )
