"""
FastAPI application factory.

Usage:
    python -m api.app                    # Dev server on port 8000
    APP_CATALOG_DIR=/data/catalog python -m api.app

OpenAPI docs available at http://localhost:8000/docs after starting.

Middleware stack (outermost last-added):
    - security headers (nosniff, frame denial)
    - request logging, X-Request-ID and per-IP rate limiting
    - Cache-Control by endpoint family
    - CORS with origins from APP_CORS_ORIGINS

Structured JSON logging is enabled with APP_LOG_FORMAT=json.
"""

import json
import logging
import threading
import time
import uuid
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import budget, compare, export, favorites, featured, units, wizard
from catalog.loader import Catalog, load_catalog
from engine.service import ComparisonService
from stores.favorites import FavoritesStore, create_favorites_store
from utils.cache import TTLCache
from utils.config import AppConfig

# ── Configuration ─────────────────────────────────────────────────────────────
_cfg = AppConfig.from_env()

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


_logger = logging.getLogger("budget_comparisons_api")
_handler = logging.StreamHandler()
if _cfg.log_format == "json":
    _handler.setFormatter(_JsonFormatter())
else:
    _handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    )
logging.basicConfig(handlers=[_handler], level=logging.INFO, force=True)

SEARCH_PATHS = ("/api/v1/budget/search", "/api/v1/units/search")
CACHEABLE_PREFIXES = (
    "/api/v1/compare",
    "/api/v1/comparisons",
    "/api/v1/budget",
    "/api/v1/units",
    "/api/v1/featured",
    "/api/v1/wizard",
)
PUBLIC_CACHE_CONTROL = "public, s-maxage=3600, stale-while-revalidate=86400"
SLOW_REQUEST_MS = 500


# ── Rate limiting ─────────────────────────────────────────────────────────────

class RateLimiter:
    """Sliding one-minute window of request timestamps per client IP and path.

    Memory is bounded: stale entries are swept every ``cleanup_interval``
    seconds and, past ``max_tracked_ips``, the least active IPs are evicted.
    """

    def __init__(self, limits: dict[str, int], default_limit: int,
                 window_seconds: float = 60.0, max_tracked_ips: int = 10_000,
                 cleanup_interval: float = 300.0, clock=time.time):
        self.limits = dict(limits)
        self.default_limit = default_limit
        self.window = window_seconds
        self.max_tracked_ips = max_tracked_ips
        self.cleanup_interval = cleanup_interval
        self.clock = clock
        self.blocked_count = 0
        self._counters: dict[str, dict[str, list[float]]] = defaultdict(lambda: defaultdict(list))
        self._last_cleanup = 0.0
        self._lock = threading.Lock()

    def limit_for(self, path: str) -> int:
        return self.limits.get(path, self.default_limit)

    def hit(self, client_ip: str, path: str) -> bool:
        """Record a request; returns False when the client is over its limit."""
        now = self.clock()
        limit = self.limit_for(path)
        with self._lock:
            self._cleanup(now)
            window_start = now - self.window
            hits = [t for t in self._counters[client_ip][path] if t > window_start]
            if len(hits) >= limit:
                self._counters[client_ip][path] = hits
                self.blocked_count += 1
                return False
            hits.append(now)
            self._counters[client_ip][path] = hits
            return True

    def _cleanup(self, now: float) -> None:
        if now - self._last_cleanup < self.cleanup_interval:
            return
        self._last_cleanup = now
        window_start = now - self.window
        for ip in list(self._counters):
            paths = self._counters[ip]
            for path in list(paths):
                paths[path] = [t for t in paths[path] if t > window_start]
                if not paths[path]:
                    del paths[path]
            if not paths:
                del self._counters[ip]
        if len(self._counters) > self.max_tracked_ips:
            excess = len(self._counters) - self.max_tracked_ips
            quietest = sorted(
                self._counters,
                key=lambda ip: sum(len(v) for v in self._counters[ip].values()),
            )[:excess]
            for ip in quietest:
                del self._counters[ip]

    @property
    def tracked_ips(self) -> int:
        return len(self._counters)


# ── Proxy-aware client IP ─────────────────────────────────────────────────────

def _get_client_ip(request: Request, trusted_proxies: set[str]) -> str:
    """Return the real client IP, respecting X-Forwarded-For from trusted proxies."""
    direct_ip = request.client.host if request.client else "unknown"
    if not trusted_proxies or direct_ip not in trusted_proxies:
        return direct_ip
    xff = request.headers.get("X-Forwarded-For", "")
    if xff:
        # leftmost entry is the original client
        real_ip = xff.split(",")[0].strip()
        if real_ip:
            return real_ip
    return direct_ip


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log catalog sizes on startup."""
    stats = app.state.catalog.stats()
    if not stats["units"]:
        _logger.warning("Catalog has no comparison units; comparisons will 404")
    _logger.info(
        "catalog_loaded units=%d budget_items=%d featured=%d",
        stats["units"], stats["budget_items"], stats["featured"],
    )
    yield


def create_app(catalog: Optional[Catalog] = None,
               config: Optional[AppConfig] = None,
               favorites_store: Optional[FavoritesStore] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        catalog: Catalog to serve (default: loaded from ``config.catalog_dir``).
        config: Settings override (default: read from the environment).
        favorites_store: Favorites store override (default: JSON file at
            ``config.favorites_path`` or in-memory).

    Returns:
        Configured FastAPI application instance.
    """
    cfg = config or _cfg
    if catalog is None:
        catalog = load_catalog(cfg.catalog_dir)
    if favorites_store is None:
        favorites_store = create_favorites_store(cfg.favorites_path)

    app = FastAPI(
        title="Budget Comparisons API",
        summary="Compare U.S. federal budget line items with tangible real-world units.",
        description=(
            "## Budget Comparisons API\n\n"
            "Expresses federal spending as counts of things people can picture: "
            "$842B is 10,525 F-35 fighter jets.\n\n"
            "### Key concepts\n"
            "- **Amounts** are in whole **dollars**.\n"
            "- **Count** = budget amount / unit cost, never rounded; display "
            "strings are rounded.\n"
            "- When no unit is requested, the unit with the highest **impact "
            "score** (roundness and magnitude fit of the count) is chosen.\n\n"
            "### Rate limits\n"
            f"- Search endpoints: {cfg.rate_limit_search} req/min per IP\n"
            f"- All other endpoints: {cfg.rate_limit_default} req/min per IP\n\n"
            "Returns `429 Too Many Requests` with `Retry-After: 60` when exceeded."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {"name": "compare", "description": "Budget item vs. unit comparisons and alternatives."},
            {"name": "budget", "description": "Budget items, search and category hierarchy."},
            {"name": "units", "description": "Comparison unit catalog and search."},
            {"name": "featured", "description": "Curated featured comparisons."},
            {"name": "favorites", "description": "Saved comparisons."},
            {"name": "meta", "description": "Health check and API metadata."},
        ],
    )

    cache = TTLCache(maxsize=cfg.cache_size, ttl_seconds=cfg.cache_ttl)
    app.state.config = cfg
    app.state.catalog = catalog
    app.state.service = ComparisonService(catalog, cache=cache)
    app.state.favorites = favorites_store
    app.state.started_at = time.time()
    app.state.metrics = {"request_count": 0, "error_count": 0}
    rate_limiter = RateLimiter(
        limits={path: cfg.rate_limit_search for path in SEARCH_PATHS},
        default_limit=cfg.rate_limit_default,
    )
    app.state.rate_limiter = rate_limiter

    # ── CORS middleware ────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Cache-Control middleware ───────────────────────────────────────────────

    @app.middleware("http")
    async def cache_control_middleware(request: Request, call_next):
        """Public CDN caching for catalog reads; never cache favorites."""
        response = await call_next(request)
        path = request.url.path
        if path.startswith("/api/v1/favorites"):
            response.headers["Cache-Control"] = "private, no-cache"
        elif (request.method == "GET" and response.status_code == 200
              and path.startswith(CACHEABLE_PREFIXES)):
            response.headers.setdefault("Cache-Control", PUBLIC_CACHE_CONTROL)
        return response

    # ── Request logging + rate limiting middleware ────────────────────────────

    @app.middleware("http")
    async def log_and_rate_limit(request: Request, call_next):
        """Log each request, enforce per-IP rate limits, and record metrics."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        start = time.monotonic()
        client_ip = _get_client_ip(request, cfg.trusted_proxies)
        path = request.url.path

        # Health checks are not rate limited
        if path.startswith("/health"):
            return await call_next(request)

        if not rate_limiter.hit(client_ip, path):
            _logger.warning(
                "rate_limited ip=%s path=%s limit=%d",
                client_ip, path, rate_limiter.limit_for(path),
            )
            return JSONResponse(
                status_code=429,
                content={"error": "Too many requests", "status_code": 429},
                headers={"Retry-After": "60", "X-Request-ID": request_id},
            )

        app.state.metrics["request_count"] += 1
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        if response.status_code >= 500:
            app.state.metrics["error_count"] += 1

        response.headers["X-Request-ID"] = request_id

        if cfg.log_format == "json":
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
        if duration_ms > SLOW_REQUEST_MS:
            _logger.warning(
                "slow_request method=%s path=%s duration_ms=%.1f",
                request.method, path, duration_ms,
            )
        return response

    # ── Security headers ──────────────────────────────────────────────────────

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        """Add X-Content-Type-Options and X-Frame-Options."""
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response

    # ── Error handling ────────────────────────────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Catch unhandled exceptions and return JSON instead of an HTML traceback."""
        _logger.exception("unhandled_error path=%s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc),
                "status_code": 500,
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=400,
            content={"error": "Bad request", "detail": str(exc), "status_code": 400},
        )

    # ── Health check ──────────────────────────────────────────────────────────

    @app.get("/health", tags=["meta"], summary="Health check")
    def health():
        """Return 200 OK with catalog sizes, or 503 when no units are loaded."""
        stats = app.state.catalog.stats()
        if not stats["units"]:
            return JSONResponse(
                status_code=503,
                content={"status": "degraded", "catalog": stats},
            )
        return {"status": "ok", "catalog": stats}

    @app.get(
        "/health/detailed",
        tags=["meta"],
        summary="Detailed health metrics",
        response_description="Operational metrics for monitoring dashboards",
    )
    def health_detailed():
        """Return uptime, request counters, cache and rate-limiter statistics.

        Counters reset on process restart.
        """
        return {
            "status": "ok",
            "uptime_seconds": round(time.time() - app.state.started_at, 2),
            "request_count": app.state.metrics["request_count"],
            "error_count": app.state.metrics["error_count"],
            "catalog": app.state.catalog.stats(),
            "comparison_cache": app.state.service.cache_stats(),
            "favorites_count": len(app.state.favorites),
            "rate_limiter_stats": {
                "tracked_ips": rate_limiter.tracked_ips,
                "blocked_requests": rate_limiter.blocked_count,
            },
        }

    # ── Register routers ──────────────────────────────────────────────────────

    prefix = "/api/v1"
    app.include_router(compare.router,   prefix=prefix)
    app.include_router(budget.router,    prefix=prefix)
    app.include_router(units.router,     prefix=prefix)
    app.include_router(featured.router,  prefix=prefix)
    app.include_router(favorites.router, prefix=prefix)
    app.include_router(wizard.router,    prefix=prefix)
    app.include_router(export.router,    prefix=prefix)

    return app


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
