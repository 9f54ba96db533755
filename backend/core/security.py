"""
core/security.py
────────────────
Security middleware and exception handlers for Random Trip.

Covers:
  • Rate limiting  — slowapi (in-memory by default, Redis via RATE_LIMIT_STORAGE_URI)
  • Secure headers — HSTS, X-Frame-Options, CSP via the `secure` library
  • CORS           — FastAPI CORSMiddleware
  • Exception gate — ``{"error": ...}`` bodies, never internals
"""

import logging
from typing import TYPE_CHECKING

import secure
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from core.config import get_settings
from core.errors import MalformedRequestError, StoreUnavailableError

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger("randomtrip.security")

# ── Settings ────────────────────────────────────────────────────────────────
settings = get_settings()

# ── Rate Limiter ────────────────────────────────────────────────────────────
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED,
)

# Random draws are cheap but each one hits the store.
SELECTION_LIMIT = "30/minute"

# ── User-facing messages ────────────────────────────────────────────────────
SEARCH_FAILED_MESSAGE = "여행지 검색 중 오류가 발생했습니다."
INTERNAL_ERROR_MESSAGE = "An internal error occurred. Please try again later."

# ── Secure Headers ──────────────────────────────────────────────────────────
_csp = secure.ContentSecurityPolicy().default_src("'self'")
_hsts = secure.StrictTransportSecurity().max_age(31536000).include_subdomains()
_xfo = secure.XFrameOptions().deny()

secure_headers = secure.Secure(
    csp=_csp,
    hsts=_hsts,
    xfo=_xfo,
)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Malformed request"


# ═══════════════════════════════════════════════════════════════════════════
# Public setup function — called once from main.py
# ═══════════════════════════════════════════════════════════════════════════


def setup_security(app: "FastAPI") -> None:
    """Wire every security layer into the FastAPI application."""

    # ── 1. Rate limiting ────────────────────────────────────────────────
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # ── 2. CORS ─────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── 3. Secure headers (HSTS / X-Frame-Options / CSP) ────────────────
    @app.middleware("http")
    async def _set_secure_headers(request: Request, call_next):  # noqa: ANN001
        response = await call_next(request)
        secure_headers.framework.fastapi(response)
        return response

    # ── 4. Malformed input → 400, before the store is touched ───────────
    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(request: Request, exc: RequestValidationError):  # noqa: ANN001
        logger.info("Rejected malformed request on %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(MalformedRequestError)
    async def _malformed_request_handler(request: Request, exc: MalformedRequestError):  # noqa: ANN001
        logger.info("Rejected malformed request on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=400, content={"error": str(exc)})

    # ── 5. Store failures → generic failure response ────────────────────
    @app.exception_handler(StoreUnavailableError)
    async def _store_unavailable_handler(request: Request, exc: StoreUnavailableError):  # noqa: ANN001
        logger.error("Store unavailable on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": SEARCH_FAILED_MESSAGE})

    # ── 6. Global exception handler — suppress internals ────────────────
    @app.exception_handler(Exception)
    async def _global_exception_handler(request: Request, exc: Exception):  # noqa: ANN001, ARG001
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})
