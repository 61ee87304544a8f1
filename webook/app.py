"""FastAPI application factory."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from webook.core.config import get_settings
from webook.core.jwt_tokens import TOKEN_HEADER
from webook.core.logging import setup_logging
from webook.core.redis_client import close_redis
from webook.ioc import Container, build_container
from webook.routers import users as users_router

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def create_app(container: Container | None = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``--factory``)."""
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if container is None:
            setup_logging()
            app.state.container = build_container(settings)
        logger.info("webook started", extra={"environment": settings.app_env})
        yield
        app.state.container.close()
        if container is None:
            close_redis()
        logger.info("webook stopped")

    app = FastAPI(title="webook", lifespan=lifespan)
    if container is not None:
        app.state.container = container

    allowed_cors = set()
    if settings.app_env != "prod":
        allowed_cors.update({"http://localhost:3000", "http://127.0.0.1:3000"})
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=[TOKEN_HEADER],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    app.include_router(users_router.router)
    return app
