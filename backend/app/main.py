"""
RecipeBox FastAPI Application
Main entry point for the backend API server.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.config import Settings, get_settings
from app.database import build_engine, build_session_factory, init_db
from app.errors import RequestTimeout
from app.logging_config import setup_logging
from app.services.auth_service import TokenIssuer
from app.services.cache import create_redis_client
from app.api import auth, recipes, users
from app.api.error_handlers import error_response, register_exception_handlers
from app.api.rate_limit import RateLimitSwitchMiddleware, limiter

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and cleanup on shutdown.
    """
    settings: Settings = app.state.settings
    setup_logging(log_dir=settings.log_dir, log_level=settings.log_level)

    logger.info(f"Starting {settings.app_name} backend...")

    # Create tables directly (dev/tests); production uses Alembic migrations
    if settings.db_create_all:
        await init_db(app.state.engine)
        logger.info("Database tables created")

    yield

    logger.info(f"Shutting down {settings.app_name} backend...")
    if app.state.redis is not None:
        await app.state.redis.aclose()
    await app.state.engine.dispose()
    logger.info("Database connections closed")


class TimeoutMiddleware:
    """
    Abort requests that run past the configured deadline.
    Plain ASGI so the cancelled handler is awaited in this task, not a child one.
    """

    def __init__(self, app: ASGIApp, timeout_seconds: float):
        self.app = app
        self.timeout_seconds = timeout_seconds

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(self.app(scope, receive, send_wrapper), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            if response_started:
                raise
            logger.warning(f"Request timed out: {scope['method']} {scope['path']}")
            exc = RequestTimeout()
            response = error_response(exc.status_code, exc.message)
            await response(scope, receive, send)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.
    Everything that depends on configuration hangs off `app.state`.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="""
        ## Recipe Sharing API

        Browse, create, edit and delete recipes. Mutations require a bearer token
        obtained from `/api/auth/signup` or `/api/auth/login`.
        """,
        version=VERSION,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan,
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_issuer = TokenIssuer.from_settings(settings)
    app.state.redis = create_redis_client(settings.redis_url)

    app.state.limiter = limiter

    register_exception_handlers(app)

    app.add_middleware(RateLimitSwitchMiddleware, enabled=settings.rate_limit_enabled)
    app.add_middleware(TimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept", "Origin"],
        max_age=86400,
    )

    # =============================================================================
    # Health Check Endpoints
    # =============================================================================

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint - API information."""
        return {
            "name": f"{settings.app_name} API",
            "version": VERSION,
            "docs": f"{settings.api_prefix}/docs",
            "status": "running"
        }

    @app.get(f"{settings.api_prefix}/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for container orchestration."""
        return {
            "status": "healthy",
            "service": "recipebox-backend",
            "version": VERSION
        }

    @app.get(f"{settings.api_prefix}/health/db", tags=["Health"])
    async def database_health(request: Request):
        """Database connectivity check."""
        try:
            async with request.app.state.session_factory() as session:
                await session.execute(text("SELECT 1"))
            return {"status": "healthy", "database": "connected"}
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return {"status": "unhealthy", "database": "disconnected"}

    # =============================================
    # API Routers
    # =============================================

    app.include_router(auth.router, prefix=f"{settings.api_prefix}/auth", tags=["Auth"])
    app.include_router(users.router, prefix=f"{settings.api_prefix}/users", tags=["Users"])
    app.include_router(recipes.router, prefix=f"{settings.api_prefix}/recipes", tags=["Recipes"])

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=get_settings().debug
    )
