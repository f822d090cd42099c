"""
SaaS Starter - FastAPI Application
Supabase authentication and an example tasks feature
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable, Optional

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.config import Settings, get_settings
from app.routes import auth, health, pages, tasks
from app.utils.middleware import log_requests, session_middleware
from app.utils.supabase_client import SupabaseClientFactory
from app.utils.task_cache import TaskListCache
from shared.utils.logger import setup_logging
from shared.utils.redis_client import RedisClient

logger = structlog.get_logger(__name__)


def build_task_cache(settings: Settings) -> TaskListCache:
    """Redis-backed task list cache, disabled without REDIS_URL"""
    if not settings.cache_enabled:
        return TaskListCache()
    return TaskListCache(RedisClient(settings.redis_url), ttl=settings.task_list_cache_ttl)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler"""
    logger.info("SaaS Starter starting up", environment=app.state.settings.environment)

    cache = app.state.task_cache
    if cache.enabled and not cache.redis.test_connection():
        logger.warning("Redis unreachable, task list cache will miss")

    yield

    logger.info("SaaS Starter shutting down")
    if cache.enabled:
        cache.redis.close()


def create_app(
    settings: Optional[Settings] = None,
    supabase_factory: Optional[Callable] = None,
    task_cache: Optional[TaskListCache] = None
) -> FastAPI:
    """
    Build the application

    Args:
        settings: Settings (defaults to environment)
        supabase_factory: Callable(access_token) -> Supabase client
        task_cache: Task list cache (defaults to one built from settings)
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.logging_config_path)

    app = FastAPI(
        title="SaaS Starter",
        description="Authentication and an example tasks feature backed by Supabase",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.state.settings = settings
    app.state.supabase_factory = supabase_factory or SupabaseClientFactory(settings)
    app.state.task_cache = task_cache or build_task_cache(settings)

    # Middleware runs in reverse order of registration: logging wraps sessions
    app.middleware("http")(session_middleware)
    app.middleware("http")(log_requests)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Custom HTTP exception handler"""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": True,
                "message": exc.detail,
                "status_code": exc.status_code
            },
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler"""
        logger.error(
            "Unhandled exception",
            error=str(exc),
            method=request.method,
            url=str(request.url),
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred"
            }
        )

    static_dir = os.path.join(os.path.dirname(__file__), "static")
    app.mount("/static", StaticFiles(directory=static_dir), name="static")

    app.include_router(health.router, tags=["Health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])
    app.include_router(pages.router, tags=["Pages"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
        log_level="info"
    )
