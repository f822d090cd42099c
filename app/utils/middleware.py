"""
HTTP Middleware
Session resolution, route protection, SEO headers and request logging
"""

import time

import structlog
from fastapi import Request
from fastapi.responses import RedirectResponse

from app.config import Settings
from app.services.auth_service import AuthService
from app.utils.session import clear_session_cookies, set_session_cookies

logger = structlog.get_logger(__name__)

PROTECTED_PREFIXES = ("/dashboard",)
AUTH_PAGE_PREFIXES = ("/login", "/signup")
PUBLIC_PREFIXES = ("/health", "/static", "/robots.txt", "/docs", "/redoc", "/openapi.json", "/favicon.ico")


def _matches(path: str, prefixes) -> bool:
    return path.startswith(prefixes)


async def session_middleware(request: Request, call_next):
    """
    Resolve the caller and apply redirect rules

    - unauthenticated access to /dashboard redirects to /login
    - authenticated access to /login or /signup redirects to /dashboard
    - an expired access token is refreshed and the cookies rewritten
    """
    settings: Settings = request.app.state.settings
    path = request.url.path

    if _matches(path, PUBLIC_PREFIXES):
        response = await call_next(request)
        return _apply_robots(response, settings)

    refreshed = None
    clear_cookies = False
    user = None

    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith("bearer "):
        access_token = authorization.split(" ", 1)[1].strip()
    else:
        access_token = request.cookies.get(settings.access_token_cookie)
    refresh_token = request.cookies.get(settings.refresh_token_cookie)

    if access_token or refresh_token:
        auth = AuthService(request.app.state.supabase_factory(None))
        user = await auth.get_user(access_token)
        if user is None and refresh_token and not authorization:
            refreshed = await auth.refresh(refresh_token)
            if refreshed is not None:
                user = refreshed.user
                request.state.session = refreshed
                logger.info("Session refreshed", user_id=user.id)
            else:
                clear_cookies = True
        elif user is None and not authorization:
            clear_cookies = True

    request.state.user = user

    if _matches(path, PROTECTED_PREFIXES) and user is None:
        response = RedirectResponse(url="/login", status_code=307)
    elif _matches(path, AUTH_PAGE_PREFIXES) and user is not None:
        response = RedirectResponse(url="/dashboard", status_code=307)
    else:
        response = await call_next(request)

    if refreshed is not None:
        set_session_cookies(response, refreshed, settings)
    elif clear_cookies:
        clear_session_cookies(response, settings)

    return _apply_robots(response, settings)


def _apply_robots(response, settings: Settings):
    if not settings.allow_indexing:
        response.headers["X-Robots-Tag"] = "noindex, nofollow"
    return response


async def log_requests(request: Request, call_next):
    """Log all incoming requests"""
    start = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "Request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - start) * 1000, 2)
    )
    return response
