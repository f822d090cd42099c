"""
Session Cookies
Supabase access/refresh tokens carried in HTTP-only cookies
"""

from starlette.responses import Response

from app.config import Settings
from app.models.task import AuthSession


def set_session_cookies(response: Response, session: AuthSession, settings: Settings) -> None:
    for name, value in (
        (settings.access_token_cookie, session.access_token),
        (settings.refresh_token_cookie, session.refresh_token),
    ):
        response.set_cookie(
            name,
            value,
            max_age=settings.session_cookie_max_age,
            httponly=True,
            secure=settings.session_cookie_secure,
            samesite="lax",
            path="/"
        )


def clear_session_cookies(response: Response, settings: Settings) -> None:
    response.delete_cookie(settings.access_token_cookie, path="/")
    response.delete_cookie(settings.refresh_token_cookie, path="/")
