"""
Authentication Service
Supabase Auth signup, login, logout and session resolution
"""

from typing import Any, Optional

import structlog
from fastapi.concurrency import run_in_threadpool
from supabase import Client

from app.models.task import AuthSession, AuthUser
from app.utils.errors import AuthError

logger = structlog.get_logger(__name__)

GENERIC_AUTH_ERROR = "An error occurred. Please try again."


def require_auth(user: Optional[AuthUser]) -> AuthUser:
    """
    Require authentication

    Raises:
        AuthError: When there is no authenticated user
    """
    if user is None:
        raise AuthError("Unauthorized")
    return user


def _to_user(user: Any) -> AuthUser:
    return AuthUser(id=str(user.id), email=getattr(user, 'email', None))


def _to_session(session: Any, user: Any) -> AuthSession:
    return AuthSession(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_at=getattr(session, 'expires_at', None),
        user=_to_user(user or session.user)
    )


def _error_message(error: Exception) -> str:
    return getattr(error, 'message', None) or str(error) or GENERIC_AUTH_ERROR


class AuthService:
    """
    Supabase Auth wrapper for customer sessions

    The supabase client is synchronous; calls run in the threadpool.
    """

    def __init__(self, client: Client):
        self.client = client

    async def sign_up(self, email: str, password: str) -> Optional[AuthSession]:
        """
        Create an account

        Returns:
            AuthSession, or None when the project requires email confirmation
            before issuing a session

        Raises:
            AuthError: Supabase rejected the signup (e.g. already registered)
        """
        try:
            response = await run_in_threadpool(self.client.auth.sign_up, {
                "email": email,
                "password": password
            })
        except Exception as e:
            logger.warning("Supabase sign up failed", email=email, error=str(e))
            raise AuthError(_error_message(e)) from e

        if response.user is None:
            raise AuthError("Failed to create account")

        logger.info("Customer signed up", user_id=str(response.user.id))
        if response.session is None:
            return None
        return _to_session(response.session, response.user)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """
        Sign in with email and password

        Raises:
            AuthError: Invalid credentials or Supabase failure
        """
        try:
            response = await run_in_threadpool(self.client.auth.sign_in_with_password, {
                "email": email,
                "password": password
            })
        except Exception as e:
            logger.warning("Supabase sign in failed", email=email, error=str(e))
            raise AuthError(_error_message(e)) from e

        if response.user is None or response.session is None:
            raise AuthError("Invalid login credentials")

        logger.info("Customer signed in", user_id=str(response.user.id))
        return _to_session(response.session, response.user)

    async def sign_out(self, access_token: str) -> bool:
        """
        Revoke the session behind access_token

        Returns:
            True when Supabase accepted the revocation
        """
        try:
            await run_in_threadpool(self.client.auth.admin.sign_out, access_token)
            return True
        except Exception as e:
            logger.warning("Supabase sign out failed", error=str(e))
            return False

    async def get_user(self, access_token: Optional[str]) -> Optional[AuthUser]:
        """Current user for access_token, or None if missing/invalid/expired"""
        if not access_token:
            return None
        try:
            response = await run_in_threadpool(self.client.auth.get_user, access_token)
        except Exception as e:
            logger.debug("Access token rejected", error=str(e))
            return None

        if response is None or response.user is None:
            return None
        return _to_user(response.user)

    async def refresh(self, refresh_token: Optional[str]) -> Optional[AuthSession]:
        """Exchange a refresh token for a new session, or None"""
        if not refresh_token:
            return None
        try:
            response = await run_in_threadpool(self.client.auth.refresh_session, refresh_token)
        except Exception as e:
            logger.info("Session refresh failed", error=str(e))
            return None

        if response.session is None:
            return None
        return _to_session(response.session, response.user)
