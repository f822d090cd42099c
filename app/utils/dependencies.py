"""
FastAPI Dependencies
Per-request Supabase clients, authentication and task wiring
"""

from typing import Annotated, Optional

import structlog
from fastapi import Depends, HTTPException, Request, status
from supabase import Client

from app.actions.task_actions import TaskActions
from app.config import Settings
from app.models.task import AuthUser
from app.services.auth_service import AuthService
from app.services.task_service import TaskService
from app.utils.task_cache import TaskListCache
from app.utils.task_gateway import TaskGateway

logger = structlog.get_logger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_access_token(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, else the session cookie"""
    authorization = request.headers.get("authorization")
    if authorization and authorization.lower().startswith("bearer "):
        return authorization.split(" ", 1)[1].strip() or None

    session = getattr(request.state, "session", None)
    if session is not None:
        return session.access_token

    settings: Settings = request.app.state.settings
    return request.cookies.get(settings.access_token_cookie)


def get_supabase(request: Request) -> Client:
    """Supabase client acting as the caller"""
    return request.app.state.supabase_factory(get_access_token(request))


def get_auth_service(request: Request) -> AuthService:
    """Auth service on an anonymous client"""
    return AuthService(request.app.state.supabase_factory(None))


async def get_optional_user(request: Request) -> Optional[AuthUser]:
    """
    Current user, or None

    The session middleware resolves the user for each request; API calls
    that bypass it are resolved here.
    """
    if hasattr(request.state, "user"):
        return request.state.user

    token = get_access_token(request)
    if not token:
        return None
    user = await get_auth_service(request).get_user(token)
    request.state.user = user
    return user


async def get_current_user(
    user: Optional[AuthUser] = Depends(get_optional_user)
) -> AuthUser:
    """
    Authenticated user for JSON endpoints

    Raises:
        HTTPException: 401 without a valid session
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_task_cache(request: Request) -> TaskListCache:
    return request.app.state.task_cache


def get_task_service(client: Client = Depends(get_supabase)) -> TaskService:
    return TaskService(TaskGateway(client))


def get_task_actions(
    user: Optional[AuthUser] = Depends(get_optional_user),
    service: TaskService = Depends(get_task_service),
    cache: TaskListCache = Depends(get_task_cache)
) -> TaskActions:
    """Actions bound to this request's caller"""
    return TaskActions(user, service, cache)


# Type aliases for cleaner dependency injection
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
OptionalUser = Annotated[Optional[AuthUser], Depends(get_optional_user)]
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
TaskActionsDep = Annotated[TaskActions, Depends(get_task_actions)]
