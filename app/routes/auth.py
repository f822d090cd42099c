"""
Authentication Routes
Account signup, login, logout and session refresh over JSON
"""

import structlog
from fastapi import APIRouter, HTTPException, Request, status

from app.utils.dependencies import AuthServiceDep, CurrentUser, get_access_token
from app.utils.errors import AuthError
from shared.schemas.auth import LoginSchema, RefreshTokenSchema, SignupSchema

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/signup", response_model=dict, status_code=status.HTTP_201_CREATED)
async def signup(data: SignupSchema, auth: AuthServiceDep):
    """
    Register a new account

    Returns session tokens unless the project requires email confirmation
    """
    try:
        session = await auth.sign_up(data.email, data.password)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    if session is None:
        return {
            "success": True,
            "message": "Check your email to confirm your account",
            "requires_confirmation": True
        }

    return {
        "success": True,
        "message": "Account created",
        "requires_confirmation": False,
        "session": session.to_dict()
    }


@router.post("/login", response_model=dict)
async def login(data: LoginSchema, auth: AuthServiceDep):
    """Authenticate and return access tokens"""
    try:
        session = await auth.sign_in(data.email, data.password)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)

    return {
        "success": True,
        "message": "Login successful",
        "session": session.to_dict()
    }


@router.post("/logout", response_model=dict)
async def logout(request: Request, current_user: CurrentUser, auth: AuthServiceDep):
    """Revoke the caller's session"""
    revoked = await auth.sign_out(get_access_token(request))
    if not revoked:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Logout failed"
        )

    logger.info("Customer logged out", user_id=current_user.id)
    return {"success": True, "message": "Logout successful"}


@router.post("/refresh", response_model=dict)
async def refresh(data: RefreshTokenSchema, auth: AuthServiceDep):
    """Exchange a refresh token for new tokens"""
    session = await auth.refresh(data.refresh_token)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token refresh failed"
        )
    return {"success": True, "session": session.to_dict()}


@router.get("/me", response_model=dict)
async def me(current_user: CurrentUser):
    """Current account"""
    return {"success": True, "user": current_user.to_dict()}
