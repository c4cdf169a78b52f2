from fastapi import APIRouter, Depends, HTTPException, Request, Response
from typing import Optional
from app.config import settings
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, SessionResponse
)
from app.modules.auth.service import AuthService
from app.config.permissions_config import ROLE_PERMISSIONS
from app.core.dependencies import get_auth_service, get_request_token, get_session
from app.core.rate_limit import limiter
from app.core.session import SessionContext

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
@limiter.limit(settings.auth_rate_limit)
async def register(
    request: Request,
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new teacher, student or parent"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.auth_rate_limit)
async def login(
    request: Request,
    response: Response,
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login, open a session and get an access token (also set as a cookie for page routes)"""
    token = service.login(login_data)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token.access_token,
        httponly=True,
        samesite="lax",
        secure=settings.is_production
    )
    return token


@router.post("/logout", status_code=200)
async def logout(
    response: Response,
    token: Optional[str] = Depends(get_request_token),
    service: AuthService = Depends(get_auth_service)
):
    """Close the session (bearer header or login cookie) and sign out"""
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    service.logout(token)
    response.delete_cookie(settings.session_cookie_name)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=SessionResponse)
async def get_current_user(session: SessionContext = Depends(get_session)):
    """Current session: identity, role-tagged profile and permissions (for frontend UI)"""
    return {**session.to_dict(), "permissions": sorted(ROLE_PERMISSIONS.get(session.role, []))}
