from typing import Optional
from fastapi import Depends, HTTPException, Request, Response
from .auth import AuthProvider
from .config import get_settings
from .dashboard import DashboardRegistry
from .errors import LoginRequired
from .schemas import Session


def get_auth_provider(request: Request) -> AuthProvider:
    return request.app.state.auth


def get_registry(request: Request) -> DashboardRegistry:
    return request.app.state.registry


async def get_optional_session(
    request: Request,
    auth: AuthProvider = Depends(get_auth_provider),
) -> Optional[Session]:
    """Look the session up once per request from the session cookie"""
    token = request.cookies.get(get_settings().session_cookie_name)
    return await auth.get_session(token)


async def require_session(session: Optional[Session] = Depends(get_optional_session)) -> Session:
    if session is None:
        raise LoginRequired()
    return session


async def require_api_session(session: Optional[Session] = Depends(get_optional_session)) -> Session:
    if session is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return session


def set_session_cookie(response: Response, session: Session) -> None:
    settings = get_settings()
    response.set_cookie(
        settings.session_cookie_name,
        session.access_token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(get_settings().session_cookie_name)
