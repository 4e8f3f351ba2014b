from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.router.api.logics.auth_logic import login_logic, logout_logic
from app.router.dependencies import CurrentUser, get_current_user, get_token_from_any_scheme
from app.schema.auth_schema import LoginRequest, Token
from app.schema.user_schema import UserOut

router = APIRouter()


@router.post("/login", response_model=Token, status_code=status.HTTP_200_OK)
def login(
    request: LoginRequest,
    http_request: Request,
    response: Response,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Login endpoint for every role.

    On success the session token is set as an HttpOnly cookie and also
    returned in the body for clients that prefer the Authorization header.

    Args:
        request (LoginRequest): username and password
        db (Session): Database session

    Raises:
        Unauthorized: unknown user, wrong password or deactivated account

    Returns:
        Token: session token, expiry and the logged in user
    """
    client = http_request.client
    result = login_logic(
        db,
        request,
        ip_address=client.host if client else None,
        user_agent=http_request.headers.get("user-agent"),
    )
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=result["access_token"],
        max_age=settings.SESSION_EXPIRE_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )
    return result


@router.post("/logout", response_model=dict, status_code=status.HTTP_200_OK)
def logout(
    response: Response,
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(get_token_from_any_scheme),
) -> Dict[str, Any]:
    """Revokes the presented session, if any, and clears the cookie."""
    logout_logic(db, token)
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, httponly=True, samesite="lax")
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserOut, status_code=status.HTTP_200_OK)
def me(current: CurrentUser = Depends(get_current_user)):
    return current.user
