from dataclasses import dataclass
from typing import Callable, Optional, Union

from fastapi import Depends, Request, Security
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.exceptions import BadRequest, Forbidden
from app.model.enums import UserRole
from app.model.users import User
from app.router.api.logics.school_logic import get_school
from app.router.auth_util import validate_session

session_cookie_scheme = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Who is calling: passed explicitly into every logic function."""

    user_id: str
    role: UserRole
    school_id: Optional[str]
    session_id: str

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.super_admin

    @property
    def is_admin(self) -> bool:
        return self.role in (UserRole.admin, UserRole.super_admin)


@dataclass(frozen=True)
class CurrentUser:
    user: User
    ctx: AuthContext


def get_token_from_any_scheme(
    cookie_token: Union[str, None] = Security(session_cookie_scheme),
    bearer: Union[HTTPAuthorizationCredentials, None] = Security(bearer_scheme),
) -> Optional[str]:
    """
    Session token from the `session` cookie, else from an
    `Authorization: Bearer` header. None when neither is present.
    """
    if cookie_token:
        return cookie_token
    if bearer and bearer.credentials:
        return bearer.credentials
    return None


def get_current_user(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(get_token_from_any_scheme),
) -> CurrentUser:
    user, session = validate_session(db, token)
    ctx = AuthContext(
        user_id=user.id,
        role=user.role,
        school_id=user.school_id,
        session_id=session.id,
    )
    return CurrentUser(user=user, ctx=ctx)


def require_auth(current: CurrentUser = Depends(get_current_user)) -> AuthContext:
    return current.ctx


def require_role(*roles: UserRole) -> Callable[..., AuthContext]:
    """
    Dependency factory: 401 when unauthenticated, 403 when the caller's
    role is not one of `roles`.
    """
    allowed = set(roles)

    def _check(ctx: AuthContext = Depends(require_auth)) -> AuthContext:
        if ctx.role not in allowed:
            raise Forbidden("Forbidden - Insufficient permissions")
        return ctx

    return _check


require_super_admin = require_role(UserRole.super_admin)
require_admin_or_super_admin = require_role(UserRole.admin, UserRole.super_admin)


def check_school_access(ctx: AuthContext, school_id: Optional[str]) -> None:
    """
    Super admins reach every school; everyone else only their own.

    Raises:
        BadRequest: no school id was supplied.
        Forbidden: the school is not the caller's.
    """
    if ctx.is_super_admin:
        return
    if not school_id:
        raise BadRequest("School ID is required")
    if ctx.school_id != school_id:
        raise Forbidden("Forbidden - Access denied to this school's data")


def ensure_school_exists(db: Session, ctx: AuthContext, school_id: Optional[str]) -> None:
    """Super admins skip the tenant match, so their school id is resolved here."""
    if ctx.is_super_admin and school_id:
        get_school(db, school_id)


def require_school_context(
    request: Request,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
) -> AuthContext:
    """Tenant check against the `school_id` path parameter."""
    school_id = request.path_params.get("school_id")
    check_school_access(ctx, school_id)
    ensure_school_exists(db, ctx, school_id)
    return ctx


def require_school_admin(
    request: Request,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_admin_or_super_admin),
) -> AuthContext:
    """Admin role plus tenant check, in that order. An unknown school is a 404."""
    school_id = request.path_params.get("school_id")
    check_school_access(ctx, school_id)
    ensure_school_exists(db, ctx, school_id)
    return ctx


def require_student_school(ctx: AuthContext = Depends(require_auth)) -> AuthContext:
    """Self-service routes need a caller that belongs to a school."""
    if not ctx.school_id:
        raise BadRequest("School ID is required")
    return ctx
