from typing import Optional, Dict, Any

from sqlalchemy.orm import Session

from app.exceptions import Unauthorized
from app.log import get_logger
from app.model.sessions import UserSession
from app.router.auth_util import verify_password, create_session, revoke_session
from app.router.api.logics.user_logic import get_user_by_username
from app.schema.auth_schema import LoginRequest
from app.schema.user_schema import UserOut

log = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."


def login_logic(
    db: Session,
    request: LoginRequest,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> Dict[str, Any]:
    """Login logic shared by every role.

    Args:
        db (Session): Database session
        request (LoginRequest): username and password
        ip_address (str, optional): client address stored on the session
        user_agent (str, optional): client user agent stored on the session

    Raises:
        Unauthorized: unknown user, wrong password or deactivated account,
        all with the same message

    Returns:
        Dict[str, Any]: token, token type, expiry and the user
    """
    user = get_user_by_username(db, request.username)

    if not user or not verify_password(request.password, user.password_hash):
        log.info("Failed login for username %s", request.username)
        raise Unauthorized(INVALID_CREDENTIALS)
    if not user.is_active:
        log.info("Login refused for deactivated user %s", user.id)
        raise Unauthorized(INVALID_CREDENTIALS)

    session = create_session(db, user.id, ip_address=ip_address, user_agent=user_agent)
    log.info("User %s logged in (session %s)", user.id, session.id)

    return {
        "access_token": session.token,
        "token_type": "bearer",
        "expires_at": session.expires_at,
        "user": UserOut.model_validate(user),
    }


def logout_logic(db: Session, token: Optional[str]) -> None:
    """Revokes the session behind `token`, if there is one."""
    if not token:
        return
    session = db.query(UserSession).filter(UserSession.token == token).first()
    if session and session.revoked_at is None:
        revoke_session(db, session.id)
