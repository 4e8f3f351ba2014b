import secrets
from datetime import datetime, timedelta
from typing import Optional, Tuple

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import Unauthorized
from app.log import get_logger
from app.model.sessions import UserSession
from app.model.users import User

log = get_logger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

# every validation failure answers with this, whatever the cause
INVALID_SESSION_DETAIL = "Could not validate credentials"


def get_password_hash(password: str) -> str:
    """
    Generate the salted bcrypt hash of a password.

    Parameters:
        password (str): The password to be hashed.

    Returns:
        str: The hash value of the password.
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify if a plain password matches a hashed password.

    Parameters:
        plain_password (str): The plain password to be verified.
        hashed_password (str): The hashed password to compare with.

    Returns:
        bool: True if the plain password matches the hashed password, False otherwise.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # malformed or unknown hash format
        return False


def generate_session_token() -> str:
    """32 random bytes, URL-safe base64."""
    return secrets.token_urlsafe(32)


def create_session(
    db: Session,
    user_id: str,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> UserSession:
    """
    Creates a session row for a user and returns it.

    The raw token is stored as-is: it is a high-entropy bearer secret,
    not a password.

    Parameters:
        db (Session): Database session.
        user_id (str): The user the session belongs to.
        ip_address (str, optional): Client address, for auditing.
        user_agent (str, optional): Client user agent, for auditing.

    Returns:
        UserSession: The persisted session, `token` holds the bearer secret.
    """
    now = datetime.now()
    session = UserSession(
        user_id=user_id,
        token=generate_session_token(),
        ip_address=ip_address,
        user_agent=user_agent,
        created_at=now,
        expires_at=now + timedelta(hours=settings.SESSION_EXPIRE_HOURS),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def validate_session(db: Session, token: Optional[str]) -> Tuple[User, UserSession]:
    """
    Resolves a bearer token to its user.

    Raises:
        Unauthorized: token missing, unknown, expired, revoked, or the user
        is missing or inactive. The detail is the same in every case.

    Returns:
        Tuple[User, UserSession]: The authenticated user and their session.
    """
    if not token:
        log.debug("Session rejected: no token")
        raise Unauthorized(INVALID_SESSION_DETAIL)

    session = db.query(UserSession).filter(UserSession.token == token).first()
    if not session:
        log.debug("Session rejected: unknown token")
        raise Unauthorized(INVALID_SESSION_DETAIL)
    if datetime.now() >= session.expires_at:
        log.debug("Session %s rejected: expired", session.id)
        raise Unauthorized(INVALID_SESSION_DETAIL)
    if session.revoked_at is not None:
        log.debug("Session %s rejected: revoked", session.id)
        raise Unauthorized(INVALID_SESSION_DETAIL)

    user = db.query(User).filter(User.id == session.user_id).first()
    if not user or not user.is_active:
        log.debug("Session %s rejected: user missing or inactive", session.id)
        raise Unauthorized(INVALID_SESSION_DETAIL)

    return user, session


def revoke_session(db: Session, session_id: str) -> None:
    """Marks one session revoked. Revoking twice keeps the first timestamp."""
    db.query(UserSession).filter(
        UserSession.id == session_id,
        UserSession.revoked_at.is_(None),
    ).update({UserSession.revoked_at: datetime.now()}, synchronize_session="fetch")
    db.commit()
    log.info("Revoked session %s", session_id)


def revoke_all_user_sessions(db: Session, user_id: str) -> int:
    """
    Revokes every live session of a user.

    Returns:
        int: How many sessions were revoked by this call.
    """
    count = db.query(UserSession).filter(
        UserSession.user_id == user_id,
        UserSession.revoked_at.is_(None),
    ).update({UserSession.revoked_at: datetime.now()}, synchronize_session="fetch")
    db.commit()
    log.info("Revoked %s session(s) for user %s", count, user_id)
    return count


def cleanup_expired_sessions(db: Session) -> int:
    """Deletes sessions past their expiry. Returns the number removed."""
    count = db.query(UserSession).filter(
        UserSession.expires_at < datetime.now()
    ).delete(synchronize_session=False)
    db.commit()
    log.info("Removed %s expired session(s)", count)
    return count
