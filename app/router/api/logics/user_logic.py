from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import BadRequest, Conflict, NotFound, ValidationError
from app.log import get_logger
from app.model.enums import UserRole
from app.model.schools import School
from app.model.users import User
from app.router.auth_util import get_password_hash, revoke_all_user_sessions
from app.schema.user_schema import UserCreate, ProfileUpdate

log = get_logger(__name__)


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def get_users_by_school(db: Session, school_id: str, role: Optional[UserRole] = None) -> List[User]:
    query = db.query(User).filter(User.school_id == school_id)
    if role is not None:
        query = query.filter(User.role == role)
    return query.order_by(User.last_name, User.first_name, User.username).all()


def ensure_identity_available(
    db: Session,
    username: Optional[str],
    email: Optional[str],
    exclude_user_id: Optional[str] = None,
) -> None:
    """
    Raises Conflict when the username or email already belongs to
    another account.
    """
    conditions = []
    if username:
        conditions.append(User.username == username)
    if email:
        conditions.append(User.email == email)
    if not conditions:
        return
    query = db.query(User).filter(or_(*conditions))
    if exclude_user_id:
        query = query.filter(User.id != exclude_user_id)
    existing = query.first()
    if not existing:
        return
    if username and existing.username == username:
        raise Conflict("Username has already been taken")
    raise Conflict("Email has already been registered")


def create_user(
    db: Session,
    request: UserCreate,
    role: UserRole,
    school_id: Optional[str],
) -> User:
    """
    Creates an account with a hashed password.

    Args:
        db (Session): Database session
        request (UserCreate): username, email, password and optional names
        role (UserRole): role of the new account
        school_id (str, optional): tenant of the account, None only for super admins

    Raises:
        BadRequest: non super admin without a school
        NotFound: the school does not exist
        Conflict: username or email already in use

    Returns:
        User: the stored user
    """
    if role != UserRole.super_admin and not school_id:
        raise BadRequest("School ID is required")
    if school_id and not db.query(School.id).filter(School.id == school_id).first():
        raise NotFound("School not found")
    ensure_identity_available(db, request.username, request.email)

    now = datetime.now()
    user = User(
        school_id=school_id,
        username=request.username,
        email=request.email,
        password_hash=get_password_hash(request.password),
        first_name=request.first_name,
        last_name=request.last_name,
        role=role,
        points=0,
        streak=0,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # a concurrent insert took the identity; anything else is not a conflict
        ensure_identity_available(db, request.username, request.email)
        raise
    db.refresh(user)
    log.info("Created %s %s in school %s", role.value, user.username, school_id)
    return user


def update_user(db: Session, user: User, updates: dict) -> User:
    """Applies a partial update; deactivation also revokes every session."""
    if "username" in updates or "email" in updates:
        ensure_identity_available(db, updates.get("username"), updates.get("email"), exclude_user_id=user.id)

    for key, value in updates.items():
        setattr(user, key, value)
    user.updated_at = datetime.now()
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        ensure_identity_available(db, updates.get("username"), updates.get("email"), exclude_user_id=user.id)
        raise
    db.refresh(user)

    if updates.get("is_active") is False:
        revoke_all_user_sessions(db, user.id)
    return user


def update_profile(db: Session, user: User, request: ProfileUpdate) -> User:
    return update_user(db, user, request.model_dump(exclude_unset=True, exclude_none=True))


def set_password(db: Session, user: User, new_password: str) -> None:
    """Stores a new password hash and logs the user out everywhere."""
    user.password_hash = get_password_hash(new_password)
    user.password_reset_token = None
    user.password_reset_expires = None
    user.updated_at = datetime.now()
    db.commit()
    revoke_all_user_sessions(db, user.id)


def increment_user_points(db: Session, user_id: str, delta: int) -> int:
    """
    Adds `delta` to a user's points as a single server-side
    `points = points + delta` statement. Does not commit, so it can
    share a transaction with other writes.

    Raises:
        NotFound: no such user

    Returns:
        int: number of rows touched
    """
    count = db.query(User).filter(User.id == user_id).update(
        {User.points: User.points + delta, User.updated_at: datetime.now()},
        synchronize_session="fetch",
    )
    if not count:
        raise NotFound("User not found")
    return count


def update_user_points(db: Session, user_id: str, delta: int) -> User:
    """
    Atomically adjusts a user's points and commits.

    Raises:
        NotFound: no such user
        ValidationError: the result would drop below zero

    Returns:
        User: the user with the refreshed balance
    """
    try:
        increment_user_points(db, user_id, delta)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ValidationError("Points cannot go below zero") from e
    user = get_user(db, user_id)
    db.refresh(user)
    return user
