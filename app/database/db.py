from typing import Generator
from contextlib import contextmanager
from sqlalchemy.orm import Session, sessionmaker
from app.database.session import SQLALCHEMY_DATABASE_URL, get_engine

from app.log import get_logger

log = get_logger(__name__)


ENGINE = get_engine(SQLALCHEMY_DATABASE_URL)
SessionLocal = sessionmaker(
    bind=ENGINE,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


def get_db() -> Generator:  # pragma: no cover
    """
    Returns a generator that yields a database session

    Yields:
        Session: A database session object.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_ctx_db() -> Generator[Session, None, None]:
    """
    Context manager that yields a database session for use in a
    'with' statement (scripts and maintenance jobs).

    Rolls back and re-raises on error so the caller sees the failure.

    Yields:
        Session: A database session.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        log.error("An error occurred while using the database session. Error: %s", e)
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Generator[Session, None, None]:
    """
    Unit of work around a sequence of writes: commits once at the end,
    rolls everything back if any step raises.

    Parameters:
        db (Session): The request-scoped session.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
