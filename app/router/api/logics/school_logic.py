from typing import List

from sqlalchemy.orm import Session

from app.exceptions import NotFound
from app.log import get_logger
from app.model.enums import UserRole
from app.model.schools import School
from app.model.users import User
from app.router.api.logics.user_logic import create_user
from app.schema.school_schema import SchoolCreate, SchoolUpdate
from app.schema.user_schema import UserCreate

log = get_logger(__name__)


def create_school(db: Session, request: SchoolCreate) -> School:
    school = School(**request.model_dump())
    db.add(school)
    db.commit()
    db.refresh(school)
    log.info("Created school %s (%s)", school.name, school.id)
    return school


def get_school(db: Session, school_id: str) -> School:
    school = db.query(School).filter(School.id == school_id).first()
    if not school:
        raise NotFound("School not found")
    return school


def get_all_schools(db: Session) -> List[School]:
    return db.query(School).order_by(School.name).all()


def update_school(db: Session, school_id: str, request: SchoolUpdate) -> School:
    school = get_school(db, school_id)
    for key, value in request.model_dump(exclude_unset=True).items():
        setattr(school, key, value)
    db.commit()
    db.refresh(school)
    return school


def create_school_admin(db: Session, school_id: str, request: UserCreate) -> User:
    """Creates an admin account inside an existing school."""
    get_school(db, school_id)
    return create_user(db, request, role=UserRole.admin, school_id=school_id)
