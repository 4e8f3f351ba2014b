from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.router.api.logics.school_logic import (
    create_school,
    create_school_admin,
    get_all_schools,
    get_school,
    update_school,
)
from app.router.dependencies import AuthContext, require_school_context, require_super_admin
from app.schema.school_schema import SchoolCreate, SchoolOut, SchoolUpdate
from app.schema.user_schema import UserCreate, UserOut

router = APIRouter()


@router.get("", response_model=List[SchoolOut], status_code=status.HTTP_200_OK)
def list_schools(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_super_admin),
):
    return get_all_schools(db)


@router.post("", response_model=SchoolOut, status_code=status.HTTP_201_CREATED)
def add_school(
    request: SchoolCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_super_admin),
):
    return create_school(db, request)


@router.get("/{school_id}", response_model=SchoolOut, status_code=status.HTTP_200_OK)
def read_school(
    school_id: str,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_context),
):
    return get_school(db, school_id)


@router.patch("/{school_id}", response_model=SchoolOut, status_code=status.HTTP_200_OK)
def edit_school(
    school_id: str,
    request: SchoolUpdate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_super_admin),
):
    return update_school(db, school_id, request)


@router.post("/{school_id}/admins", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def add_school_admin(
    school_id: str,
    request: UserCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_super_admin),
):
    """Super admin creates an admin account for an existing school."""
    return create_school_admin(db, school_id, request)
