from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.router.api.logics.student_logic import (
    award_student_achievement,
    create_student,
    get_learning_progress,
    get_student_details,
    get_students,
    reset_student_password,
    update_student,
)
from app.router.api.logics.work_log_logic import WorkLogFilters, get_work_logs
from app.router.dependencies import AuthContext, require_school_admin
from app.schema.gamification_schema import (
    AwardAchievement,
    LearningProgressOut,
    StudentDetailsOut,
    UserAchievementOut,
    WorkLogOut,
)
from app.schema.user_schema import PasswordReset, StudentUpdate, UserCreate, UserOut

router = APIRouter()


################
### Students ###
################

@router.get("/students", response_model=List[UserOut], status_code=status.HTTP_200_OK)
def read_students(
    school_id: str,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_admin),
):
    return get_students(db, school_id)


@router.post("/students", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def add_student(
    school_id: str,
    request: UserCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_admin),
):
    """Admin creates a student account in their school.

    Raises:
        Conflict: username or email already taken
    """
    return create_student(db, school_id, request)


@router.patch("/students/{student_id}", response_model=UserOut, status_code=status.HTTP_200_OK)
def edit_student(
    school_id: str,
    student_id: str,
    request: StudentUpdate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_admin),
):
    """Partial update; setting `isActive` to false also logs the student out everywhere."""
    return update_student(db, school_id, student_id, request)


@router.get("/students/{student_id}/details", response_model=StudentDetailsOut, status_code=status.HTTP_200_OK)
def read_student_details(
    school_id: str,
    student_id: str,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_admin),
):
    return get_student_details(db, school_id, student_id)


@router.post("/students/{student_id}/reset-password", response_model=dict, status_code=status.HTTP_200_OK)
def reset_password(
    school_id: str,
    student_id: str,
    request: PasswordReset,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_admin),
):
    reset_student_password(db, school_id, student_id, request.new_password)
    return {"message": "Password reset successfully"}


@router.post(
    "/students/{student_id}/achievements",
    response_model=UserAchievementOut,
    status_code=status.HTTP_201_CREATED,
)
def award_achievement(
    school_id: str,
    student_id: str,
    request: AwardAchievement,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_admin),
):
    return award_student_achievement(db, school_id, student_id, request.achievement_id)


#########################
### School overviews ###
#########################

@router.get("/learning-progress", response_model=List[LearningProgressOut], status_code=status.HTTP_200_OK)
def read_learning_progress(
    school_id: str,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_admin),
):
    return get_learning_progress(db, school_id)


@router.get("/work-logs", response_model=List[WorkLogOut], status_code=status.HTTP_200_OK)
def read_work_logs(
    school_id: str,
    user_id: Optional[str] = Query(None, alias="userId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_school_admin),
):
    filters = WorkLogFilters(user_id=user_id, start_date=start_date, end_date=end_date)
    return get_work_logs(db, school_id, filters)
