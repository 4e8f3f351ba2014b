from typing import List, Dict, Any

from sqlalchemy.orm import Session

from app.exceptions import NotFound
from app.log import get_logger
from app.model.challenge_completions import ChallengeCompletion
from app.model.challenges import Challenge
from app.model.enums import IssueType, TicketStatus, UserRole
from app.model.users import User
from app.router.api.logics.gamification_logic import award_achievement
from app.router.api.logics.ticket_logic import get_tickets_by_user
from app.router.api.logics.user_logic import create_user, get_users_by_school, set_password, update_user
from app.router.api.logics.work_log_logic import get_work_logs_by_user
from app.schema.gamification_schema import CompletionDetail
from app.schema.user_schema import StudentUpdate, UserCreate

log = get_logger(__name__)


def get_students(db: Session, school_id: str) -> List[User]:
    return get_users_by_school(db, school_id, role=UserRole.student)


def get_school_student(db: Session, school_id: str, student_id: str) -> User:
    """A student of `school_id`; any other user is reported as not found."""
    student = db.query(User).filter(
        User.id == student_id,
        User.school_id == school_id,
        User.role == UserRole.student,
    ).first()
    if not student:
        raise NotFound("Student not found")
    return student


def create_student(db: Session, school_id: str, request: UserCreate) -> User:
    return create_user(db, request, role=UserRole.student, school_id=school_id)


def update_student(db: Session, school_id: str, student_id: str, request: StudentUpdate) -> User:
    student = get_school_student(db, school_id, student_id)
    updates = request.model_dump(exclude_unset=True, exclude_none=True)
    return update_user(db, student, updates)


def reset_student_password(db: Session, school_id: str, student_id: str, new_password: str) -> None:
    student = get_school_student(db, school_id, student_id)
    set_password(db, student, new_password)
    log.info("Password reset for student %s in school %s", student_id, school_id)


def award_student_achievement(db: Session, school_id: str, student_id: str, achievement_id: str):
    get_school_student(db, school_id, student_id)
    return award_achievement(db, student_id, school_id, achievement_id)


def _completion_details(db: Session, user_id: str, school_id: str) -> List[CompletionDetail]:
    rows = db.query(ChallengeCompletion, Challenge.title).outerjoin(
        Challenge, Challenge.id == ChallengeCompletion.challenge_id,
    ).filter(
        ChallengeCompletion.user_id == user_id,
        ChallengeCompletion.school_id == school_id,
    ).order_by(ChallengeCompletion.completed_at.desc()).all()
    return [
        CompletionDetail(
            id=completion.id,
            challenge_id=completion.challenge_id,
            challenge_title=title,
            completed_at=completion.completed_at,
            points_earned=completion.points_earned,
        )
        for completion, title in rows
    ]


def _ticket_group(tickets) -> Dict[str, Any]:
    return {
        "total": len(tickets),
        "completed": sum(1 for t in tickets if t.status == TicketStatus.completed),
        "tickets": tickets,
    }


def get_student_details(db: Session, school_id: str, student_id: str) -> Dict[str, Any]:
    """
    Everything an admin sees on a student's page: the account, the device
    checks and repairs assigned to them, their completed learning modules
    and their work logs.

    Raises:
        NotFound: not a student of this school
    """
    student = get_school_student(db, school_id, student_id)
    checks = get_tickets_by_user(db, student_id, school_id, issue_type=IssueType.check)
    repairs = get_tickets_by_user(db, student_id, school_id, issue_type=IssueType.repair)
    completions = _completion_details(db, student_id, school_id)
    work_logs = get_work_logs_by_user(db, student_id, school_id)

    return {
        "student": student,
        "device_checks": _ticket_group(checks),
        "repairs": _ticket_group(repairs),
        "learning_modules": {"total": len(completions), "completions": completions},
        "work_logs": {"total": len(work_logs), "logs": work_logs},
    }


def get_learning_progress(db: Session, school_id: str) -> List[Dict[str, Any]]:
    """Completed challenges per student of the school."""
    progress = []
    for student in get_students(db, school_id):
        completions = _completion_details(db, student.id, school_id)
        progress.append({
            "student": student,
            "challenges_completed": len(completions),
            "completions": completions,
        })
    return progress
