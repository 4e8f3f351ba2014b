from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.model.enums import Category, ContentType, IssueType
from app.router.api.logics import gamification_logic
from app.router.api.logics.resource_logic import ResourceFilters, get_resources, record_resource_view
from app.router.api.logics.ticket_logic import get_tickets_by_user
from app.router.api.logics.user_logic import update_profile
from app.router.api.logics.work_log_logic import (
    create_work_log,
    delete_work_log,
    get_work_logs_by_user,
    update_work_log,
)
from app.router.dependencies import AuthContext, CurrentUser, get_current_user, require_student_school
from app.schema.gamification_schema import (
    ChallengeOut,
    ChallengeWithProgress,
    CertificationProgress,
    CompleteChallengeOut,
    RankingEntry,
    ResourceOut,
    StartCertification,
    UserAchievementOut,
    UserCertificationOut,
    WorkLogCreate,
    WorkLogOut,
    WorkLogUpdate,
)
from app.schema.ticket_schema import TicketOut
from app.schema.user_schema import ProfileUpdate, UserOut

router = APIRouter()


##################
### Challenges ###
##################

@router.get("/challenges", response_model=List[ChallengeWithProgress], status_code=status.HTTP_200_OK)
def read_challenges(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_student_school),
):
    return gamification_logic.get_challenges_with_progress(db, ctx.user_id, ctx.school_id)


@router.get("/challenges/active", response_model=List[ChallengeWithProgress], status_code=status.HTTP_200_OK)
def read_active_challenges(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_student_school),
):
    """Challenges the caller has already completed."""
    return gamification_logic.get_active_challenges_for_user(db, ctx.user_id, ctx.school_id)


@router.get("/challenges/recommended", response_model=List[ChallengeOut], status_code=status.HTTP_200_OK)
def read_recommended_challenges(
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_student_school),
):
    """Challenges the caller has not completed yet."""
    return gamification_logic.get_recommended_challenges(db, ctx.user_id, ctx.school_id, limit)


@router.post(
    "/challenges/{challenge_id}/complete",
    response_model=CompleteChallengeOut,
    status_code=status.HTTP_201_CREATED,
)
def complete_challenge(
    challenge_id: str,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_student_school),
):
    """Marks a challenge completed and awards its points.

    Raises:
        NotFound: unknown or inactive challenge
        Conflict: already completed
    """
    return gamification_logic.complete_challenge(db, ctx, challenge_id)


@router.get("/rankings", response_model=List[RankingEntry], status_code=status.HTTP_200_OK)
def read_rankings(
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_student_school),
):
    return gamification_logic.get_rankings(db, ctx.school_id, limit, current_user_id=ctx.user_id)


#################
### Resources ###
#################

@router.get("/resources", response_model=List[ResourceOut], status_code=status.HTTP_200_OK)
def read_resources(
    category: Optional[Category] = Query(None),
    content_type: Optional[ContentType] = Query(None, alias="contentType"),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_student_school),
):
    return get_resources(db, ResourceFilters(category=category, content_type=content_type, search=search))


@router.post("/resources/{resource_id}/view", response_model=ResourceOut, status_code=status.HTTP_200_OK)
def view_resource(
    resource_id: str,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_student_school),
):
    return record_resource_view(db, resource_id)


###############
### Repairs ###
###############

@router.get("/repairs", response_model=List[TicketOut], status_code=status.HTTP_200_OK)
def read_my_repairs(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_student_school),
):
    """Repair tickets assigned to the caller."""
    return get_tickets_by_user(db, ctx.user_id, ctx.school_id, issue_type=IssueType.repair)


#################
### Work logs ###
#################

@router.get("/work-logs", response_model=List[WorkLogOut], status_code=status.HTTP_200_OK)
def read_my_work_logs(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_student_school),
):
    return get_work_logs_by_user(db, ctx.user_id, ctx.school_id)


@router.post("/work-logs", response_model=WorkLogOut, status_code=status.HTTP_201_CREATED)
def add_work_log(
    request: WorkLogCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_student_school),
):
    return create_work_log(db, ctx, request)


@router.patch("/work-logs/{work_log_id}", response_model=WorkLogOut, status_code=status.HTTP_200_OK)
def edit_work_log(
    work_log_id: str,
    request: WorkLogUpdate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_student_school),
):
    return update_work_log(db, ctx, work_log_id, request)


@router.delete("/work-logs/{work_log_id}", response_model=dict, status_code=status.HTTP_200_OK)
def remove_work_log(
    work_log_id: str,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_student_school),
):
    delete_work_log(db, ctx, work_log_id)
    return {"message": "Work log deleted successfully"}


####################################
### Achievements & certifications ###
####################################

@router.get("/achievements", response_model=List[UserAchievementOut], status_code=status.HTTP_200_OK)
def read_my_achievements(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_student_school),
):
    return gamification_logic.get_user_achievements(db, ctx.user_id, ctx.school_id)


@router.get("/certifications", response_model=List[UserCertificationOut], status_code=status.HTTP_200_OK)
def read_my_certifications(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_student_school),
):
    return gamification_logic.get_user_certifications(db, ctx.user_id, ctx.school_id)


@router.post("/certifications", response_model=UserCertificationOut, status_code=status.HTTP_201_CREATED)
def start_certification(
    request: StartCertification,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_student_school),
):
    return gamification_logic.start_certification(db, ctx, request.certification_id)


@router.patch(
    "/certifications/{user_certification_id}",
    response_model=UserCertificationOut,
    status_code=status.HTTP_200_OK,
)
def update_certification(
    user_certification_id: str,
    request: CertificationProgress,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_student_school),
):
    """Reaching 100% marks the certification earned."""
    return gamification_logic.update_certification_progress(db, ctx, user_certification_id, request.progress)


###############
### Profile ###
###############

@router.patch("/profile", response_model=UserOut, status_code=status.HTTP_200_OK)
def edit_profile(
    request: ProfileUpdate,
    db: Session = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
    ctx: AuthContext = Depends(require_student_school),
):
    return update_profile(db, current.user, request)
