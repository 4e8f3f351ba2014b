from datetime import datetime
from typing import List, Optional, Dict, Any

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.database import transaction
from app.exceptions import Conflict, NotFound
from app.log import get_logger
from app.model.achievements import Achievement
from app.model.certifications import Certification
from app.model.challenge_completions import ChallengeCompletion
from app.model.challenges import Challenge
from app.model.enums import CertificationStatus
from app.model.user_achievements import UserAchievement
from app.model.user_certifications import UserCertification
from app.model.users import User
from app.router.api.logics.user_logic import get_user, increment_user_points
from app.router.dependencies import AuthContext
from app.schema.gamification_schema import (
    AchievementCreate,
    CertificationCreate,
    ChallengeCreate,
    ChallengeUpdate,
    ChallengeWithProgress,
    RankingEntry,
)

log = get_logger(__name__)


##################
### Challenges ###
##################

def get_challenges(db: Session, active_only: bool = True) -> List[Challenge]:
    query = db.query(Challenge)
    if active_only:
        query = query.filter(Challenge.is_active.is_(True))
    return query.order_by(Challenge.title, Challenge.id).all()


def get_challenge(db: Session, challenge_id: str) -> Challenge:
    challenge = db.query(Challenge).filter(Challenge.id == challenge_id).first()
    if not challenge:
        raise NotFound("Challenge not found")
    return challenge


def create_challenge(db: Session, request: ChallengeCreate) -> Challenge:
    challenge = Challenge(participants=0, **request.model_dump())
    db.add(challenge)
    db.commit()
    db.refresh(challenge)
    log.info("Created challenge %s (%s)", challenge.title, challenge.id)
    return challenge


def update_challenge(db: Session, challenge_id: str, request: ChallengeUpdate) -> Challenge:
    challenge = get_challenge(db, challenge_id)
    for key, value in request.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(challenge, key, value)
    db.commit()
    db.refresh(challenge)
    return challenge


def get_user_challenge_completions(db: Session, user_id: str, school_id: str) -> List[ChallengeCompletion]:
    return db.query(ChallengeCompletion).filter(
        ChallengeCompletion.user_id == user_id,
        ChallengeCompletion.school_id == school_id,
    ).order_by(ChallengeCompletion.completed_at.desc()).all()


def _completed_ids(db: Session, user_id: str, school_id: str) -> set:
    rows = db.query(ChallengeCompletion.challenge_id).filter(
        ChallengeCompletion.user_id == user_id,
        ChallengeCompletion.school_id == school_id,
    ).all()
    return {row.challenge_id for row in rows}


def is_challenge_completed(db: Session, user_id: str, challenge_id: str, school_id: str) -> bool:
    return db.query(ChallengeCompletion.id).filter(
        ChallengeCompletion.user_id == user_id,
        ChallengeCompletion.challenge_id == challenge_id,
        ChallengeCompletion.school_id == school_id,
    ).first() is not None


def _with_progress(challenge: Challenge, completed: bool) -> ChallengeWithProgress:
    out = ChallengeWithProgress.model_validate(challenge)
    out.completed = completed
    out.progress = 100 if completed else 0
    return out


def get_challenges_with_progress(db: Session, user_id: str, school_id: str) -> List[ChallengeWithProgress]:
    """Every active challenge, flagged with whether the user has completed it."""
    done = _completed_ids(db, user_id, school_id)
    return [_with_progress(c, c.id in done) for c in get_challenges(db)]


def get_active_challenges_for_user(db: Session, user_id: str, school_id: str) -> List[ChallengeWithProgress]:
    """
    Active challenges the user HAS completed, each with completed=True and
    progress=100. The complement of `get_recommended_challenges`.
    """
    done = _completed_ids(db, user_id, school_id)
    return [_with_progress(c, True) for c in get_challenges(db) if c.id in done]


def get_recommended_challenges(
    db: Session,
    user_id: str,
    school_id: str,
    limit: Optional[int] = None,
) -> List[Challenge]:
    """Active challenges the user has not completed yet, at most `limit` of them."""
    if limit is None:
        limit = settings.RECOMMENDED_CHALLENGES_LIMIT
    done = _completed_ids(db, user_id, school_id)
    return [c for c in get_challenges(db) if c.id not in done][:limit]


def complete_challenge(db: Session, ctx: AuthContext, challenge_id: str) -> Dict[str, Any]:
    """
    Records a challenge completion and awards its points.

    The completion insert, the points increment and the participants
    increment commit together or not at all.

    Args:
        db (Session): Database session
        ctx (AuthContext): the completing user
        challenge_id (str): challenge being completed

    Raises:
        NotFound: unknown or inactive challenge
        Conflict: the user already completed it

    Returns:
        Dict[str, Any]: the completion and the user's new point total
    """
    challenge = get_challenge(db, challenge_id)
    if not challenge.is_active:
        raise NotFound("Challenge not found")
    if is_challenge_completed(db, ctx.user_id, challenge_id, ctx.school_id):
        raise Conflict("Challenge already completed")

    completion = ChallengeCompletion(
        school_id=ctx.school_id,
        user_id=ctx.user_id,
        challenge_id=challenge_id,
        completed_at=datetime.now(),
        points_earned=challenge.points,
    )
    try:
        with transaction(db):
            db.add(completion)
            db.flush()
            increment_user_points(db, ctx.user_id, challenge.points)
            db.query(Challenge).filter(Challenge.id == challenge_id).update(
                {Challenge.participants: func.coalesce(Challenge.participants, 0) + 1},
                synchronize_session="fetch",
            )
    except IntegrityError as e:
        raise Conflict("Challenge already completed") from e

    user = get_user(db, ctx.user_id)
    db.refresh(user)
    db.refresh(completion)
    log.info(
        "User %s completed challenge %s for %s points (total %s)",
        ctx.user_id, challenge_id, challenge.points, user.points,
    )
    return {"completion": completion, "total_points": user.points}


################
### Rankings ###
################

def _display_name(user: User) -> str:
    full = " ".join(part for part in (user.first_name, user.last_name) if part)
    return full or user.username


def get_rankings(
    db: Session,
    school_id: str,
    limit: Optional[int] = None,
    current_user_id: Optional[str] = None,
) -> List[RankingEntry]:
    """
    Leaderboard of one school.

    Users are ordered by points descending, ties by username then id.
    Ranks are 1-based positions within the returned page only: a user
    outside the first `limit` rows simply does not appear.
    """
    if limit is None:
        limit = settings.RANKINGS_LIMIT
    users = db.query(User).filter(User.school_id == school_id).order_by(
        User.points.desc(),
        User.username.asc(),
        User.id.asc(),
    ).limit(limit).all()

    return [
        RankingEntry(
            rank=index + 1,
            id=user.id,
            username=user.username,
            name=_display_name(user),
            points=user.points,
            streak=user.streak,
            selected_avatar=user.selected_avatar,
            is_current_user=user.id == current_user_id,
        )
        for index, user in enumerate(users)
    ]


####################
### Achievements ###
####################

def get_achievements(db: Session) -> List[Achievement]:
    return db.query(Achievement).order_by(Achievement.name, Achievement.id).all()


def get_achievement(db: Session, achievement_id: str) -> Achievement:
    achievement = db.query(Achievement).filter(Achievement.id == achievement_id).first()
    if not achievement:
        raise NotFound("Achievement not found")
    return achievement


def create_achievement(db: Session, request: AchievementCreate) -> Achievement:
    achievement = Achievement(**request.model_dump())
    db.add(achievement)
    db.commit()
    db.refresh(achievement)
    return achievement


def award_achievement(db: Session, user_id: str, school_id: str, achievement_id: str) -> UserAchievement:
    """
    Awards an achievement to a user of `school_id`.

    Raises:
        NotFound: unknown achievement, or the user is not in this school
        Conflict: the user already holds it
    """
    get_achievement(db, achievement_id)
    user = db.query(User).filter(User.id == user_id, User.school_id == school_id).first()
    if not user:
        raise NotFound("User not found")

    awarded = UserAchievement(
        school_id=school_id,
        user_id=user_id,
        achievement_id=achievement_id,
        earned_at=datetime.now(),
    )
    db.add(awarded)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise Conflict("Achievement already awarded") from e
    db.refresh(awarded)
    log.info("Awarded achievement %s to user %s", achievement_id, user_id)
    return awarded


def get_user_achievements(db: Session, user_id: str, school_id: str) -> List[UserAchievement]:
    return db.query(UserAchievement).filter(
        UserAchievement.user_id == user_id,
        UserAchievement.school_id == school_id,
    ).order_by(UserAchievement.earned_at.desc()).all()


######################
### Certifications ###
######################

def get_certifications(db: Session) -> List[Certification]:
    return db.query(Certification).order_by(Certification.name, Certification.id).all()


def get_certification(db: Session, certification_id: str) -> Certification:
    certification = db.query(Certification).filter(Certification.id == certification_id).first()
    if not certification:
        raise NotFound("Certification not found")
    return certification


def create_certification(db: Session, request: CertificationCreate) -> Certification:
    certification = Certification(**request.model_dump())
    db.add(certification)
    db.commit()
    db.refresh(certification)
    return certification


def start_certification(db: Session, ctx: AuthContext, certification_id: str) -> UserCertification:
    get_certification(db, certification_id)
    started = UserCertification(
        school_id=ctx.school_id,
        user_id=ctx.user_id,
        certification_id=certification_id,
        status=CertificationStatus.in_progress,
        progress=0,
    )
    db.add(started)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise Conflict("Certification already started") from e
    db.refresh(started)
    return started


def get_user_certifications(db: Session, user_id: str, school_id: str) -> List[UserCertification]:
    return db.query(UserCertification).filter(
        UserCertification.user_id == user_id,
        UserCertification.school_id == school_id,
    ).all()


def update_certification_progress(
    db: Session,
    ctx: AuthContext,
    user_certification_id: str,
    progress: int,
) -> UserCertification:
    """
    Sets the progress percentage of one of the caller's certifications.
    Reaching 100 marks it earned and stamps `earned_at`.

    Raises:
        NotFound: no such certification for this user in this school
    """
    cert = db.query(UserCertification).filter(
        UserCertification.id == user_certification_id,
        UserCertification.school_id == ctx.school_id,
        UserCertification.user_id == ctx.user_id,
    ).first()
    if not cert:
        raise NotFound("User certification not found")

    cert.progress = min(progress, 100)
    if progress >= 100:
        cert.status = CertificationStatus.earned
        cert.earned_at = cert.earned_at or datetime.now()
    elif progress > 0:
        cert.status = CertificationStatus.in_progress
    db.commit()
    db.refresh(cert)
    return cert
