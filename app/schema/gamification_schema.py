from typing import Optional, List
from datetime import datetime, date

from pydantic import Field

from app.model.enums import (
    AchievementIcon,
    AvatarType,
    Category,
    CertificationStatus,
    ContentType,
    Difficulty,
)
from app.schema.base_schema import CamelModel
from app.schema.ticket_schema import TicketOut
from app.schema.user_schema import UserOut, StudentSummary


#################
### Challenge ###
#################
class ChallengeCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: str
    difficulty: Difficulty
    points: int = Field(ge=0)
    category: Category
    days_to_complete: Optional[int] = Field(default=None, ge=0)
    is_active: bool = True


class ChallengeUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    points: Optional[int] = Field(default=None, ge=0)
    category: Optional[Category] = None
    days_to_complete: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class ChallengeOut(CamelModel):
    id: str
    title: str
    description: str
    difficulty: Difficulty
    points: int
    category: Category
    days_to_complete: Optional[int] = None
    participants: Optional[int] = 0
    is_active: bool


class ChallengeWithProgress(ChallengeOut):
    completed: bool = False
    progress: int = 0


class ChallengeCompletionOut(CamelModel):
    id: str
    school_id: str
    user_id: str
    challenge_id: str
    completed_at: datetime
    points_earned: int


class CompletionDetail(CamelModel):
    id: str
    challenge_id: str
    challenge_title: Optional[str] = None
    completed_at: datetime
    points_earned: int


class CompleteChallengeOut(CamelModel):
    completion: ChallengeCompletionOut
    total_points: int


################
### Rankings ###
################
class RankingEntry(CamelModel):
    rank: int
    id: str
    username: str
    name: str
    points: int
    streak: int
    selected_avatar: Optional[AvatarType] = None
    is_current_user: bool = False


################
### Resource ###
################
class ResourceCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    category: Category
    content_type: ContentType
    url: Optional[str] = Field(default=None, max_length=500)
    description: Optional[str] = None
    thumbnail_url: Optional[str] = Field(default=None, max_length=500)
    duration: Optional[str] = Field(default=None, max_length=50)


class ResourceUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[Category] = None
    content_type: Optional[ContentType] = None
    url: Optional[str] = Field(default=None, max_length=500)
    description: Optional[str] = None
    thumbnail_url: Optional[str] = Field(default=None, max_length=500)
    duration: Optional[str] = Field(default=None, max_length=50)


class ResourceOut(CamelModel):
    id: str
    title: str
    category: Category
    content_type: ContentType
    url: Optional[str] = None
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration: Optional[str] = None
    views: Optional[int] = 0


################
### Work log ###
################
class WorkLogCreate(CamelModel):
    log_date: date
    hours_worked: Optional[int] = Field(default=None, ge=0)  # minutes
    category: Optional[str] = Field(default=None, max_length=100)
    description: str = Field(min_length=1)


class WorkLogUpdate(CamelModel):
    log_date: Optional[date] = None
    hours_worked: Optional[int] = Field(default=None, ge=0)
    category: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, min_length=1)


class WorkLogOut(CamelModel):
    id: str
    school_id: str
    user_id: str
    log_date: date
    hours_worked: Optional[int] = None
    category: Optional[str] = None
    description: str


###################
### Achievement ###
###################
class AchievementCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    icon: AchievementIcon
    points_required: Optional[int] = Field(default=None, ge=0)
    category: Optional[str] = Field(default=None, max_length=100)


class AchievementOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    icon: AchievementIcon
    points_required: Optional[int] = None
    category: Optional[str] = None


class AwardAchievement(CamelModel):
    achievement_id: str


class UserAchievementOut(CamelModel):
    id: str
    school_id: str
    user_id: str
    achievement_id: str
    earned_at: datetime
    achievement: Optional[AchievementOut] = None


#####################
### Certification ###
#####################
class CertificationCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    total_steps: int = Field(default=1, ge=1)


class CertificationOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    total_steps: int


class StartCertification(CamelModel):
    certification_id: str


class CertificationProgress(CamelModel):
    progress: int = Field(ge=0, le=100)


class UserCertificationOut(CamelModel):
    id: str
    school_id: str
    user_id: str
    certification_id: str
    status: CertificationStatus
    progress: int
    earned_at: Optional[datetime] = None
    certification: Optional[CertificationOut] = None


#######################
### Admin overviews ###
#######################
class LearningProgressOut(CamelModel):
    student: StudentSummary
    challenges_completed: int
    completions: List[CompletionDetail]


class TicketGroup(CamelModel):
    total: int
    completed: int
    tickets: List[TicketOut]


class CompletionGroup(CamelModel):
    total: int
    completions: List[CompletionDetail]


class WorkLogGroup(CamelModel):
    total: int
    logs: List[WorkLogOut]


class StudentDetailsOut(CamelModel):
    student: UserOut
    device_checks: TicketGroup
    repairs: TicketGroup
    learning_modules: CompletionGroup
    work_logs: WorkLogGroup
