from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.router.api.logics import gamification_logic, resource_logic
from app.router.dependencies import AuthContext, require_auth, require_super_admin
from app.schema.gamification_schema import (
    AchievementCreate,
    AchievementOut,
    CertificationCreate,
    CertificationOut,
    ChallengeCreate,
    ChallengeOut,
    ChallengeUpdate,
    ResourceCreate,
    ResourceOut,
    ResourceUpdate,
)

router = APIRouter()


##################
### Challenges ###
##################

@router.get("/challenges", response_model=List[ChallengeOut], status_code=status.HTTP_200_OK)
def read_challenges(
    active_only: bool = Query(True, alias="activeOnly"),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
):
    return gamification_logic.get_challenges(db, active_only=active_only)


@router.post("/challenges", response_model=ChallengeOut, status_code=status.HTTP_201_CREATED)
def add_challenge(
    request: ChallengeCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_super_admin),
):
    return gamification_logic.create_challenge(db, request)


@router.patch("/challenges/{challenge_id}", response_model=ChallengeOut, status_code=status.HTTP_200_OK)
def edit_challenge(
    challenge_id: str,
    request: ChallengeUpdate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_super_admin),
):
    return gamification_logic.update_challenge(db, challenge_id, request)


#################
### Resources ###
#################

@router.get("/resources", response_model=List[ResourceOut], status_code=status.HTTP_200_OK)
def read_resources(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
):
    return resource_logic.get_resources(db)


@router.post("/resources", response_model=ResourceOut, status_code=status.HTTP_201_CREATED)
def add_resource(
    request: ResourceCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_super_admin),
):
    return resource_logic.create_resource(db, request)


@router.patch("/resources/{resource_id}", response_model=ResourceOut, status_code=status.HTTP_200_OK)
def edit_resource(
    resource_id: str,
    request: ResourceUpdate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_super_admin),
):
    return resource_logic.update_resource(db, resource_id, request)


####################
### Achievements ###
####################

@router.get("/achievements", response_model=List[AchievementOut], status_code=status.HTTP_200_OK)
def read_achievements(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
):
    return gamification_logic.get_achievements(db)


@router.post("/achievements", response_model=AchievementOut, status_code=status.HTTP_201_CREATED)
def add_achievement(
    request: AchievementCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_super_admin),
):
    return gamification_logic.create_achievement(db, request)


######################
### Certifications ###
######################

@router.get("/certifications", response_model=List[CertificationOut], status_code=status.HTTP_200_OK)
def read_certifications(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
):
    return gamification_logic.get_certifications(db)


@router.post("/certifications", response_model=CertificationOut, status_code=status.HTTP_201_CREATED)
def add_certification(
    request: CertificationCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_super_admin),
):
    return gamification_logic.create_certification(db, request)
