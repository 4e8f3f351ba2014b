import pytest

from app.exceptions import Conflict, NotFound, ValidationError
from app.model.enums import CertificationStatus, UserRole
from app.model.challenges import Challenge
from app.model.users import User
from app.router.api.logics import gamification_logic, resource_logic
from app.router.api.logics.user_logic import update_user_points
from app.router.dependencies import AuthContext
from app.schema.gamification_schema import (
    CertificationCreate,
    ChallengeCreate,
    ChallengeUpdate,
    ResourceCreate,
)
from conftest import auth_header, make_user


def _ctx(user):
    return AuthContext(user_id=user.id, role=user.role, school_id=user.school_id, session_id="s")


def _challenge(db, title, points=100, is_active=True):
    return gamification_logic.create_challenge(db, ChallengeCreate(
        title=title,
        description=f"{title} description",
        difficulty="beginner",
        points=points,
        category="hardware",
        days_to_complete=7,
        is_active=is_active,
    ))


##############
### Points ###
##############

def _interleave(session_factory, user_id, first, second):
    a = session_factory()
    b = session_factory()
    try:
        # caller A reads the balance before caller B writes; A must not overwrite B
        stale = a.query(User).filter(User.id == user_id).one()
        update_user_points(b, user_id, first)
        user = update_user_points(a, user_id, second)
        return stale.points, user.points
    finally:
        a.close()
        b.close()


@pytest.mark.parametrize("first, second", [(10, -3), (-3, 10)])
def test_points_increment_is_atomic(session_factory, db, student, first, second):
    update_user_points(db, student.id, 5)
    stale, final = _interleave(session_factory, student.id, first, second)
    assert stale == 5
    assert final == 12


def test_points_cannot_go_negative(db, student):
    update_user_points(db, student.id, 5)
    with pytest.raises(ValidationError):
        update_user_points(db, student.id, -6)
    db.refresh(student)
    assert student.points == 5


def test_points_for_unknown_user(db):
    with pytest.raises(NotFound):
        update_user_points(db, "missing", 1)


################
### Rankings ###
################

def test_rankings_order_and_rank_within_page(db, school, other_school):
    make_user(db, "harry", UserRole.student, school.id, points=300)
    make_user(db, "hermione", UserRole.student, school.id, points=500)
    make_user(db, "ron", UserRole.student, school.id, points=300)
    make_user(db, "neville", UserRole.student, school.id, points=50)
    make_user(db, "krum", UserRole.student, other_school.id, points=900)

    top = gamification_logic.get_rankings(db, school.id, limit=3)
    assert [(e.rank, e.username, e.points) for e in top] == [
        (1, "hermione", 500),
        (2, "harry", 300),
        (3, "ron", 300),
    ]

    page = gamification_logic.get_rankings(db, school.id, limit=10)
    assert [e.rank for e in page] == [1, 2, 3, 4]
    assert "krum" not in [e.username for e in page]


def test_rankings_mark_current_user(client, db, school, student, student_token):
    make_user(db, "draco", UserRole.student, school.id, points=40)
    r = client.get("/api/student/rankings?limit=5", headers=auth_header(student_token))
    assert r.status_code == 200
    entries = r.json()
    assert entries[0]["username"] == "draco"
    assert entries[0]["isCurrentUser"] is False
    me = next(e for e in entries if e["username"] == "jane.smith")
    assert me["isCurrentUser"] is True
    assert me["name"] == "Jane Smith"


##################
### Challenges ###
##################

def test_complete_challenge_awards_points_once(db, student):
    challenge = _challenge(db, "Screen Repair Basics", points=100)
    ctx = _ctx(student)

    result = gamification_logic.complete_challenge(db, ctx, challenge.id)
    assert result["total_points"] == 100
    assert result["completion"].points_earned == 100

    with pytest.raises(Conflict):
        gamification_logic.complete_challenge(db, ctx, challenge.id)

    db.refresh(student)
    db.refresh(challenge)
    assert student.points == 100
    assert challenge.participants == 1
    assert len(gamification_logic.get_user_challenge_completions(db, student.id, student.school_id)) == 1


def test_complete_inactive_or_unknown_challenge(db, student):
    retired = _challenge(db, "Retired", is_active=False)
    with pytest.raises(NotFound):
        gamification_logic.complete_challenge(db, _ctx(student), retired.id)
    with pytest.raises(NotFound):
        gamification_logic.complete_challenge(db, _ctx(student), "missing")


def test_completion_rolls_back_on_failure(db, student, monkeypatch):
    challenge = _challenge(db, "Network Troubleshooting", points=150)

    def _boom(*args, **kwargs):
        raise RuntimeError("points store down")

    monkeypatch.setattr(gamification_logic, "increment_user_points", _boom)
    with pytest.raises(RuntimeError):
        gamification_logic.complete_challenge(db, _ctx(student), challenge.id)

    assert not gamification_logic.is_challenge_completed(db, student.id, challenge.id, student.school_id)
    assert db.query(Challenge).filter(Challenge.id == challenge.id).one().participants == 0


def test_active_and_recommended_partition(db, student):
    done = _challenge(db, "A Done")
    todo_1 = _challenge(db, "B Todo")
    todo_2 = _challenge(db, "C Todo")
    _challenge(db, "D Inactive", is_active=False)
    gamification_logic.complete_challenge(db, _ctx(student), done.id)

    active = gamification_logic.get_active_challenges_for_user(db, student.id, student.school_id)
    assert [(c.id, c.completed, c.progress) for c in active] == [(done.id, True, 100)]

    recommended = gamification_logic.get_recommended_challenges(db, student.id, student.school_id)
    assert [c.id for c in recommended] == [todo_1.id, todo_2.id]
    assert len(gamification_logic.get_recommended_challenges(db, student.id, student.school_id, limit=1)) == 1

    listed = gamification_logic.get_challenges_with_progress(db, student.id, student.school_id)
    assert {c.title: c.progress for c in listed} == {"A Done": 100, "B Todo": 0, "C Todo": 0}


def test_update_challenge(db):
    challenge = _challenge(db, "Software Installation Expert", points=75)
    updated = gamification_logic.update_challenge(db, challenge.id, ChallengeUpdate(points=80, is_active=False))
    assert updated.points == 80
    assert gamification_logic.get_challenges(db) == []
    assert len(gamification_logic.get_challenges(db, active_only=False)) == 1


def test_challenge_endpoints(client, db, student_token):
    challenge = _challenge(db, "Screen Repair Basics", points=100)
    headers = auth_header(student_token)

    r = client.post(f"/api/student/challenges/{challenge.id}/complete", headers=headers)
    assert r.status_code == 201
    assert r.json()["totalPoints"] == 100

    r = client.post(f"/api/student/challenges/{challenge.id}/complete", headers=headers)
    assert r.status_code == 409

    r = client.get("/api/student/challenges/active", headers=headers)
    assert [c["id"] for c in r.json()] == [challenge.id]
    assert client.get("/api/student/challenges/recommended", headers=headers).json() == []


#################
### Resources ###
#################

def test_resource_filters_and_views(db, client, student_token):
    video = resource_logic.create_resource(db, ResourceCreate(
        title="Chromebook Keyboard Replacement Guide",
        category="hardware",
        content_type="video",
        description="Step-by-step video guide",
    ))
    resource_logic.create_resource(db, ResourceCreate(
        title="Network Troubleshooting Checklist",
        category="network",
        content_type="document",
        description="Printable CHECKLIST for wifi issues",
    ))
    headers = auth_header(student_token)

    r = client.get("/api/student/resources?category=hardware", headers=headers)
    assert [x["id"] for x in r.json()] == [video.id]
    r = client.get("/api/student/resources?search=wifi", headers=headers)
    assert [x["title"] for x in r.json()] == ["Network Troubleshooting Checklist"]
    r = client.get("/api/student/resources?contentType=video", headers=headers)
    assert len(r.json()) == 1

    client.post(f"/api/student/resources/{video.id}/view", headers=headers)
    r = client.post(f"/api/student/resources/{video.id}/view", headers=headers)
    assert r.json()["views"] == 2
    assert client.post("/api/student/resources/missing/view", headers=headers).status_code == 404


######################
### Certifications ###
######################

def test_certification_progress_marks_earned(db, student):
    cert = gamification_logic.create_certification(db, CertificationCreate(name="A+ Core 1", total_steps=4))
    ctx = _ctx(student)

    started = gamification_logic.start_certification(db, ctx, cert.id)
    assert started.status == CertificationStatus.in_progress
    with pytest.raises(Conflict):
        gamification_logic.start_certification(db, ctx, cert.id)

    halfway = gamification_logic.update_certification_progress(db, ctx, started.id, 50)
    assert halfway.status == CertificationStatus.in_progress
    assert halfway.earned_at is None

    done = gamification_logic.update_certification_progress(db, ctx, started.id, 100)
    assert done.status == CertificationStatus.earned
    assert done.earned_at is not None


def test_certification_progress_is_per_user(db, school, student):
    other = make_user(db, "luna", UserRole.student, school.id)
    cert = gamification_logic.create_certification(db, CertificationCreate(name="Network+"))
    started = gamification_logic.start_certification(db, _ctx(student), cert.id)

    with pytest.raises(NotFound):
        gamification_logic.update_certification_progress(db, _ctx(other), started.id, 100)


def test_certification_progress_range_is_validated(client, db, student_token):
    cert = gamification_logic.create_certification(db, CertificationCreate(name="Security+"))
    headers = auth_header(student_token)
    r = client.post("/api/student/certifications", json={"certificationId": cert.id}, headers=headers)
    assert r.status_code == 201
    r = client.patch(f"/api/student/certifications/{r.json()['id']}", json={"progress": 101}, headers=headers)
    assert r.status_code == 400
