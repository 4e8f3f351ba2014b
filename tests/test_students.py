from datetime import date

import pytest

from app.exceptions import NotFound
from app.model.enums import UserRole
from app.router.api.logics import gamification_logic
from app.router.api.logics.student_logic import create_student
from app.router.api.logics.work_log_logic import WorkLogFilters, create_work_log, get_work_logs
from app.router.dependencies import AuthContext
from app.schema.gamification_schema import AchievementCreate, ChallengeCreate, WorkLogCreate
from app.schema.user_schema import UserCreate
from conftest import PASSWORD, auth_header, login, make_user


def _ctx(user):
    return AuthContext(user_id=user.id, role=user.role, school_id=user.school_id, session_id="s")


def test_admin_manages_students(client, school, admin_token):
    headers = auth_header(admin_token)
    base = f"/api/schools/{school.id}/students"

    r = client.post(base, json={
        "username": "luna.lovegood",
        "email": "luna@hogwarts.edu",
        "password": PASSWORD,
        "firstName": "Luna",
    }, headers=headers)
    assert r.status_code == 201, r.text
    luna = r.json()
    assert luna["role"] == "student"
    assert luna["schoolId"] == school.id
    assert luna["points"] == 0

    r = client.post(base, json={"username": "luna.lovegood", "email": "other@hogwarts.edu", "password": PASSWORD},
                    headers=headers)
    assert r.status_code == 409

    r = client.patch(f"{base}/{luna['id']}", json={"lastName": "Lovegood", "selectedAvatar": "star"}, headers=headers)
    assert r.status_code == 200
    assert (r.json()["lastName"], r.json()["selectedAvatar"]) == ("Lovegood", "star")

    r = client.get(base, headers=headers)
    assert [s["username"] for s in r.json()] == ["luna.lovegood"]


def test_create_student_in_unknown_school(db):
    request = UserCreate(username="cho.chang", email="cho@hogwarts.edu", password=PASSWORD)
    with pytest.raises(NotFound):
        create_student(db, "no-such-school", request)


def test_students_of_other_schools_are_not_found(client, school, other_school, db, admin_token):
    krum = make_user(db, "krum", UserRole.student, other_school.id)
    r = client.patch(f"/api/schools/{school.id}/students/{krum.id}", json={"firstName": "V"},
                     headers=auth_header(admin_token))
    assert r.status_code == 404


def test_reset_password_logs_student_out(client, school, student, admin_token, student_token):
    r = client.post(
        f"/api/schools/{school.id}/students/{student.id}/reset-password",
        json={"newPassword": "NewSecret456!"},
        headers=auth_header(admin_token),
    )
    assert r.status_code == 200
    assert client.get("/api/auth/me", headers=auth_header(student_token)).status_code == 401
    login(client, "jane.smith", "NewSecret456!")


def test_student_details(client, db, school, student, admin, admin_token):
    headers = auth_header(admin_token)
    tickets = f"/api/schools/{school.id}/tickets"
    common = {"studentName": "Room 4", "studentGrade": "4", "deviceType": "chromebook", "assignedTo": student.id}
    client.post(tickets, json={"issueType": "check", **common}, headers=headers)
    r = client.post(tickets, json={"issueType": "repair", "issueDescription": "No power", **common}, headers=headers)
    client.patch(f"{tickets}/{r.json()['id']}", json={"status": "completed"}, headers=headers)

    challenge = gamification_logic.create_challenge(db, ChallengeCreate(
        title="Screen Repair Basics", description="d", difficulty="beginner", points=100, category="hardware",
    ))
    gamification_logic.complete_challenge(db, _ctx(student), challenge.id)
    create_work_log(db, _ctx(student), WorkLogCreate(log_date=date(2024, 9, 2), hours_worked=90, description="Imaging"))

    r = client.get(f"/api/schools/{school.id}/students/{student.id}/details", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["student"]["id"] == student.id
    assert body["deviceChecks"]["total"] == 1
    assert body["repairs"] == {"total": 1, "completed": 1, "tickets": body["repairs"]["tickets"]}
    assert body["learningModules"]["total"] == 1
    assert body["learningModules"]["completions"][0]["challengeTitle"] == "Screen Repair Basics"
    assert body["workLogs"]["total"] == 1
    assert body["workLogs"]["logs"][0]["hoursWorked"] == 90


def test_learning_progress(client, db, school, student, admin_token):
    make_user(db, "ginny", UserRole.student, school.id, first_name="Ginny", last_name="Weasley")
    challenge = gamification_logic.create_challenge(db, ChallengeCreate(
        title="Network Troubleshooting", description="d", difficulty="intermediate", points=150, category="network",
    ))
    gamification_logic.complete_challenge(db, _ctx(student), challenge.id)

    r = client.get(f"/api/schools/{school.id}/learning-progress", headers=auth_header(admin_token))
    assert r.status_code == 200
    progress = {p["student"]["username"]: p["challengesCompleted"] for p in r.json()}
    assert progress == {"jane.smith": 1, "ginny": 0}


def test_award_achievement(client, db, school, student, admin_token, student_token):
    badge = gamification_logic.create_achievement(db, AchievementCreate(name="First Fix", icon="wrench"))
    url = f"/api/schools/{school.id}/students/{student.id}/achievements"

    r = client.post(url, json={"achievementId": badge.id}, headers=auth_header(admin_token))
    assert r.status_code == 201
    r = client.post(url, json={"achievementId": badge.id}, headers=auth_header(admin_token))
    assert r.status_code == 409

    r = client.get("/api/student/achievements", headers=auth_header(student_token))
    assert [a["achievement"]["name"] for a in r.json()] == ["First Fix"]


def test_work_log_filters(db, school, student):
    ctx = _ctx(student)
    for day in (1, 5, 9):
        create_work_log(db, ctx, WorkLogCreate(log_date=date(2024, 9, day), description=f"Day {day}"))

    logs = get_work_logs(db, school.id)
    assert [w.log_date.day for w in logs] == [9, 5, 1]
    window = get_work_logs(db, school.id, WorkLogFilters(start_date=date(2024, 9, 2), end_date=date(2024, 9, 9)))
    assert [w.log_date.day for w in window] == [9, 5]


def test_work_log_self_service(client, student_token, admin_token, school):
    headers = auth_header(student_token)
    r = client.post("/api/student/work-logs", json={
        "logDate": "2024-09-03",
        "hoursWorked": 45,
        "category": "repairs",
        "description": "Swapped a keyboard",
    }, headers=headers)
    assert r.status_code == 201
    log_id = r.json()["id"]

    r = client.patch(f"/api/student/work-logs/{log_id}", json={"hoursWorked": 60}, headers=headers)
    assert r.json()["hoursWorked"] == 60

    r = client.get(f"/api/schools/{school.id}/work-logs?startDate=2024-09-01", headers=auth_header(admin_token))
    assert [w["id"] for w in r.json()] == [log_id]

    # only the author can touch a log
    assert client.delete(f"/api/student/work-logs/{log_id}", headers=auth_header(admin_token)).status_code == 404
    assert client.delete(f"/api/student/work-logs/{log_id}", headers=headers).status_code == 200
    assert client.get("/api/student/work-logs", headers=headers).json() == []


def test_profile_update(client, student_token):
    r = client.patch("/api/student/profile", json={"selectedAvatar": "robot", "firstName": "Janet"},
                     headers=auth_header(student_token))
    assert r.status_code == 200
    assert r.json()["selectedAvatar"] == "robot"
    assert r.json()["firstName"] == "Janet"
