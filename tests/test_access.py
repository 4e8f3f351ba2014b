import pytest

from app.exceptions import BadRequest, Forbidden
from app.model.enums import UserRole
from app.router.dependencies import AuthContext, check_school_access
from conftest import auth_header


def _ctx(role, school_id):
    return AuthContext(user_id="u1", role=role, school_id=school_id, session_id="s1")


def test_super_admin_reaches_every_school():
    check_school_access(_ctx(UserRole.super_admin, None), "any-school")
    check_school_access(_ctx(UserRole.super_admin, None), None)


def test_own_school_is_allowed():
    check_school_access(_ctx(UserRole.admin, "s-a"), "s-a")
    check_school_access(_ctx(UserRole.student, "s-a"), "s-a")


def test_other_school_is_forbidden():
    with pytest.raises(Forbidden):
        check_school_access(_ctx(UserRole.admin, "s-a"), "s-b")


def test_missing_school_id_is_bad_request():
    with pytest.raises(BadRequest):
        check_school_access(_ctx(UserRole.student, "s-a"), None)


def test_unauthenticated_is_401(client, school):
    assert client.get(f"/api/schools/{school.id}/tickets").status_code == 401
    assert client.get("/api/student/challenges").status_code == 401
    assert client.get("/api/catalog/challenges").status_code == 401


def test_invalid_token_is_401(client, school):
    r = client.get(f"/api/schools/{school.id}/tickets", headers=auth_header("forged"))
    assert r.status_code == 401


def test_role_checks_are_403(client, school, student_token, admin_token):
    assert client.get("/api/schools", headers=auth_header(student_token)).status_code == 403
    assert client.get("/api/schools", headers=auth_header(admin_token)).status_code == 403
    r = client.get(f"/api/schools/{school.id}/students", headers=auth_header(student_token))
    assert r.status_code == 403
    r = client.post(
        "/api/catalog/challenges",
        json={"title": "x", "description": "x", "difficulty": "beginner", "points": 1, "category": "hardware"},
        headers=auth_header(admin_token),
    )
    assert r.status_code == 403


def test_tenant_mismatch_is_403(client, school, other_admin_token):
    headers = auth_header(other_admin_token)
    assert client.get(f"/api/schools/{school.id}/tickets", headers=headers).status_code == 403
    assert client.get(f"/api/schools/{school.id}/students", headers=headers).status_code == 403
    assert client.get(f"/api/schools/{school.id}", headers=headers).status_code == 403


def test_super_admin_crosses_tenants(client, school, super_admin_token):
    headers = auth_header(super_admin_token)
    assert client.get(f"/api/schools/{school.id}/tickets", headers=headers).status_code == 200
    assert client.get(f"/api/schools/{school.id}/students", headers=headers).status_code == 200


def test_super_admin_cannot_write_into_unknown_school(client, super_admin_token):
    headers = auth_header(super_admin_token)
    r = client.post("/api/schools/no-such-school/students", json={
        "username": "cedric.diggory",
        "email": "cedric@hogwarts.edu",
        "password": "Secret123!",
    }, headers=headers)
    assert r.status_code == 404

    r = client.post("/api/schools/no-such-school/tickets", json={
        "issueType": "repair",
        "studentName": "Cedric",
        "studentGrade": "6",
        "deviceType": "ipad",
        "issueDescription": "Frozen",
    }, headers=headers)
    assert r.status_code == 404
    assert client.get("/api/schools/no-such-school/tickets", headers=headers).status_code == 404


def test_self_service_needs_a_school(client, super_admin_token):
    r = client.get("/api/student/challenges", headers=auth_header(super_admin_token))
    assert r.status_code == 400


def test_deactivated_user_is_logged_out(client, school, student, admin_token, student_token):
    r = client.patch(
        f"/api/schools/{school.id}/students/{student.id}",
        json={"isActive": False},
        headers=auth_header(admin_token),
    )
    assert r.status_code == 200
    assert r.json()["isActive"] is False
    assert client.get("/api/auth/me", headers=auth_header(student_token)).status_code == 401
