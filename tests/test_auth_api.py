from conftest import PASSWORD, auth_header


def test_login_sets_cookie_and_returns_token(client, student):
    r = client.post("/api/auth/login", json={"username": "jane.smith", "password": PASSWORD})
    assert r.status_code == 200
    body = r.json()
    assert body["tokenType"] == "bearer"
    assert body["user"]["username"] == "jane.smith"
    assert body["user"]["role"] == "student"
    assert "passwordHash" not in body["user"]

    cookie = r.headers["set-cookie"]
    assert cookie.startswith("session=")
    assert "HttpOnly" in cookie
    assert "Max-Age=43200" in cookie
    assert "samesite=lax" in cookie.lower()


def test_login_rejects_bad_credentials_uniformly(client, db, student):
    wrong = client.post("/api/auth/login", json={"username": "jane.smith", "password": "WrongPass1!"})
    unknown = client.post("/api/auth/login", json={"username": "nobody", "password": PASSWORD})

    student.is_active = False
    db.commit()
    inactive = client.post("/api/auth/login", json={"username": "jane.smith", "password": PASSWORD})

    assert wrong.status_code == unknown.status_code == inactive.status_code == 401
    assert wrong.json() == unknown.json() == inactive.json()


def test_login_validation_error_is_400(client):
    r = client.post("/api/auth/login", json={"username": "jane.smith"})
    assert r.status_code == 400


def test_short_wrong_password_is_401(client, student):
    short = client.post("/api/auth/login", json={"username": "jane.smith", "password": "short"})
    short_user = client.post("/api/auth/login", json={"username": "js", "password": PASSWORD})
    assert short.status_code == short_user.status_code == 401
    assert short.json() == short_user.json()


def test_me_with_bearer_header(client, student_token):
    r = client.get("/api/auth/me", headers=auth_header(student_token))
    assert r.status_code == 200
    assert r.json()["username"] == "jane.smith"


def test_me_with_session_cookie(client, student):
    client.post("/api/auth/login", json={"username": "jane.smith", "password": PASSWORD})
    # TestClient keeps the cookie from the login response
    r = client.get("/api/auth/me")
    assert r.status_code == 200
    assert r.json()["firstName"] == "Jane"


def test_me_without_credentials(client):
    assert client.get("/api/auth/me").status_code == 401


def test_logout_revokes_token(client, student_token):
    r = client.post("/api/auth/logout", headers=auth_header(student_token))
    assert r.status_code == 200

    client.cookies.clear()
    assert client.get("/api/auth/me", headers=auth_header(student_token)).status_code == 401


def test_logout_without_session_still_succeeds(client):
    assert client.post("/api/auth/logout").status_code == 200
