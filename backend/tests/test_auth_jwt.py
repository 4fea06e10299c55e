from conftest import PASSWORD


def test_register_login_token_returned(client):
    r = client.post("/auth/register", json={"email": "alice@example.com", "password": PASSWORD, "name": "Alice"})
    assert r.status_code == 201
    body = r.json()
    assert body["email"] == "alice@example.com"
    assert body["name"] == "Alice"
    assert body["userId"]

    r = client.post("/auth/login", json={"email": "alice@example.com", "password": PASSWORD})
    assert r.status_code == 200
    data = r.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"


def test_email_is_case_insensitive(client):
    client.post("/auth/register", json={"email": "Bob@Example.com", "password": PASSWORD})
    r = client.post("/auth/login", json={"email": "bob@example.com", "password": PASSWORD})
    assert r.status_code == 200


def test_login_wrong_password(client):
    client.post("/auth/register", json={"email": "alice@example.com", "password": PASSWORD})
    r = client.post("/auth/login", json={"email": "alice@example.com", "password": "wrongwrongwrong"})
    assert r.status_code == 401

    r = client.post("/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})
    assert r.status_code == 401


def test_duplicate_registration_conflicts(client):
    payload = {"email": "alice@example.com", "password": PASSWORD}
    assert client.post("/auth/register", json=payload).status_code == 201
    assert client.post("/auth/register", json=payload).status_code == 409


def test_register_validates_input(client):
    r = client.post("/auth/register", json={"email": "not-an-email", "password": PASSWORD})
    assert r.status_code == 422
    r = client.post("/auth/register", json={"email": "alice@example.com", "password": "short"})
    assert r.status_code == 422


def test_session_reports_the_bearer(client, signup):
    headers = signup(email="carol@example.com", name="Carol")
    r = client.get("/auth/session", headers=headers)
    assert r.status_code == 200
    assert r.json()["email"] == "carol@example.com"
    assert r.json()["name"] == "Carol"


def test_protected_requires_token(client):
    # no auth at all
    assert client.get("/notes").status_code == 401
    assert client.get("/workspaces").status_code == 401
    assert client.get("/auth/session").status_code == 401

    # the old user-id header is not a credential
    assert client.get("/notes", headers={"X-User-Id": "userA"}).status_code == 401

    r = client.get("/notes", headers={"Authorization": "Bearer not.a.jwt"})
    assert r.status_code == 401


def test_expired_token_rejected(client, monkeypatch):
    from notionary.utils import jwt_auth

    monkeypatch.setenv("JWT_EXP_MINUTES", "-1")
    token = jwt_auth.create_access_token(subject="someone")
    r = client.get("/notes", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_register_creates_default_workspace(client, signup):
    headers = signup()
    r = client.get("/workspaces", headers=headers)
    assert r.status_code == 200
    workspaces = r.json()
    assert len(workspaces) == 1
    assert workspaces[0]["name"] == "My Workspace"
    assert workspaces[0]["isDefault"] is True


def test_session_survives_a_corrupt_account_file(client, signup, tmp_path):
    headers = signup()
    (tmp_path / "data" / "accounts" / "garbage.json").write_text("{not json", encoding="utf-8")

    r = client.get("/auth/session", headers=headers)
    assert r.status_code == 200
    assert r.json()["email"] == "alice@example.com"
