import uuid

import jwt

from .conftest import TEST_SECRET


def _register_data(password="testing12345"):
    unique = uuid.uuid4().hex[:8]
    return {
        "email": f"user_{unique}@example.com",
        "name": "Bob Smith",
        "password": password,
    }


def test_register_returns_user_and_token(client):
    data = _register_data()
    response = client.post("/auth/register", json=data)
    assert response.status_code == 200

    body = response.json()
    assert body["user"]["email"] == data["email"]
    assert body["user"]["name"] == data["name"]
    assert body["user"]["id"]
    assert "password" not in body["user"]

    claims = jwt.decode(body["token"], TEST_SECRET, algorithms=["HS256"])
    assert claims["email"] == data["email"]
    assert claims["name"] == data["name"]


def test_register_duplicate_email(client):
    data = _register_data()
    assert client.post("/auth/register", json=data).status_code == 200

    again = client.post("/auth/register", json=data)
    assert again.status_code == 400
    assert again.json() == {"status": 400, "message": "User already exists"}


def test_register_missing_fields(client):
    # Missing required fields should return 422
    response = client.post("/auth/register", json={"email": "a@x.com"})
    assert response.status_code == 422


def test_register_and_login(client):
    data = _register_data()
    registered = client.post("/auth/register", json=data).json()

    login = client.post("/auth/login", json={"email": data["email"], "password": data["password"]})
    assert login.status_code == 200
    body = login.json()
    assert body["user"] == registered["user"]
    assert "password" not in body["user"]
    assert jwt.decode(body["token"], TEST_SECRET, algorithms=["HS256"])["email"] == data["email"]


def test_login_invalid_password(client):
    data = _register_data(password="goodpassword")
    assert client.post("/auth/register", json=data).status_code == 200

    bad_login = client.post("/auth/login", json={"email": data["email"], "password": "wrongpassword"})
    assert bad_login.status_code == 400
    assert bad_login.json() == {"status": 400, "message": "Invalid credentials"}


def test_login_unknown_email_matches_wrong_password(client):
    data = _register_data()
    client.post("/auth/register", json=data)

    wrong_password = client.post("/auth/login", json={"email": data["email"], "password": "nope"})
    unknown = client.post("/auth/login", json={"email": "ghost@example.com", "password": "nope"})
    assert unknown.status_code == wrong_password.status_code == 400
    assert unknown.json() == wrong_password.json()


def test_verify_reissues_token(client):
    data = _register_data()
    registered = client.post("/auth/register", json=data).json()

    verified = client.post("/auth/verify", json={"token": registered["token"]})
    assert verified.status_code == 200
    body = verified.json()
    assert body["user"] == registered["user"]

    original = jwt.decode(registered["token"], TEST_SECRET, algorithms=["HS256"])
    reissued = jwt.decode(body["token"], TEST_SECRET, algorithms=["HS256"])
    for claims in (original, reissued):
        claims.pop("iat")
        claims.pop("exp")
    assert reissued == original


def test_verify_invalid_token(client):
    response = client.post("/auth/verify", json={"token": "not-a-jwt"})
    assert response.status_code == 401
    assert response.json() == {"status": 401, "message": "Invalid token"}


def test_verify_foreign_secret(client):
    forged = jwt.encode(
        {"id": "abc", "email": "a@x.com", "name": "A", "exp": 4102444800},
        "some-other-secret-with-enough-length!!",
        algorithm="HS256",
    )
    response = client.post("/auth/verify", json={"token": forged})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_ready_reports_database(client):
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json()["database"] == "connected"


def test_ready_unavailable_when_store_down(client, monkeypatch):
    monkeypatch.setattr(client.app.state.user_store, "check_connection", lambda: False)
    response = client.get("/ready")
    assert response.status_code == 503
    assert response.json()["detail"]["database"] == "disconnected"


def test_register_rejected_password_is_bad_request(client):
    data = _register_data(password="pw\u0000x")
    response = client.post("/auth/register", json=data)
    assert response.status_code == 400
    assert response.json()["status"] == 400
