from conftest import auth_header, make_user
from gifty.data.models import UserModel
from gifty.repos.user_repo import UserRepo
from gifty.utils.security import create_reset_token


def register(client, email="carol@example.com", password="pw123"):
    return client.post("/api/auth/register", json={"name": "Carol", "email": email, "password": password})


def test_register_returns_token_and_user(client):
    res = register(client, email="Carol@Example.com")

    assert res.status_code == 201
    body = res.json()
    assert body["user"]["email"] == "carol@example.com"
    assert body["user"]["role"] == "customer"
    assert "password" not in body["user"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.json()["id"] == body["user"]["id"]


def test_register_duplicate_email(client):
    register(client)

    res = register(client, email="CAROL@example.com")

    assert res.status_code == 400
    assert res.json()["detail"] == "Email already registered"


def test_register_rejects_bad_email(client):
    assert register(client, email="not-an-email").status_code == 422


def test_login(client):
    register(client)

    res = client.post("/api/auth/login", json={"email": "carol@example.com", "password": "pw123"})

    assert res.status_code == 200
    assert res.json()["token"]


def test_login_wrong_password(client):
    register(client)

    res = client.post("/api/auth/login", json={"email": "carol@example.com", "password": "nope"})

    assert res.status_code == 401


def test_login_unknown_user(client):
    res = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "x"})

    assert res.status_code == 404


def test_me(client, db):
    user = make_user(db)

    res = client.get("/api/auth/me", headers=auth_header(user))

    assert res.status_code == 200
    assert res.json()["email"] == "alice@example.com"


def test_password_reset_flow(client, db):
    make_user(db, password="old")

    res = client.post("/api/auth/forgot-password", json={"email": "alice@example.com"})
    assert res.status_code == 200
    token = res.json()["reset_token"]

    res = client.post("/api/auth/reset-password", json={"reset_token": token, "new_password": "new"})
    assert res.status_code == 200

    assert client.post("/api/auth/login", json={"email": "alice@example.com", "password": "old"}).status_code == 401
    assert client.post("/api/auth/login", json={"email": "alice@example.com", "password": "new"}).status_code == 200


def test_forgot_password_unknown_email(client):
    res = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})

    assert res.status_code == 404


def test_access_token_cannot_reset_password(client, db):
    user = make_user(db)
    access = auth_header(user)["Authorization"].split(" ", 1)[1]

    res = client.post("/api/auth/reset-password", json={"reset_token": access, "new_password": "x"})

    assert res.status_code == 400


def test_reset_token_cannot_authenticate(client, db):
    user = make_user(db)

    res = client.get("/api/auth/me", headers={"Authorization": f"Bearer {create_reset_token(user.id)}"})

    assert res.status_code == 401


def test_register_race_on_same_email(client, db, monkeypatch):
    register(client)
    # the second request passes the lookup before the first one commits
    monkeypatch.setattr(UserRepo, "get_by_email", lambda self, email: None)

    res = register(client)

    assert res.status_code == 400
    assert res.json()["detail"] == "Email already registered"
    assert db.query(UserModel).count() == 1
