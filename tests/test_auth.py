import uuid

import pytest

from taskboard import config
from taskboard.models.user import User
from taskboard.routers import auth as auth_router
from taskboard.utils.auth import create_token, hash_password, verify_password


def _email():
    return f"test_{uuid.uuid4().hex}@example.com"


def _register(client, email, password="Secret123!", **extra):
    body = {"name": "Ada Lovelace", "email": email, "password": password}
    body.update(extra)
    return client.post("/register", json=body)


def test_register_and_login_success(client):
    email = _email()
    password = "correct_horse_battery_staple"

    r = _register(client, email, password, password_confirmation=password)
    assert r.status_code == 201
    data = r.json()
    assert data["user"]["email"] == email
    assert data["user"]["name"] == "Ada Lovelace"
    assert "id" in data["user"]
    assert "password" not in data["user"]
    assert data["token"]
    assert data["token_type"] == "bearer"

    r2 = client.post("/login", json={"email": email, "password": password})
    assert r2.status_code == 200
    data2 = r2.json()
    assert data2["user"]["id"] == data["user"]["id"]
    assert "token" in data2


def test_register_stores_password_hash(client, db):
    email = _email()
    assert _register(client, email).status_code == 201

    stored = db.query(User).filter(User.email == email).one()
    assert stored.password != "Secret123!"
    assert verify_password("Secret123!", stored.password)


def test_register_duplicate_email_is_field_error(client):
    email = _email()
    assert _register(client, email).status_code == 201

    r = _register(client, email, "OtherPass123!")
    assert r.status_code == 422
    body = r.json()
    assert body["detail"] == "The given data was invalid."
    assert "taken" in body["errors"]["email"][0]


def test_register_validation_errors_are_per_field(client):
    r = client.post("/register", json={"email": "not_an_email", "password": "abc"})
    assert r.status_code == 422
    errors = r.json()["errors"]
    assert set(errors) == {"name", "email", "password"}
    assert "at least 6" in errors["password"][0]


def test_register_password_too_long(client):
    r = _register(client, _email(), "a" * 100)
    assert r.status_code == 422
    text = r.text.lower()
    assert "password" in text and ("too long" in text or "72" in text)


def test_register_password_confirmation_must_match(client):
    r = _register(client, _email(), "Secret123!", password_confirmation="Secret124!")
    assert r.status_code == 422
    assert "password_confirmation" in r.json()["errors"]


def test_login_with_wrong_password(client):
    email = _email()
    assert _register(client, email).status_code == 201

    r = client.post("/login", json={"email": email, "password": "WrongPass123!"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid credentials"


def test_login_unknown_email(client):
    r = client.post("/login", json={"email": _email(), "password": "Secret123!"})
    assert r.status_code == 401


def test_login_with_too_long_password_fails(client):
    email = _email()
    assert _register(client, email).status_code == 201

    r = client.post("/login", json={"email": email, "password": "a" * 100})
    assert r.status_code == 401


def test_current_user_and_logout(client, register_user):
    user, headers = register_user(name="Grace Hopper")

    r = client.get("/user", headers=headers)
    assert r.status_code == 200
    assert r.json()["id"] == user["id"]
    assert r.json()["name"] == "Grace Hopper"

    r = client.post("/logout", headers=headers)
    assert r.status_code == 200
    assert r.json()["message"] == "Logged out"


def test_current_user_requires_token(client):
    r = client.get("/user")
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"

    r = client.get("/user", headers={"Authorization": "Token abc"})
    assert r.status_code == 401

    r = client.get("/user", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid token"

    r = client.post("/logout")
    assert r.status_code == 401


def test_expired_token_is_rejected(client, register_user, monkeypatch):
    user, _ = register_user()
    monkeypatch.setattr(config, "ACCESS_TOKEN_EXPIRE_MINUTES", -1)
    token = create_token({"sub": str(user["id"])})

    r = client.get("/user", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert "expired" in r.json()["detail"].lower()


def test_token_signed_with_other_key_is_rejected(client, register_user, monkeypatch):
    user, _ = register_user()
    monkeypatch.setattr(config, "SECRET_KEY", "someone-elses-key")
    token = create_token({"sub": str(user["id"])})
    monkeypatch.undo()

    r = client.get("/user", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_token_of_deleted_user_is_rejected(client, register_user, db):
    user, headers = register_user()
    db.delete(db.get(User, user["id"]))
    db.commit()

    r = client.get("/user", headers=headers)
    assert r.status_code == 401


def test_hash_password_rejects_long_secrets():
    with pytest.raises(ValueError, match="72 bytes"):
        hash_password("\u00e9" * 40)


def test_register_race_on_same_email_is_field_error(client, monkeypatch):
    email = _email()
    assert _register(client, email).status_code == 201

    # both requests passed the lookup; the unique index rejects the second insert
    monkeypatch.setattr(auth_router, "_email_taken", lambda db, email: False)
    r = _register(client, email)
    assert r.status_code == 422
    assert "taken" in r.json()["errors"]["email"][0]
