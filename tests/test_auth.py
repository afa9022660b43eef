"""Tests for registration, login and logout."""
from imagestore.models.user import User


def _register(client, email="new@example.com", password="long-enough-pw", name="New User"):
    return client.post(
        "/register", data={"name": name, "email": email, "password": password}
    )


def test_register_logs_user_in(app, client):
    resp = _register(client, email="New@Example.com")
    assert resp.status_code == 303
    assert client.get("/images").status_code == 200

    with app.app_context():
        user = User.query.filter_by(email="new@example.com").one()
        assert user.password_hash != "long-enough-pw"
        assert user.check_password("long-enough-pw")


def test_register_validates_fields(client):
    resp = _register(client, email="not-an-email", password="short", name="")
    assert resp.status_code == 422
    errors = resp.get_json()["errors"]
    assert set(errors) == {"name", "email", "password"}


def test_register_rejects_duplicate_email(client, users):
    resp = _register(client, email="owner@example.com")
    assert resp.status_code == 422
    assert resp.get_json()["errors"]["email"] == ["The email has already been taken."]


def test_login_and_logout(client, users):
    resp = client.post(
        "/login", data={"email": "owner@example.com", "password": "correct-horse"}
    )
    assert resp.status_code == 303
    assert client.get("/images").status_code == 200

    resp = client.post("/logout")
    assert resp.status_code == 303
    assert client.get("/images").status_code == 401


def test_login_rejects_bad_password(client, users):
    resp = client.post(
        "/login", data={"email": "owner@example.com", "password": "wrong-horse"}
    )
    assert resp.status_code == 401
    assert client.get("/images").status_code == 401


def test_login_requires_fields(client):
    resp = client.post("/login", data={})
    assert resp.status_code == 422
    assert set(resp.get_json()["errors"]) == {"email", "password"}
