"""
Authentication API tests: register, login, logout and session replacement.
"""
import pytest

from app.rate_limit import limiter
from conftest import PASSWORD, auth_headers, register


def test_register_returns_token_and_user(client):
    response = client.post(
        "/api/auth/register",
        json={"email": "alice@example.com", "password": PASSWORD},
    )

    assert response.status_code == 201
    data = response.json()
    assert len(data["token"]) == 48
    assert data["user"]["email"] == "alice@example.com"
    assert data["user"]["id"]


def test_register_twice_conflicts(client):
    register(client)

    response = client.post(
        "/api/auth/register",
        json={"email": "alice@example.com", "password": "autremotdepasse"},
    )

    assert response.status_code == 409
    assert response.json() == {"error": "Ce compte existe deja. Connecte-toi."}


def test_register_normalizes_email(client):
    response = client.post(
        "/api/auth/register",
        json={"email": "  Alice@Example.COM ", "password": PASSWORD},
    )
    assert response.status_code == 201
    assert response.json()["user"]["email"] == "alice@example.com"

    login = client.post("/api/auth/login", json={"email": "alice@example.com", "password": PASSWORD})
    assert login.status_code == 200


def test_register_rejects_invalid_email(client):
    response = client.post("/api/auth/register", json={"email": "alice", "password": PASSWORD})

    assert response.status_code == 400
    assert response.json() == {"error": "Adresse email invalide."}


def test_register_rejects_short_password(client):
    response = client.post("/api/auth/register", json={"email": "alice@example.com", "password": "court"})

    assert response.status_code == 400
    assert response.json() == {"error": "Mot de passe trop court (8 caracteres minimum)."}


def test_register_without_body_is_invalid_email(client):
    response = client.post("/api/auth/register")

    assert response.status_code == 400
    assert response.json() == {"error": "Adresse email invalide."}


def test_malformed_json_is_bad_request(client):
    response = client.post(
        "/api/auth/login",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Requete invalide."}


def test_login_success(client):
    register(client)

    response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": PASSWORD})

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["email"] == "alice@example.com"
    assert data["token"]


def test_login_unknown_email_is_not_found(client):
    response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})

    assert response.status_code == 404
    assert response.json() == {"error": "Compte introuvable. Cree un compte."}


def test_login_wrong_password_is_unauthorized(client):
    register(client)

    response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "mauvaismotdepasse"})

    assert response.status_code == 401
    assert response.json() == {"error": "Email ou mot de passe incorrect."}


def test_login_invalidates_previous_token(client):
    first = register(client)

    response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": PASSWORD})
    second = response.json()["token"]

    assert second != first
    assert client.get("/api/sync", headers=auth_headers(first)).status_code == 401
    assert client.get("/api/sync", headers=auth_headers(second)).status_code == 200


def test_sessions_are_per_user(client):
    alice = register(client, "alice@example.com")
    bob = register(client, "bob@example.com")

    assert client.get("/api/auth/me", headers=auth_headers(alice)).json()["user"]["email"] == "alice@example.com"
    assert client.get("/api/auth/me", headers=auth_headers(bob)).json()["user"]["email"] == "bob@example.com"


def test_logout_deletes_session(client, token):
    response = client.post("/api/auth/logout", headers=auth_headers(token))

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert client.get("/api/auth/me", headers=auth_headers(token)).status_code == 401


def test_logout_always_succeeds(client):
    assert client.post("/api/auth/logout").json() == {"ok": True}
    assert client.post("/api/auth/logout", headers=auth_headers("unknown")).json() == {"ok": True}


def test_me_requires_token(client):
    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json() == {"error": "Non autorise."}


def test_unknown_token_is_unauthorized(client):
    response = client.get("/api/auth/me", headers=auth_headers("0" * 48))

    assert response.status_code == 401


@pytest.fixture
def rate_limited():
    limiter.reset()
    limiter.enabled = True
    yield
    limiter.enabled = False
    limiter.reset()


def test_login_is_rate_limited(client, rate_limited):
    credentials = {"email": "nobody@example.com", "password": PASSWORD}

    for _ in range(5):
        assert client.post("/api/auth/login", json=credentials).status_code == 404

    response = client.post("/api/auth/login", json=credentials)

    assert response.status_code == 429
    assert "error" in response.json()
