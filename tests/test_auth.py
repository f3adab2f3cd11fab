from datetime import timedelta

from jose import jwt

from helpdesk.auth import create_access_token
from helpdesk.config import settings


def test_login_returns_token_with_identity_and_role(client, create_user):
    tech = create_user(role="tech", email="t@x.com", password="secret12")

    r = client.post("/users/login", json={"email": "t@x.com", "password": "secret12"})
    assert r.status_code == 200
    token = r.json()["token"]

    payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    assert payload["id"] == tech.id
    assert payload["email"] == "t@x.com"
    assert payload["role"] == "tech"
    # one hour lifetime
    assert payload["exp"] - payload["iat"] == 3600


def test_login_failure_does_not_reveal_which_check_failed(client, create_user):
    create_user(role="client", email="known@example.com", password="rightpass")

    wrong_password = client.post("/users/login", json={"email": "known@example.com", "password": "wrongpass"})
    unknown_email = client.post("/users/login", json={"email": "nobody@example.com", "password": "rightpass"})

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["error"]["code"] == "invalid_credentials"


def test_login_requires_email(client):
    r = client.post("/users/login", json={"password": "secret123"})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "validation_error"


def test_expired_altered_and_missing_tokens_are_rejected(client, create_user):
    user = create_user(role="client", email="tok@example.com")

    expired = create_access_token(user, expires_delta=timedelta(seconds=-1))
    r = client.get("/services/list", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.headers.get("WWW-Authenticate") == "Bearer"

    valid = create_access_token(user, expires_delta=timedelta(minutes=60))
    r = client.get("/services/list", headers={"Authorization": f"Bearer {valid}a"})
    assert r.status_code == 401

    r = client.get("/services/list")
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "not_authenticated"

    r = client.get("/services/list", headers={"Authorization": f"Bearer {valid}"})
    assert r.status_code == 200


def test_token_with_unknown_role_is_rejected(client):
    forged = jwt.encode({"id": "abc", "email": "x@example.com", "role": "superuser"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    r = client.get("/services/list", headers={"Authorization": f"Bearer {forged}"})
    assert r.status_code == 401


def test_rate_limit_returns_error_envelope(client):
    limiter = client.app.state.limiter
    limiter.reset()
    limiter.enabled = True
    try:
        last = None
        # default limit is 100/minute per client address
        for _ in range(101):
            last = client.get("/health")
            if last.status_code == 429:
                break
        assert last.status_code == 429
        assert last.json()["error"]["code"] == "rate_limited"
    finally:
        limiter.enabled = False
        limiter.reset()
