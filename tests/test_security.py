import json

import pytest

from task_tracker_api.app.core import security
from task_tracker_api.app.core.errors import AuthenticationError


def test_token_roundtrip_keeps_claims():
    token = security.create_access_token({"sub": "alice@example.com"})

    payload = security.decode_access_token(token)

    assert payload["sub"] == "alice@example.com"
    assert "exp" in payload


def test_expired_token_is_rejected():
    token = security.create_access_token({"sub": "alice@example.com"}, expires_delta=-60)

    assert security.decode_access_token(token) is None


def test_tampered_token_is_rejected():
    token = security.create_access_token({"sub": "alice@example.com"})
    other = security.create_access_token({"sub": "mallory@example.com"})
    header, _, signature = token.split(".")
    forged = ".".join([header, other.split(".")[1], signature])

    assert security.decode_access_token(forged) is None


@pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c", "###.###.###"])
def test_malformed_token_is_rejected(token):
    assert security.decode_access_token(token) is None


def test_token_signed_with_another_secret_is_rejected(monkeypatch):
    token = security.create_access_token({"sub": "alice@example.com"})
    monkeypatch.setattr(security.settings, "secret_key", "rotated")

    assert security.decode_access_token(token) is None


def test_require_identity_returns_user_id():
    assert security.require_identity({"sub": "a@example.com", "user_id": 7}) == 7


@pytest.mark.parametrize("current_user", [None, {}, {"sub": "a@example.com"}, {"user_id": None}])
def test_require_identity_without_user_id_fails(current_user):
    with pytest.raises(AuthenticationError):
        security.require_identity(current_user)


def test_missing_header_is_unauthorized(client):
    response = client.get("/api/v1/projects/")

    assert response.status_code == 401


def test_invalid_token_is_unauthorized(client):
    response = client.get("/api/v1/projects/", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_token_for_unknown_user_is_unauthorized(client, auth_headers):
    headers = auth_headers({"email": "ghost@example.com"})

    response = client.get("/api/v1/users/me", headers=headers)

    assert response.status_code == 401
    assert response.json()["detail"] == "User no longer exists"


def test_valid_token_resolves_user(client, auth_headers, alice):
    response = client.get("/api/v1/users/me", headers=auth_headers(alice))

    assert response.status_code == 200
    assert response.json()["email"] == "alice@example.com"


def test_configured_algorithm_selects_the_digest(monkeypatch):
    monkeypatch.setattr(security.settings, "algorithm", "HS512")

    token = security.create_access_token({"sub": "alice@example.com"})
    header_b64, _, signature_b64 = token.split(".")

    assert json.loads(security._b64_url_decode(header_b64))["alg"] == "HS512"
    assert len(security._b64_url_decode(signature_b64)) == 64
    assert security.decode_access_token(token)["sub"] == "alice@example.com"


def test_token_with_another_algorithm_is_rejected(monkeypatch):
    token = security.create_access_token({"sub": "alice@example.com"})
    monkeypatch.setattr(security.settings, "algorithm", "HS512")

    assert security.decode_access_token(token) is None


def test_unsupported_algorithm_cannot_mint(monkeypatch):
    monkeypatch.setattr(security.settings, "algorithm", "RS256")

    with pytest.raises(ValueError):
        security.create_access_token({"sub": "alice@example.com"})
