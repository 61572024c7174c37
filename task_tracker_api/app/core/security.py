"""
Bearer token authentication.

Users sign in through an external identity provider which issues a
lightweight JSON Web Token (JWT): an HMAC signature over base64url
encoded header and payload, with an ``exp`` expiry claim and the
user's email as ``sub``.  ``settings.algorithm`` picks the digest
(``HS256``, ``HS384`` or ``HS512``) and must match the token header.
The API shares the signing secret (``settings.secret_key``) and only
verifies tokens.  ``create_access_token`` is kept here so operator
scripts and tests can mint tokens the same way the provider does.

The resolved identity is handed to every service call explicitly as
``current_user``; services call ``require_identity`` before touching the
store.
"""

import base64
import hashlib
import hmac
import json
import time
from typing import Any, Dict, Mapping, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .db import transaction
from .errors import AuthenticationError, StoreError


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


# JWT "alg" header value -> HMAC digest
HMAC_DIGESTS = {
    "HS256": hashlib.sha256,
    "HS384": hashlib.sha384,
    "HS512": hashlib.sha512,
}


def _sign(message: bytes, secret: str, algorithm: str) -> bytes:
    """Compute the HMAC signature of a message for a JWT ``alg`` value.

    Raises ``ValueError`` for an algorithm outside ``HMAC_DIGESTS``.
    """
    digest = HMAC_DIGESTS.get(algorithm)
    if digest is None:
        raise ValueError(f"Unsupported token algorithm {algorithm!r}")
    return hmac.new(secret.encode("utf-8"), message, digest).digest()


def create_access_token(data: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
    """Create a signed JWT token with the given payload.

    The payload is extended with an ``exp`` field representing the
    expiration time as a UNIX timestamp.  Clients must include the token
    in the ``Authorization`` header as ``Bearer <token>``.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (e.g. {"sub": "user@example.com"}).
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.  A negative value
        produces an already expired token.
    """
    to_encode = dict(data)
    exp_seconds = expires_delta if expires_delta is not None else settings.access_token_expire_minutes * 60
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": settings.algorithm, "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key, settings.algorithm))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify and decode a JWT token.

    Returns the payload dictionary when the header names the configured
    algorithm, the signature matches and the token has not expired,
    otherwise ``None``.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    try:
        header = json.loads(_b64_url_decode(header_b64).decode("utf-8"))
        if not isinstance(header, dict) or header.get("alg") != settings.algorithm:
            return None
        actual_sig = _b64_url_decode(signature_b64)
        expected_sig = _sign(signing_input, settings.secret_key, settings.algorithm)
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        # binascii.Error and json.JSONDecodeError are both ValueErrors
        return None
    if not isinstance(data, dict):
        return None
    if data.get("exp") is None or int(data["exp"]) < int(time.time()):
        return None
    return data


security = HTTPBearer(auto_error=False)


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> Dict[str, Any]:
    """Dependency that resolves the bearer token to the acting identity.

    Raises HTTP 401 when the header is missing, the token is invalid or
    expired, or the ``sub`` email no longer maps to a user.  On success
    returns the token payload extended with ``user_id``, ``email`` and
    ``name`` from the users table.
    """
    from task_tracker_api.app.repositories import user_repository

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_access_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        with transaction() as conn:
            user = user_repository.find_by_email(conn, payload["sub"])
    except StoreError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User no longer exists",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload["user_id"] = user["id"]
    payload["email"] = user["email"]
    payload["name"] = user["name"]
    return payload


def require_identity(current_user: Optional[Mapping[str, Any]]) -> int:
    """Return the acting user's id or raise ``AuthenticationError``."""
    if not current_user or current_user.get("user_id") is None:
        raise AuthenticationError("Not authenticated")
    return int(current_user["user_id"])
