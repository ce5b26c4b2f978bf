"""
Security helpers for password hashing and JWT authentication.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC-SHA256 signatures and base64url encoding.  Tokens embed
the principal's email (``sub``), database id (``user_id``), the
account kind (``role``: ``"user"`` or ``"organizer"``) and an
expiration timestamp (``exp``).  Customers and organizers live in
separate tables, so the role tells ``get_current_user`` where to look
the principal up.

Passwords are hashed with PBKDF2-HMAC using SHA-256 and a random
per-password salt.
"""

import base64
import hashlib
import hmac
import json
import os
import time
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .db import get_connection


ROLE_USER = "user"
ROLE_ORGANIZER = "organizer"

_ROLE_TABLES = {
    ROLE_USER: "users",
    ROLE_ORGANIZER: "organizers",
}

PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(data: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
    """Create a signed JWT token with the given payload.

    The payload is extended with an ``exp`` field representing the
    expiration time as a UNIX timestamp.  The token is a string of the
    form ``header.payload.signature``, where each part is base64url
    encoded.  Clients send it as ``Authorization: Bearer <token>``.

    Parameters
    ----------
    data : dict
        Claims to embed in the token, e.g.
        ``{"sub": "jane@example.com", "user_id": 1, "role": "user"}``.
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.

    Returns
    -------
    str
        A signed JWT token.
    """
    to_encode = data.copy()
    exp_seconds = expires_delta or settings.access_token_expire_minutes * 60
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def create_principal_token(principal_id: int, email: str, role: str) -> str:
    """Issue a token for a customer or organizer account."""
    return create_access_token({"sub": email, "user_id": principal_id, "role": role})


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify and decode a JWT token.

    Returns the payload dictionary when the signature matches and the
    token has not expired; otherwise returns ``None``.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    expected_sig = _sign(signing_input, settings.secret_key)
    try:
        actual_sig = _b64_url_decode(signature_b64)
    except (ValueError, TypeError):
        return None
    if not hmac.compare_digest(expected_sig, actual_sig):
        return None
    try:
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    if data.get("exp") is None or int(data["exp"]) < int(time.time()):
        return None
    return data


security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> Dict[str, Any]:
    """Dependency that retrieves the current authenticated principal.

    Raises 401 when the ``Authorization`` header is missing, the token
    is invalid or expired, or the account no longer exists.  On
    success returns a dictionary with ``user_id``, ``email``, ``name``
    and ``role``.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise _unauthorized("Invalid or expired token")
    table = _ROLE_TABLES.get(payload.get("role"))
    if table is None:
        raise _unauthorized("Invalid or expired token")

    conn = get_connection()
    try:
        row = conn.execute(
            f"SELECT id, email, name FROM {table} WHERE id = ?",
            (payload.get("user_id"),),
        ).fetchone()
    finally:
        conn.close()
    if not row:
        raise _unauthorized("Account no longer exists")
    return {
        "user_id": row["id"],
        "email": row["email"],
        "name": row["name"],
        "role": payload["role"],
    }


def require_roles(*roles: str) -> Callable[[Dict[str, Any]], Dict[str, Any]]:
    """Dependency factory to enforce that the current principal has one of ``roles``.

    Use via ``Depends(require_roles("organizer"))``.  Raises 403 when
    the authenticated principal's role is not listed.
    """

    def _role_dependency(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if current_user.get("role") not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return _role_dependency


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256.

    Returns the salt and the derived key, both hex encoded and joined
    with ``$``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored ``salt$hash`` string."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)


def sign_webhook_payload(transaction_id: str, status_value: str, secret: str) -> str:
    """Hex HMAC-SHA256 signature a gateway sends for ``transaction_id:status``."""
    message = f"{transaction_id}:{status_value}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()
