"""
Security helpers for password hashing and token authentication.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC‑SHA256 signatures and base64url encoding.  Tokens embed the
caller's identity claims (``id`` and ``role``) and an expiration
timestamp (``exp``).  Passwords are hashed with PBKDF2‑HMAC‑SHA256 and
a random per‑password salt.

The ``get_current_user`` dependency is the access gate for protected
routes.  Clients send the token in the ``x-auth-token`` header (not
``Authorization: Bearer``):

* no token → ``401 No token, authorization denied``
* bad signature, expired or malformed token → ``400 Token is not valid``
"""

import base64
import hashlib
import hmac
import json
import os
import time
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from .config import Settings, settings

TOKEN_HEADER = "x-auth-token"
PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[int] = None,
    secret_key: Optional[str] = None,
) -> str:
    """Create a signed JWT token with the given claims.

    The claims are extended with an ``exp`` field representing the
    expiration time as a UNIX timestamp.

    Parameters
    ----------
    data : dict
        Claims to embed in the token, e.g. ``{"id": 1, "role": "student"}``.
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.  A negative value
        produces an already expired token.
    secret_key : Optional[str]
        Signing secret.  Defaults to ``settings.secret_key``.

    Returns
    -------
    str
        A token of the form ``header.payload.signature``.
    """
    secret = secret_key or settings.secret_key
    if expires_delta is None:
        expires_delta = settings.access_token_expire_minutes * 60
    to_encode = data.copy()
    to_encode["exp"] = int(time.time()) + expires_delta
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, secret))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str, secret_key: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Verify and decode a JWT token.

    Verifies the HMAC signature, the ``alg`` header and the ``exp``
    claim.  Returns the claims dictionary if the token is valid,
    otherwise ``None``.
    """
    secret = secret_key or settings.secret_key
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    try:
        header = json.loads(_b64_url_decode(header_b64).decode("utf-8"))
        if not isinstance(header, dict) or header.get("alg") != "HS256":
            return None
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        expected_sig = _sign(signing_input, secret)
        actual_sig = _b64_url_decode(signature_b64)
        # Constant‑time comparison
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
        if not isinstance(data, dict):
            return None
        if data.get("exp") is None or int(data["exp"]) < int(time.time()):
            return None
    except (ValueError, TypeError):
        # binascii.Error, UnicodeDecodeError and JSONDecodeError are all ValueErrors
        return None
    return data


token_header = APIKeyHeader(name=TOKEN_HEADER, auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Dependency returning the settings of the application serving the request."""
    return getattr(request.app.state, "settings", settings)


def get_current_user(
    token: Optional[str] = Depends(token_header),
    app_settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Dependency that authenticates the caller from ``x-auth-token``.

    Returns the decoded claims (``id``, ``role``, ``exp``).  The token
    is verified against the secret of the application serving the
    request, so apps built with custom ``Settings`` verify their own
    tokens.
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token, authorization denied",
        )
    payload = decode_access_token(token, app_settings.secret_key)
    if not payload or payload.get("id") is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Token is not valid",
        )
    return payload


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2‑HMAC with SHA‑256.

    A 16‑byte random salt is generated for each password.  The
    resulting string holds the salt and the digest, both hex encoded
    and separated by ``$``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against a stored ``salt$hash`` string."""
    if not hashed_password or "$" not in hashed_password:
        return False
    salt_hex, hash_hex = hashed_password.split("$", 1)
    try:
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)
