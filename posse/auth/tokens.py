"""
Tokens - Signed, expiring identity tokens.

Format: <payload>.<signature>
- payload: URL-safe base64 of {"name": ..., "exp": unix seconds}
- signature: URL-safe base64 of HMAC-SHA256(secret, payload)
"""

from __future__ import annotations
import base64
import hashlib
import hmac
import json
import time


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def _sign(secret: str, payload: str) -> str:
    digest = hmac.new(secret.encode(), payload.encode(), hashlib.sha256).digest()
    return _b64encode(digest)


def issue_token(name: str, secret: str, ttl_seconds: int, now: float | None = None) -> str:
    """Issue a token for `name` that expires after `ttl_seconds`."""
    issued_at = time.time() if now is None else now
    payload = _b64encode(json.dumps(
        {"name": name, "exp": int(issued_at + ttl_seconds)},
        separators=(",", ":"),
    ).encode())
    return f"{payload}.{_sign(secret, payload)}"


def verify_token(token: str, secret: str, now: float | None = None) -> str | None:
    """
    Verify a token and return the name it was issued for.

    Returns None for malformed, tampered or expired tokens.
    """
    try:
        payload, signature = token.split(".")
    except ValueError:
        return None

    if not hmac.compare_digest(_sign(secret, payload), signature):
        return None

    try:
        data = json.loads(_b64decode(payload))
    except (ValueError, UnicodeDecodeError):
        return None

    if not isinstance(data, dict):
        return None
    name, exp = data.get("name"), data.get("exp")
    if not isinstance(name, str) or not isinstance(exp, int):
        return None

    current = time.time() if now is None else now
    if current >= exp:
        return None
    return name
