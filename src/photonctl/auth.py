from __future__ import annotations

import base64
import json
from datetime import UTC, datetime, timedelta
from typing import Any


def decode_jwt_claims(token: str) -> dict[str, Any] | None:
    """Decode the payload segment of a JWT without verifying the signature."""

    if not token:
        return None

    parts = token.split(".")
    if len(parts) != 3:
        return None

    payload = parts[1]
    padding = "=" * (-len(payload) % 4)
    try:
        decoded = base64.urlsafe_b64decode(payload + padding)
        claims = json.loads(decoded.decode("utf-8"))
    except (ValueError, UnicodeDecodeError, json.JSONDecodeError):
        return None

    return claims if isinstance(claims, dict) else None


def decode_jwt_expiry(token: str) -> datetime | None:
    """Return the `exp` claim of a JWT access token.

    Example:
        >>> decode_jwt_expiry("opaque-token") is None
        True
    """

    claims = decode_jwt_claims(token)
    if claims is None:
        return None

    exp = claims.get("exp")
    if not isinstance(exp, (int, float)):
        return None

    return datetime.fromtimestamp(float(exp), tz=UTC)


def token_subject(token: str) -> str | None:
    claims = decode_jwt_claims(token) or {}
    subject = claims.get("sub")
    return subject if isinstance(subject, str) else None


def is_token_expired(token: str, *, skew_seconds: int = 60) -> bool:
    """Return True when a JWT access token is past its expiry.

    Opaque tokens carry no expiry and are never reported as expired; the
    server rejects them with 401 instead.
    """

    if not token:
        return True
    expiry = decode_jwt_expiry(token)
    if expiry is None:
        return False
    return datetime.now(UTC) >= (expiry - timedelta(seconds=skew_seconds))
