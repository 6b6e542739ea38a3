from __future__ import annotations

import secrets
import string
from datetime import datetime, timezone

# URL-safe 64 symbol alphabet (same symbol set as nanoid).
SESSION_ID_ALPHABET = string.ascii_letters + string.digits + "_-"


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""

    return datetime.now(timezone.utc)


def generate_session_id(length: int = 10) -> str:
    """Return a random, URL-safe session token of exactly `length` characters.

    Ten symbols from a 64 symbol alphabet give 60 bits of entropy, which is what
    collision resistance relies on; the registry does not retry on collision.
    """

    if length <= 0:
        raise ValueError("length must be positive")
    return "".join(secrets.choice(SESSION_ID_ALPHABET) for _ in range(length))


__all__ = ["SESSION_ID_ALPHABET", "generate_session_id", "utcnow"]
