"""Security helpers (admin secret hashing and verification)."""

from __future__ import annotations

import secrets

from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()
_PREFIX = "argon2$"


def hash_password(password: str) -> str:
    """Create an Argon2 hash with a prefix so it can be told apart from a plain secret."""
    hashed = _ph.hash(password)
    return f"{_PREFIX}{hashed}"


def is_hashed(stored: str | None) -> bool:
    return (stored or "").startswith(_PREFIX)


def verify_password(password: str, stored: str | None) -> bool:
    """
    Check a supplied password against the configured admin secret.

    The secret is either an Argon2 hash produced by hash_password() or a
    plain value, compared in constant time.
    """
    stored = stored or ""
    if not stored or not password:
        return False
    if is_hashed(stored):
        hashed = stored[len(_PREFIX) :]
        try:
            return _ph.verify(hashed, password)
        except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
            return False
    return secrets.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))
