"""Password hashing for the credential sign-in flow.

bcrypt through passlib's CryptContext. When the installed bcrypt backend
cannot be initialised (passlib and newer bcrypt releases disagree on a few
internals) the context falls back to pbkdf2_sha256 so sign-up keeps working.
``BCRYPT_ROUNDS`` sets the cost of whichever scheme ends up active.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

from passlib.context import CryptContext

logger = logging.getLogger(__name__)


def _rounds() -> Optional[int]:
    raw = os.environ.get("BCRYPT_ROUNDS")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric BCRYPT_ROUNDS=%r", raw)
        return None


def _build_context() -> CryptContext:
    rounds = _rounds()
    try:
        ctx = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            **({"bcrypt__rounds": rounds} if rounds else {}),
        )
        ctx.hash("probe")
        return ctx
    except Exception as exc:  # backend problems surface as assorted errors
        logger.warning("bcrypt backend unavailable, using pbkdf2_sha256: %s", exc)
        return CryptContext(
            schemes=["pbkdf2_sha256"],
            deprecated="auto",
            **({"pbkdf2_sha256__rounds": max(rounds, 1000)} if rounds else {}),
        )


pwd_context = _build_context()


def hash_password(plain: str) -> str:
    """Hash a plaintext password and return the encoded hash string."""
    if plain is None:
        raise ValueError("Password must not be None")
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    if plain is None or hashed is None:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False
