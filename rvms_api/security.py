# rvms_api/security.py
"""
Salted password hashing with bcrypt.

The salt from ``bcrypt.gensalt()`` (which carries the cost factor) is kept
on the user document next to the hash, so a login recomputes the hash from
the stored salt and the submitted password.
"""
import hmac

import bcrypt

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def generate_salt(rounds: int = 12) -> str:
    return bcrypt.gensalt(rounds).decode("utf-8")


def hash_password(password: str, salt: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), salt.encode("utf-8")).decode("utf-8")


def validate_password(salt: str, hashed: str, password: str) -> bool:
    """Recompute the hash of ``password`` and compare in constant time."""
    try:
        candidate = hash_password(password, salt)
    except (AttributeError, TypeError, ValueError):
        return False
    if not isinstance(hashed, str):
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), hashed.encode("utf-8"))
