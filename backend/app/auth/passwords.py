"""Password hashing with bcrypt.

bcrypt only looks at the first 72 bytes of its input; longer passwords are
truncated explicitly so hashing never raises on newer bcrypt releases.
"""

import bcrypt

from app.config import settings

_MAX_BCRYPT_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_BCRYPT_BYTES]


def hash_password(password: str) -> str:
    """Return the bcrypt hash of ``password`` as a UTF-8 string."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check ``plain_password`` against a stored bcrypt hash."""
    return bcrypt.checkpw(_encode(plain_password), hashed_password.encode("utf-8"))
