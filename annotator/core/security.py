"""Password hashing.

Passwords are stored as one-way hashes; the plaintext never leaves the
registration and login calls.
"""
from passlib.context import CryptContext

from annotator.core.config import settings


_pwd = CryptContext(schemes=[settings.PASSWORD_HASH_SCHEME], deprecated="auto")


def hash_password(password: str) -> str:
    return _pwd.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored hash.

    Malformed hashes count as a mismatch instead of raising.
    """
    try:
        return _pwd.verify(password, password_hash)
    except (ValueError, TypeError):
        return False
