"""
Tech News Backend — Password Hashing
=====================================

What:  Thin wrapper around argon2-cffi's PasswordHasher.
Who:   Used by the User model's pre-save hooks and `User.check_password`.

Hashes are self-describing argon2id strings (salt and parameters embedded),
so verification needs nothing but the stored value.
"""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Return True when `password` matches `password_hash`."""
    try:
        return _hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False
