"""
Password hashing: per-call random salt, pbkdf2_sha256 via passlib.

The salt is stored next to the hash. Verification uses the rounds and salt
recorded in the hash string, so changing the configured rounds keeps old hashes valid.
"""
import secrets
from typing import Tuple

from passlib.hash import pbkdf2_sha256

from users_backend.core.settings import get_settings

SALT_BYTES = 16


class PasswordHasher:
    """Salts and hashes plaintext passwords; verifies candidates against stored hash + salt."""

    def __init__(self, rounds: int | None = None) -> None:
        self._rounds = rounds if rounds is not None else get_settings().password_hash_rounds

    def generate_salt(self) -> str:
        return secrets.token_hex(SALT_BYTES)

    def hash_with_salt(self, plaintext: str, salt: str) -> str:
        """Deterministic for a given (plaintext, salt)."""
        handler = pbkdf2_sha256.using(salt=bytes.fromhex(salt), rounds=self._rounds)
        return handler.hash(plaintext)

    def hash(self, plaintext: str) -> Tuple[str, str]:
        """Return (password_hash, salt) using a fresh salt."""
        salt = self.generate_salt()
        return self.hash_with_salt(plaintext, salt), salt

    def verify(self, plaintext: str, stored_hash: str, stored_salt: str) -> bool:
        """Check against the rounds and salt recorded in stored_hash; the salt must match stored_salt."""
        if not stored_hash or not stored_salt:
            return False
        try:
            if pbkdf2_sha256.from_string(stored_hash).salt != bytes.fromhex(stored_salt):
                return False
            return pbkdf2_sha256.verify(plaintext, stored_hash)
        except ValueError:
            return False


_hasher: PasswordHasher | None = None


def get_password_hasher() -> PasswordHasher:
    """Process-wide hasher configured from settings."""
    global _hasher
    if _hasher is None:
        _hasher = PasswordHasher()
    return _hasher
