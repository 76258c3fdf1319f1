"""Unit tests for PasswordHasher: salting, determinism, verification."""
import pytest

from users_backend.core.security import PasswordHasher
from users_backend.core.settings import reset_settings


def test_hash_returns_hash_and_fresh_salt(hasher):
    """Each call uses a new salt, so two hashes of the same password differ."""
    h1, s1 = hasher.hash("secret123")
    h2, s2 = hasher.hash("secret123")
    assert s1 != s2
    assert h1 != h2
    assert "secret123" not in h1


def test_hash_with_salt_is_deterministic(hasher):
    salt = hasher.generate_salt()
    assert hasher.hash_with_salt("secret123", salt) == hasher.hash_with_salt("secret123", salt)


def test_verify_round_trip(hasher):
    stored_hash, salt = hasher.hash("secret123")
    assert hasher.verify("secret123", stored_hash, salt) is True
    assert hasher.verify("wrong", stored_hash, salt) is False


def test_verify_with_other_salt_fails(hasher):
    stored_hash, _ = hasher.hash("secret123")
    assert hasher.verify("secret123", stored_hash, hasher.generate_salt()) is False


@pytest.mark.parametrize("stored_hash,salt", [("", "00ff"), ("$pbkdf2-sha256$x", ""), ("abc", "not-hex")])
def test_verify_malformed_stored_values_returns_false(hasher, stored_hash, salt):
    assert hasher.verify("secret123", stored_hash, salt) is False


def test_rounds_default_from_settings(monkeypatch):
    monkeypatch.setenv("PASSWORD_HASH_ROUNDS", "1500")
    reset_settings()
    try:
        hasher = PasswordHasher()
    finally:
        monkeypatch.delenv("PASSWORD_HASH_ROUNDS")
        reset_settings()
    stored_hash, salt = hasher.hash("pw")
    assert "$1500$" in stored_hash
    assert hasher.verify("pw", stored_hash, salt)


def test_verify_survives_rounds_change():
    stored_hash, salt = PasswordHasher(rounds=1000).hash("pw")
    newer = PasswordHasher(rounds=2000)
    assert newer.verify("pw", stored_hash, salt) is True
    assert newer.verify("other", stored_hash, salt) is False
