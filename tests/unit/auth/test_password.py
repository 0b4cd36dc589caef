"""Unit tests for the bcrypt password hasher."""

import pytest

from infrastructure.auth.password import PasslibPasswordHasher


@pytest.fixture
def hasher() -> PasslibPasswordHasher:
    return PasslibPasswordHasher(rounds=4)


def test_hash_is_not_plaintext(hasher: PasslibPasswordHasher):
    digest = hasher.hash("s3cret")

    assert digest != "s3cret"
    assert digest.startswith("$2")


def test_hash_is_salted(hasher: PasslibPasswordHasher):
    assert hasher.hash("s3cret") != hasher.hash("s3cret")


def test_verify_accepts_matching_password(hasher: PasslibPasswordHasher):
    assert hasher.verify("s3cret", hasher.hash("s3cret"))


def test_verify_rejects_wrong_password(hasher: PasslibPasswordHasher):
    assert not hasher.verify("wrong", hasher.hash("s3cret"))


def test_verify_rejects_malformed_digest(hasher: PasslibPasswordHasher):
    assert not hasher.verify("s3cret", "not-a-bcrypt-digest")
