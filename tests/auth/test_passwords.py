"""Tests for password hashing."""

from courier.auth.passwords import hash_password, verify_password


def test_hash_is_not_plaintext():
    hashed = hash_password("rwieruch")

    assert hashed != "rwieruch"
    assert verify_password("rwieruch", hashed)


def test_wrong_password_rejected():
    hashed = hash_password("rwieruch")

    assert not verify_password("ddavids", hashed)
