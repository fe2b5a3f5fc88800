# tests/test_security.py
from datetime import timedelta

import pytest

from quickbite.core.security import (
    JWTError,
    create_access_token,
    generate_otp,
    get_password_hash,
    is_valid_email,
    is_valid_phone,
    password_policy_violation,
    verify_password,
    verify_token,
)


def test_password_hash_round_trip():
    hashed = get_password_hash("Secret@123")
    assert hashed != "Secret@123"
    assert verify_password("Secret@123", hashed)
    assert not verify_password("Secret@124", hashed)


def test_verify_password_rejects_missing_or_malformed_hash():
    assert not verify_password("Secret@123", "")
    assert not verify_password("Secret@123", "not-a-bcrypt-hash")


def test_token_carries_claims():
    token = create_access_token({"sub": "abc", "role": "user"})
    payload = verify_token(token)
    assert payload["sub"] == "abc"
    assert payload["role"] == "user"
    assert "exp" in payload


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "abc"}, expires_delta=timedelta(seconds=-10))
    with pytest.raises(JWTError):
        verify_token(token)


def test_tampered_token_is_rejected():
    header, _, signature = create_access_token({"sub": "abc"}).split(".")
    _, forged_payload, _ = create_access_token({"sub": "admin", "role": "super_admin"}).split(".")
    with pytest.raises(JWTError):
        verify_token(f"{header}.{forged_payload}.{signature}")


def test_otp_is_six_digits():
    for _ in range(50):
        code = generate_otp()
        assert len(code) == 6
        assert code.isdigit()


def test_email_and_phone_validators():
    assert is_valid_email("a@b.co")
    assert not is_valid_email("not-an-email")
    assert not is_valid_email("a b@c.com")
    assert is_valid_phone("+91 98765 43210")
    assert is_valid_phone("9876543210")
    assert not is_valid_phone("12345")
    assert not is_valid_phone("phone-number")


@pytest.mark.parametrize("password, fragment", [
    ("Ab1@", "at least 8"),
    ("secret@123", "uppercase"),
    ("SECRET@123", "lowercase"),
    ("Secret@abc", "number"),
    ("Secret1234", "special character"),
])
def test_password_policy(password, fragment):
    assert fragment in password_policy_violation(password)


def test_password_policy_accepts_strong_password():
    assert password_policy_violation("Secret@123") is None
