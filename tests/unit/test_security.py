"""Tests for password hashing and session tokens."""

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from app.config import settings
from app.core.security import (
    create_session_token,
    get_password_hash,
    validate_password_strength,
    verify_password,
    verify_session_token,
)


@pytest.mark.unit
class TestPasswords:
    """Tests for bcrypt helpers."""

    def test_hash_and_verify(self) -> None:
        hashed = get_password_hash("Sup3r$ecret")
        assert hashed != "Sup3r$ecret"
        assert verify_password("Sup3r$ecret", hashed)
        assert not verify_password("wrong", hashed)

    def test_long_password(self) -> None:
        """Passwords beyond bcrypt's 72-byte limit still distinguish their tails."""
        base = "A1!a" * 20
        hashed = get_password_hash(base + "x")
        assert verify_password(base + "x", hashed)
        assert not verify_password(base + "y", hashed)

    def test_malformed_hash_does_not_raise(self) -> None:
        assert verify_password("anything", "not-a-bcrypt-hash") is False

    @pytest.mark.parametrize(
        ("password", "fragment"),
        [
            ("Sh0rt!", "8 characters"),
            ("alllower1!", "uppercase"),
            ("ALLUPPER1!", "lowercase"),
            ("NoDigits!!", "digit"),
            ("NoSpecial1", "special"),
        ],
    )
    def test_strength_rules(self, password: str, fragment: str) -> None:
        is_valid, message = validate_password_strength(password)
        assert not is_valid
        assert message is not None and fragment in message

    def test_strong_password(self) -> None:
        assert validate_password_strength("Sup3r$ecret") == (True, None)


@pytest.mark.unit
class TestSessionTokens:
    """Tests for signed session tokens."""

    def test_roundtrip_claims(self) -> None:
        token = create_session_token("abc123", email="a@example.com", role="user")
        claims = verify_session_token(token)
        assert claims is not None
        assert claims.user_id == "abc123"
        assert claims.email == "a@example.com"
        assert claims.role == "user"

    def test_expired_token_rejected(self) -> None:
        token = create_session_token("abc123", expires_delta=timedelta(seconds=-1))
        assert verify_session_token(token) is None

    def test_wrong_signature_rejected(self) -> None:
        token = jwt.encode(
            {"sub": "abc123", "type": "session", "exp": datetime.now(UTC) + timedelta(hours=1)},
            "another-secret-key-that-is-also-32-characters",
            algorithm=settings.ALGORITHM,
        )
        assert verify_session_token(token) is None

    def test_wrong_type_rejected(self) -> None:
        token = jwt.encode(
            {"sub": "abc123", "type": "refresh", "exp": datetime.now(UTC) + timedelta(hours=1)},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )
        assert verify_session_token(token) is None

    def test_missing_subject_rejected(self) -> None:
        token = jwt.encode(
            {"type": "session", "exp": datetime.now(UTC) + timedelta(hours=1)},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )
        assert verify_session_token(token) is None

    def test_garbage_rejected(self) -> None:
        assert verify_session_token("not.a.token") is None
