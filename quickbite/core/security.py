"""
Password hashing, JWT tokens and input validators
"""
import re
import secrets
from datetime import timedelta
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from quickbite.core.config import settings
from quickbite.core.database import utcnow

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[\d\s\-()]{10,15}$")
PASSWORD_SYMBOLS = "@$!%*?&"
PASSWORD_MIN_LENGTH = 8


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Malformed hash in storage
        return False


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = utcnow() + (expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> Dict[str, Any]:
    """Decode a token; raises JWTError when it is malformed, forged or expired"""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


def generate_otp() -> str:
    """Six digit numeric one-time code"""
    return str(100000 + secrets.randbelow(900000))


def is_valid_email(email: str) -> bool:
    return bool(email) and EMAIL_RE.match(email) is not None


def is_valid_phone(phone: str) -> bool:
    if not phone:
        return False
    return PHONE_RE.match(re.sub(r"\s", "", phone)) is not None


def password_policy_violation(password: str) -> Optional[str]:
    """Return a message describing the first policy violation, or None"""
    if len(password) < PASSWORD_MIN_LENGTH:
        return f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
    if not re.search(r"[A-Z]", password):
        return "Password must contain at least one uppercase letter"
    if not re.search(r"[a-z]", password):
        return "Password must contain at least one lowercase letter"
    if not re.search(r"\d", password):
        return "Password must contain at least one number"
    if not any(ch in PASSWORD_SYMBOLS for ch in password):
        return f"Password must contain at least one special character ({PASSWORD_SYMBOLS})"
    return None


__all__ = [
    "JWTError",
    "create_access_token",
    "generate_otp",
    "get_password_hash",
    "is_valid_email",
    "is_valid_phone",
    "password_policy_violation",
    "verify_password",
    "verify_token",
]
