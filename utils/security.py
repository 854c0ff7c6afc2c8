from datetime import datetime, timedelta
from typing import Optional
from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, InvalidHashError, VerificationError
from jose import JWTError, jwt
from config import settings
import secrets

ph = PasswordHasher(
    time_cost=3,
    memory_cost=65536,
    parallelism=4,
    hash_len=32,
    salt_len=16
)

def verify_key(plain_key: str, hashed_key: str) -> bool:
    """Verify an API key against its Argon2 hash"""
    if not plain_key or not hashed_key:
        return False

    try:
        return ph.verify(hashed_key, plain_key + settings.password_pepper)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False

def get_key_hash(key: str) -> str:
    """Hash an API key using Argon2id with pepper"""
    return ph.hash(key + settings.password_pepper)

def create_session_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed session token"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.session_expire_minutes)

    to_encode.update({
        "exp": expire,
        "iat": datetime.utcnow(),
        "type": "session",
        "jti": secrets.token_urlsafe(16)
    })
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

def decode_session_token(token: str) -> Optional[dict]:
    """Decode and validate a session token"""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    if payload.get("type") != "session":
        return None

    return payload

def mask_sensitive_data(data: str, visible_chars: int = 4) -> str:
    """Mask sensitive data for logging"""
    if not data or len(data) <= visible_chars:
        return '*' * len(data) if data else ''
    return data[:visible_chars] + '*' * (len(data) - visible_chars)
