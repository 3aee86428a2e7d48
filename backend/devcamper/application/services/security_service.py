import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, cast

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from devcamper.config import settings
from devcamper.infrastructure.db.models import User
from devcamper.infrastructure.logging import get_logger

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"
RESET_TOKEN_BYTES = 20

password_hasher = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return cast(str, password_hasher.hash(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return cast(bool, password_hasher.verify(plain_password, hashed_password))


def create_access_token(user_id: int, expires_minutes: int | None = None) -> str:
    """Sign a bearer token for ``user_id`` valid for the configured lifetime."""
    issued_at = datetime.now(timezone.utc)
    if expires_minutes is None:
        expires_minutes = settings.jwt_access_token_expire_minutes
    claims = {
        "sub": str(user_id),
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=expires_minutes),
    }
    return cast(str, jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm))


def decode_access_token(token: str) -> int | None:
    try:
        claims = cast(dict[str, Any], jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]))
    except JWTError:
        return None
    if claims.get("type") != ACCESS_TOKEN_TYPE:
        return None
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        return None


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_reset_token() -> tuple[str, str]:
    """Return the plain token for the email link and the digest stored on the user."""
    token = secrets.token_hex(RESET_TOKEN_BYTES)
    return token, hash_reset_token(token)


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    normalized = email.strip().lower()
    user = db.execute(select(User).where(func.lower(User.email) == normalized)).scalar_one_or_none()
    if user is None:
        logger.info("login_failed", reason="unknown_email")
        return None
    if not user.is_active:
        logger.info("login_failed", reason="inactive", user_id=user.id)
        return None
    if not verify_password(password, user.hashed_password):
        logger.info("login_failed", reason="bad_password", user_id=user.id)
        return None
    return user
