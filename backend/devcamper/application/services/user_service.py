from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from devcamper.application.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from devcamper.application.services.security_service import generate_reset_token, hash_password, hash_reset_token, verify_password
from devcamper.config import settings
from devcamper.infrastructure.db.collection import serialize_document
from devcamper.infrastructure.db.models import User
from devcamper.infrastructure.logging import get_logger
from devcamper.interfaces.api.v1.schemas.auth import UpdateDetailsRequest
from devcamper.interfaces.api.v1.schemas.user import UserCreate, UserUpdate

logger = get_logger(__name__)


def serialize_user(user: User) -> dict:
    return serialize_document(user)


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_or_raise(db: Session, user_id: int) -> User:
    user = get_user_by_id(db=db, user_id=user_id)
    if user is None:
        raise NotFoundError(f"User not found with id of {user_id}")
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(func.lower(User.email) == email.strip().lower())).scalar_one_or_none()


def _ensure_email_available(db: Session, email: str) -> None:
    if get_user_by_email(db=db, email=email) is not None:
        raise ConflictError("User already exists")


def create_user(db: Session, payload: UserCreate) -> User:
    _ensure_email_available(db=db, email=payload.email)
    user = User(
        name=payload.name,
        email=payload.email,
        role=payload.role.value,
        hashed_password=hash_password(payload.password),
        is_active=payload.is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("user_created", user_id=user.id, role=user.role)
    return user


def update_user(db: Session, user: User, payload: UserUpdate) -> User:
    if payload.email is not None and payload.email != user.email:
        if payload.email.lower() != user.email.lower():
            _ensure_email_available(db=db, email=payload.email)
        user.email = payload.email
    if payload.name is not None:
        user.name = payload.name
    if payload.password is not None:
        user.hashed_password = hash_password(payload.password)
    if payload.role is not None:
        user.role = payload.role.value
    if payload.is_active is not None:
        user.is_active = payload.is_active

    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user: User) -> None:
    user_id = user.id
    db.delete(user)
    db.commit()
    logger.info("user_deleted", user_id=user_id)


def update_user_details(db: Session, user: User, payload: UpdateDetailsRequest) -> User:
    return update_user(db=db, user=user, payload=UserUpdate(name=payload.name, email=payload.email))


def change_password(db: Session, user: User, *, current_password: str, new_password: str) -> User:
    if not verify_password(current_password, user.hashed_password):
        raise UnauthorizedError("Password is incorrect")
    user.hashed_password = hash_password(new_password)
    db.commit()
    db.refresh(user)
    logger.info("user_password_changed", user_id=user.id)
    return user


def start_password_reset(db: Session, email: str) -> tuple[User, str]:
    user = get_user_by_email(db=db, email=email)
    if user is None:
        raise NotFoundError("There is no user with that email")

    token, hashed_token = generate_reset_token()
    user.reset_password_token = hashed_token
    user.reset_password_expire = datetime.now(timezone.utc) + timedelta(minutes=settings.reset_password_expire_minutes)
    db.commit()
    logger.info("password_reset_requested", user_id=user.id)
    return user, token


def clear_password_reset(db: Session, user: User) -> None:
    user.reset_password_token = None
    user.reset_password_expire = None
    db.commit()


def reset_password(db: Session, *, token: str, new_password: str) -> User:
    user = db.execute(
        select(User).where(
            User.reset_password_token == hash_reset_token(token),
            User.reset_password_expire > datetime.now(timezone.utc),
        )
    ).scalar_one_or_none()
    if user is None:
        raise ValidationError("Invalid token")

    user.hashed_password = hash_password(new_password)
    user.reset_password_token = None
    user.reset_password_expire = None
    db.commit()
    db.refresh(user)
    logger.info("password_reset_completed", user_id=user.id)
    return user
