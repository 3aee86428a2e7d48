from collections.abc import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from devcamper.application.services.security_service import decode_access_token
from devcamper.domain.roles import UserRole
from devcamper.infrastructure.db.models import User
from devcamper.infrastructure.db.session import get_db

NOT_AUTHORIZED = "Not authorized to access this resource"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


def get_current_user(token: str | None = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=NOT_AUTHORIZED)
    user_id = decode_access_token(token)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=NOT_AUTHORIZED)
    user = db.get(User, user_id)
    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=NOT_AUTHORIZED)
    return user


def require_authenticated(current_user: User = Depends(get_current_user)) -> User:
    return current_user


def require_roles(allowed_roles: list[UserRole]) -> Callable:
    def checker(current_user: User = Depends(get_current_user)) -> User:
        allowed = {role.value for role in allowed_roles}
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"User role {current_user.role} is not authorized to access this resource",
            )
        return current_user

    return checker


def require_admin(current_user: User = Depends(require_roles([UserRole.admin]))) -> User:
    return current_user


def require_publisher(current_user: User = Depends(require_roles([UserRole.publisher, UserRole.admin]))) -> User:
    return current_user


def require_reviewer(current_user: User = Depends(require_roles([UserRole.user, UserRole.admin]))) -> User:
    return current_user
