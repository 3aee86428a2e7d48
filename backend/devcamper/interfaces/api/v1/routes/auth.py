from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from kombu.exceptions import OperationalError
from sqlalchemy.orm import Session

from devcamper.application.services.security_service import authenticate_user, create_access_token
from devcamper.application.services.user_service import (
    change_password,
    clear_password_reset,
    create_user,
    reset_password,
    serialize_user,
    start_password_reset,
    update_user_details,
)
from devcamper.domain.roles import UserRole
from devcamper.infrastructure.db.models import User
from devcamper.infrastructure.db.session import get_db
from devcamper.infrastructure.logging import get_logger
from devcamper.infrastructure.tasks.email_tasks import enqueue_password_reset_email_task
from devcamper.interfaces.api.v1.dependencies.auth import require_authenticated
from devcamper.interfaces.api.v1.schemas.auth import (
    AuthTokenResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
    UpdateDetailsRequest,
    UpdatePasswordRequest,
)
from devcamper.interfaces.api.v1.schemas.user import UserCreate, UserEnvelope

router = APIRouter(prefix="/auth", tags=["auth"])
logger = get_logger(__name__)


def _token_response(user: User) -> dict:
    return {"success": True, "token": create_access_token(user.id)}


@router.post("/register", response_model=AuthTokenResponse, summary="Register user")
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    user = create_user(
        db=db,
        payload=UserCreate(name=payload.name, email=payload.email, password=payload.password, role=UserRole(payload.role)),
    )
    return _token_response(user)


@router.post(
    "/login",
    response_model=AuthTokenResponse,
    summary="Login user",
    responses={401: {"description": "Invalid credentials"}},
)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db=db, email=payload.email, password=payload.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return _token_response(user)


@router.post(
    "/token",
    response_model=TokenResponse,
    summary="Issue access token",
    description="Authenticate with email/password form data and return a bearer token for protected endpoints.",
    responses={401: {"description": "Invalid credentials"}},
)
def issue_token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = authenticate_user(db=db, email=form_data.username, password=form_data.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return TokenResponse(access_token=create_access_token(user.id))


@router.get("/me", response_model=UserEnvelope, summary="Get current user")
def get_me(current_user: User = Depends(require_authenticated)):
    return {"success": True, "data": serialize_user(current_user)}


@router.put("/updatedetails", response_model=UserEnvelope, summary="Update name and email")
def update_details(
    payload: UpdateDetailsRequest,
    current_user: User = Depends(require_authenticated),
    db: Session = Depends(get_db),
):
    user = update_user_details(db=db, user=current_user, payload=payload)
    return {"success": True, "data": serialize_user(user)}


@router.put(
    "/updatepassword",
    response_model=AuthTokenResponse,
    summary="Change password",
    responses={401: {"description": "Current password is incorrect"}},
)
def update_password(
    payload: UpdatePasswordRequest,
    current_user: User = Depends(require_authenticated),
    db: Session = Depends(get_db),
):
    user = change_password(
        db=db,
        user=current_user,
        current_password=payload.current_password,
        new_password=payload.new_password,
    )
    return _token_response(user)


@router.post(
    "/forgotpassword",
    response_model=MessageResponse,
    summary="Request password reset",
    description="Stores a short-lived reset token and emails the reset link.",
    responses={404: {"description": "Unknown email"}},
)
def forgot_password(payload: ForgotPasswordRequest, request: Request, db: Session = Depends(get_db)):
    user, reset_token = start_password_reset(db=db, email=payload.email)
    reset_url = str(request.url_for("reset_password_endpoint", reset_token=reset_token))
    try:
        task_id = enqueue_password_reset_email_task(recipient=user.email, reset_url=reset_url)
    except OperationalError as exc:
        logger.error("password_reset_email_enqueue_failed", user_id=user.id, error=str(exc))
        clear_password_reset(db=db, user=user)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Email could not be sent") from exc
    logger.info("password_reset_email_enqueued", user_id=user.id, task_id=task_id)
    return MessageResponse(data="Email sent")


@router.put(
    "/resetpassword/{reset_token}",
    response_model=AuthTokenResponse,
    name="reset_password_endpoint",
    summary="Reset password",
    responses={400: {"description": "Invalid or expired token"}},
)
def reset_password_endpoint(reset_token: str, payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    user = reset_password(db=db, token=reset_token, new_password=payload.password)
    return _token_response(user)
