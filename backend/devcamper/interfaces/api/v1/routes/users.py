from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from devcamper.application.services.user_service import (
    create_user,
    delete_user,
    get_user_or_raise,
    serialize_user,
    update_user,
)
from devcamper.infrastructure.db.models import User
from devcamper.infrastructure.db.session import get_db
from devcamper.interfaces.api.v1.dependencies.advanced_results import advanced_results
from devcamper.interfaces.api.v1.dependencies.auth import require_admin
from devcamper.interfaces.api.v1.schemas.common import DeleteResponse
from devcamper.interfaces.api.v1.schemas.pagination import ListingResponse
from devcamper.interfaces.api.v1.schemas.user import UserCreate, UserEnvelope, UserUpdate

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_admin)])


@router.get(
    "",
    response_model=ListingResponse,
    summary="List users",
    description="Admin only. Supports the same query options as other listings.",
)
def get_users(results: dict = Depends(advanced_results(User))):
    return results


@router.post("", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def create_user_endpoint(payload: UserCreate, db: Session = Depends(get_db)):
    user = create_user(db=db, payload=payload)
    return {"success": True, "data": serialize_user(user)}


@router.get("/{user_id}", response_model=UserEnvelope, responses={404: {"description": "User not found"}})
def get_user(user_id: int, db: Session = Depends(get_db)):
    user = get_user_or_raise(db=db, user_id=user_id)
    return {"success": True, "data": serialize_user(user)}


@router.put("/{user_id}", response_model=UserEnvelope)
def update_user_endpoint(user_id: int, payload: UserUpdate, db: Session = Depends(get_db)):
    user = get_user_or_raise(db=db, user_id=user_id)
    updated = update_user(db=db, user=user, payload=payload)
    return {"success": True, "data": serialize_user(updated)}


@router.delete("/{user_id}", response_model=DeleteResponse)
def delete_user_endpoint(user_id: int, db: Session = Depends(get_db)):
    user = get_user_or_raise(db=db, user_id=user_id)
    delete_user(db=db, user=user)
    return DeleteResponse()
