from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from devcamper.application.services.advanced_results_service import Populate
from devcamper.application.services.bootcamp_service import BOOTCAMP_SUMMARY_FIELDS, get_bootcamp_or_raise
from devcamper.application.services.review_service import (
    create_review,
    delete_review,
    get_review_or_raise,
    list_reviews_for_bootcamp,
    serialize_review,
    update_review,
)
from devcamper.infrastructure.db.models import Review, User
from devcamper.infrastructure.db.session import get_db
from devcamper.interfaces.api.v1.dependencies.advanced_results import advanced_results
from devcamper.interfaces.api.v1.dependencies.auth import require_reviewer
from devcamper.interfaces.api.v1.schemas.common import DeleteResponse
from devcamper.interfaces.api.v1.schemas.pagination import ListingResponse
from devcamper.interfaces.api.v1.schemas.review import ReviewCreate, ReviewEnvelope, ReviewListResponse, ReviewUpdate

router = APIRouter(prefix="/reviews", tags=["reviews"])
bootcamp_reviews_router = APIRouter(prefix="/bootcamps/{bootcamp_id}/reviews", tags=["reviews"])

REVIEW_POPULATE = Populate(path="bootcamp", select=BOOTCAMP_SUMMARY_FIELDS)


@router.get(
    "",
    response_model=ListingResponse,
    summary="List reviews",
    description="Filter, select, sort and paginate reviews across bootcamps.",
)
def get_reviews(results: dict = Depends(advanced_results(Review, populate=REVIEW_POPULATE))):
    return results


@router.get("/{review_id}", response_model=ReviewEnvelope, responses={404: {"description": "Review not found"}})
def get_review(review_id: int, db: Session = Depends(get_db)):
    review = get_review_or_raise(db=db, review_id=review_id)
    return {"success": True, "data": serialize_review(review, include_bootcamp=True)}


@router.put("/{review_id}", response_model=ReviewEnvelope)
def update_review_endpoint(
    review_id: int,
    payload: ReviewUpdate,
    current_user: User = Depends(require_reviewer),
    db: Session = Depends(get_db),
):
    review = get_review_or_raise(db=db, review_id=review_id)
    updated = update_review(db=db, review=review, payload=payload, user=current_user)
    return {"success": True, "data": serialize_review(updated)}


@router.delete("/{review_id}", response_model=DeleteResponse)
def delete_review_endpoint(
    review_id: int,
    current_user: User = Depends(require_reviewer),
    db: Session = Depends(get_db),
):
    review = get_review_or_raise(db=db, review_id=review_id)
    delete_review(db=db, review=review, user=current_user)
    return DeleteResponse()


@bootcamp_reviews_router.get("", response_model=ReviewListResponse, summary="List reviews of a bootcamp")
def get_bootcamp_reviews(bootcamp_id: int, db: Session = Depends(get_db)):
    get_bootcamp_or_raise(db=db, bootcamp_id=bootcamp_id)
    reviews = list_reviews_for_bootcamp(db=db, bootcamp_id=bootcamp_id)
    return {"success": True, "count": len(reviews), "data": [serialize_review(review) for review in reviews]}


@bootcamp_reviews_router.post("", response_model=ReviewEnvelope, status_code=status.HTTP_201_CREATED)
def create_review_endpoint(
    bootcamp_id: int,
    payload: ReviewCreate,
    current_user: User = Depends(require_reviewer),
    db: Session = Depends(get_db),
):
    bootcamp = get_bootcamp_or_raise(db=db, bootcamp_id=bootcamp_id)
    review = create_review(db=db, bootcamp=bootcamp, payload=payload, user=current_user)
    return {"success": True, "data": serialize_review(review)}
