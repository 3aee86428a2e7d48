from sqlalchemy import func, select
from sqlalchemy.orm import Session

from devcamper.application.errors import ConflictError, ForbiddenError, NotFoundError
from devcamper.application.services.bootcamp_service import is_owner_or_admin, serialize_bootcamp_summary
from devcamper.infrastructure.db.collection import serialize_document
from devcamper.infrastructure.db.models import Bootcamp, Review, User
from devcamper.infrastructure.logging import get_logger
from devcamper.interfaces.api.v1.schemas.review import ReviewCreate, ReviewUpdate

logger = get_logger(__name__)


def serialize_review(review: Review, include_bootcamp: bool = False) -> dict:
    document = serialize_document(review)
    if include_bootcamp:
        document["bootcamp"] = serialize_bootcamp_summary(review.bootcamp)
    return document


def get_review_or_raise(db: Session, review_id: int) -> Review:
    review = db.get(Review, review_id)
    if review is None:
        raise NotFoundError(f"No review found with the id of {review_id}")
    return review


def list_reviews_for_bootcamp(db: Session, bootcamp_id: int) -> list[Review]:
    return list(db.execute(select(Review).where(Review.bootcamp_id == bootcamp_id).order_by(Review.id)).scalars())


def refresh_average_rating(db: Session, bootcamp_id: int) -> float | None:
    db.flush()
    average = db.execute(select(func.avg(Review.rating)).where(Review.bootcamp_id == bootcamp_id)).scalar_one()
    average_rating = round(float(average), 1) if average is not None else None
    bootcamp = db.get(Bootcamp, bootcamp_id)
    if bootcamp is not None:
        bootcamp.average_rating = average_rating
    return average_rating


def _ensure_review_owner(review: Review, user: User, action: str) -> None:
    if not is_owner_or_admin(review.user_id, user):
        raise ForbiddenError(f"User {user.id} is not authorized to {action} review {review.id}")


def create_review(db: Session, bootcamp: Bootcamp, payload: ReviewCreate, user: User) -> Review:
    existing = db.execute(
        select(Review.id).where(Review.bootcamp_id == bootcamp.id, Review.user_id == user.id)
    ).first()
    if existing is not None:
        raise ConflictError("User has already reviewed this bootcamp")

    review = Review(
        bootcamp_id=bootcamp.id,
        user_id=user.id,
        title=payload.title,
        text=payload.text,
        rating=payload.rating,
    )
    db.add(review)
    average_rating = refresh_average_rating(db=db, bootcamp_id=bootcamp.id)
    db.commit()
    db.refresh(review)
    logger.info("review_created", review_id=review.id, bootcamp_id=bootcamp.id, average_rating=average_rating)
    return review


def update_review(db: Session, review: Review, payload: ReviewUpdate, user: User) -> Review:
    _ensure_review_owner(review, user, action="update")
    values = payload.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in values.items():
        setattr(review, field, value)
    if "rating" in values:
        refresh_average_rating(db=db, bootcamp_id=review.bootcamp_id)
    db.commit()
    db.refresh(review)
    logger.info("review_updated", review_id=review.id, fields=sorted(values))
    return review


def delete_review(db: Session, review: Review, user: User) -> None:
    _ensure_review_owner(review, user, action="delete")
    review_id, bootcamp_id = review.id, review.bootcamp_id
    db.delete(review)
    refresh_average_rating(db=db, bootcamp_id=bootcamp_id)
    db.commit()
    logger.info("review_deleted", review_id=review_id, bootcamp_id=bootcamp_id)
