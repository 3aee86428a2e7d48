import math

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from devcamper.application.errors import ForbiddenError, NotFoundError
from devcamper.application.services.bootcamp_service import (
    ensure_bootcamp_owner,
    is_owner_or_admin,
    serialize_bootcamp_summary,
)
from devcamper.infrastructure.db.collection import serialize_document
from devcamper.infrastructure.db.models import Bootcamp, Course, User
from devcamper.infrastructure.logging import get_logger
from devcamper.interfaces.api.v1.schemas.course import CourseCreate, CourseUpdate

logger = get_logger(__name__)


def serialize_course(course: Course, include_bootcamp: bool = False) -> dict:
    document = serialize_document(course)
    if include_bootcamp:
        document["bootcamp"] = serialize_bootcamp_summary(course.bootcamp)
    return document


def get_course_or_raise(db: Session, course_id: int) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError(f"No course with the id of {course_id}")
    return course


def list_courses_for_bootcamp(db: Session, bootcamp_id: int) -> list[Course]:
    return list(db.execute(select(Course).where(Course.bootcamp_id == bootcamp_id).order_by(Course.id)).scalars())


def refresh_average_cost(db: Session, bootcamp_id: int) -> int | None:
    db.flush()
    average = db.execute(select(func.avg(Course.tuition)).where(Course.bootcamp_id == bootcamp_id)).scalar_one()
    average_cost = math.ceil(float(average) / 10) * 10 if average is not None else None
    bootcamp = db.get(Bootcamp, bootcamp_id)
    if bootcamp is not None:
        bootcamp.average_cost = average_cost
    return average_cost


def _ensure_course_owner(course: Course, user: User, action: str) -> None:
    if not is_owner_or_admin(course.user_id, user):
        raise ForbiddenError(f"User {user.id} is not authorized to {action} course {course.id}")


def create_course(db: Session, bootcamp: Bootcamp, payload: CourseCreate, user: User) -> Course:
    ensure_bootcamp_owner(bootcamp, user, action="add a course to")
    course = Course(
        bootcamp_id=bootcamp.id,
        user_id=user.id,
        title=payload.title,
        description=payload.description,
        weeks=payload.weeks,
        tuition=payload.tuition,
        minimum_skill=payload.minimum_skill.value,
        scholarship_available=payload.scholarship_available,
    )
    db.add(course)
    average_cost = refresh_average_cost(db=db, bootcamp_id=bootcamp.id)
    db.commit()
    db.refresh(course)
    logger.info("course_created", course_id=course.id, bootcamp_id=bootcamp.id, average_cost=average_cost)
    return course


def update_course(db: Session, course: Course, payload: CourseUpdate, user: User) -> Course:
    _ensure_course_owner(course, user, action="update")
    values = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "minimum_skill" in values:
        values["minimum_skill"] = payload.minimum_skill.value  # type: ignore[union-attr]
    for field, value in values.items():
        setattr(course, field, value)
    if "tuition" in values:
        refresh_average_cost(db=db, bootcamp_id=course.bootcamp_id)
    db.commit()
    db.refresh(course)
    logger.info("course_updated", course_id=course.id, fields=sorted(values))
    return course


def delete_course(db: Session, course: Course, user: User) -> None:
    _ensure_course_owner(course, user, action="delete")
    course_id, bootcamp_id = course.id, course.bootcamp_id
    db.delete(course)
    average_cost = refresh_average_cost(db=db, bootcamp_id=bootcamp_id)
    db.commit()
    logger.info("course_deleted", course_id=course_id, bootcamp_id=bootcamp_id, average_cost=average_cost)
