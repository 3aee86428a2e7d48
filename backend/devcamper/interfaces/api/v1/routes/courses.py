from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from devcamper.application.services.advanced_results_service import Populate
from devcamper.application.services.bootcamp_service import BOOTCAMP_SUMMARY_FIELDS, get_bootcamp_or_raise
from devcamper.application.services.course_service import (
    create_course,
    delete_course,
    get_course_or_raise,
    list_courses_for_bootcamp,
    serialize_course,
    update_course,
)
from devcamper.infrastructure.db.models import Course, User
from devcamper.infrastructure.db.session import get_db
from devcamper.interfaces.api.v1.dependencies.advanced_results import advanced_results
from devcamper.interfaces.api.v1.dependencies.auth import require_publisher
from devcamper.interfaces.api.v1.schemas.common import DeleteResponse
from devcamper.interfaces.api.v1.schemas.course import CourseCreate, CourseEnvelope, CourseListResponse, CourseUpdate
from devcamper.interfaces.api.v1.schemas.pagination import ListingResponse

router = APIRouter(prefix="/courses", tags=["courses"])
bootcamp_courses_router = APIRouter(prefix="/bootcamps/{bootcamp_id}/courses", tags=["courses"])

COURSE_POPULATE = Populate(path="bootcamp", select=BOOTCAMP_SUMMARY_FIELDS)


@router.get(
    "",
    response_model=ListingResponse,
    summary="List courses",
    description="Filter, select, sort and paginate courses across bootcamps.",
)
def get_courses(results: dict = Depends(advanced_results(Course, populate=COURSE_POPULATE))):
    return results


@router.get("/{course_id}", response_model=CourseEnvelope, responses={404: {"description": "Course not found"}})
def get_course(course_id: int, db: Session = Depends(get_db)):
    course = get_course_or_raise(db=db, course_id=course_id)
    return {"success": True, "data": serialize_course(course, include_bootcamp=True)}


@router.put("/{course_id}", response_model=CourseEnvelope)
def update_course_endpoint(
    course_id: int,
    payload: CourseUpdate,
    current_user: User = Depends(require_publisher),
    db: Session = Depends(get_db),
):
    course = get_course_or_raise(db=db, course_id=course_id)
    updated = update_course(db=db, course=course, payload=payload, user=current_user)
    return {"success": True, "data": serialize_course(updated)}


@router.delete("/{course_id}", response_model=DeleteResponse)
def delete_course_endpoint(
    course_id: int,
    current_user: User = Depends(require_publisher),
    db: Session = Depends(get_db),
):
    course = get_course_or_raise(db=db, course_id=course_id)
    delete_course(db=db, course=course, user=current_user)
    return DeleteResponse()


@bootcamp_courses_router.get("", response_model=CourseListResponse, summary="List courses of a bootcamp")
def get_bootcamp_courses(bootcamp_id: int, db: Session = Depends(get_db)):
    get_bootcamp_or_raise(db=db, bootcamp_id=bootcamp_id)
    courses = list_courses_for_bootcamp(db=db, bootcamp_id=bootcamp_id)
    return {"success": True, "count": len(courses), "data": [serialize_course(course) for course in courses]}


@bootcamp_courses_router.post("", response_model=CourseEnvelope, status_code=status.HTTP_201_CREATED)
def create_course_endpoint(
    bootcamp_id: int,
    payload: CourseCreate,
    current_user: User = Depends(require_publisher),
    db: Session = Depends(get_db),
):
    bootcamp = get_bootcamp_or_raise(db=db, bootcamp_id=bootcamp_id)
    course = create_course(db=db, bootcamp=bootcamp, payload=payload, user=current_user)
    return {"success": True, "data": serialize_course(course)}
