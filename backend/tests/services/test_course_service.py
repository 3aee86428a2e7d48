import pytest

from devcamper.application.errors import ForbiddenError, NotFoundError
from devcamper.application.services.course_service import (
    create_course,
    delete_course,
    get_course_or_raise,
    refresh_average_cost,
    update_course,
)
from devcamper.domain.courses import MinimumSkill
from devcamper.interfaces.api.v1.schemas.course import CourseCreate, CourseUpdate
from tests.helpers.factories import create_bootcamp, create_course as create_course_row, refresh_entity


def build_payload(title: str, tuition: int) -> CourseCreate:
    return CourseCreate(
        title=title,
        description="Hands-on course.",
        weeks="8",
        tuition=tuition,
        minimum_skill=MinimumSkill.intermediate,
    )


def test_create_course_recomputes_average_cost(db_session, seeded_users):
    """
    Validate average cost after course creation.

    1. Seed a bootcamp for a publisher.
    2. Create two courses with tuition 8000 and 10001.
    3. Refresh the bootcamp.
    4. Validate average cost is rounded up to the next ten.
    """
    bootcamp = create_bootcamp(db_session, seeded_users["publisher"], "Cost Camp")
    create_course(db_session, bootcamp, build_payload("One", 8000), seeded_users["publisher"])
    course = create_course(db_session, bootcamp, build_payload("Two", 10001), seeded_users["publisher"])
    refresh_entity(db_session, bootcamp)
    assert course.user_id == seeded_users["publisher"].id
    assert course.minimum_skill == "intermediate"
    assert bootcamp.average_cost == 9010


def test_create_course_requires_bootcamp_owner(db_session, seeded_users):
    """
    Validate only owners add courses.

    1. Seed a bootcamp for one publisher.
    2. Create a course as another publisher.
    3. Receive ForbiddenError.
    """
    bootcamp = create_bootcamp(db_session, seeded_users["publisher"], "Guarded Camp")
    with pytest.raises(ForbiddenError):
        create_course(db_session, bootcamp, build_payload("Intruder", 100), seeded_users["other_publisher"])


def test_update_and_delete_course_refresh_average_cost(db_session, seeded_users):
    """
    Validate average cost follows updates and deletes.

    1. Seed a bootcamp with one course.
    2. Update tuition and validate the new average.
    3. Delete the course.
    4. Validate average cost is cleared.
    """
    publisher = seeded_users["publisher"]
    bootcamp = create_bootcamp(db_session, publisher, "Moving Camp")
    course = create_course(db_session, bootcamp, build_payload("Solo", 5000), publisher)

    update_course(db_session, course, CourseUpdate(tuition=7005), publisher)
    refresh_entity(db_session, bootcamp)
    assert bootcamp.average_cost == 7010

    course_id = course.id
    delete_course(db_session, course, publisher)
    refresh_entity(db_session, bootcamp)
    assert bootcamp.average_cost is None
    with pytest.raises(NotFoundError, match="No course with the id of"):
        get_course_or_raise(db_session, course_id)


def test_update_course_requires_course_owner(db_session, seeded_users):
    """
    Validate course ownership on update.

    1. Seed a course owned by one publisher.
    2. Update it as another publisher.
    3. Receive ForbiddenError.
    4. Validate admins may update it.
    """
    bootcamp = create_bootcamp(db_session, seeded_users["publisher"], "Owner Camp")
    course = create_course_row(db_session, bootcamp, "Owned Course")
    with pytest.raises(ForbiddenError):
        update_course(db_session, course, CourseUpdate(title="Hijack"), seeded_users["other_publisher"])
    updated = update_course(db_session, course, CourseUpdate(title="Renamed"), seeded_users["admin"])
    assert updated.title == "Renamed"


def test_refresh_average_cost_without_courses(db_session, seeded_users):
    """
    Validate empty bootcamps have no average cost.

    1. Seed a bootcamp without courses.
    2. Refresh the average cost.
    3. Validate None is returned.
    """
    bootcamp = create_bootcamp(db_session, seeded_users["publisher"], "Empty Camp")
    assert refresh_average_cost(db_session, bootcamp.id) is None
