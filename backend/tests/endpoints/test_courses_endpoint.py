from devcamper.domain.courses import MinimumSkill
from tests.helpers.auth import user_header
from tests.helpers.factories import create_bootcamp, create_course

COURSE_PAYLOAD = {
    "title": "Full Stack Web Development",
    "description": "Node, React and databases.",
    "weeks": "12",
    "tuition": 10000,
    "minimum_skill": "intermediate",
    "scholarship_available": True,
}


def test_get_courses_populates_bootcamp_summary(client, db_session, seeded_users):
    """
    Validate the course listing expands the parent bootcamp.

    1. Seed a bootcamp with two courses.
    2. Call the course listing sorted by tuition.
    3. Validate course order.
    4. Validate bootcamp summary holds id, name and description only.
    """
    bootcamp = create_bootcamp(db_session, seeded_users["publisher"], "Summary Camp")
    create_course(db_session, bootcamp, "Pricey", tuition=12000)
    create_course(db_session, bootcamp, "Cheap", tuition=3000)

    response = client.get("/api/v1/courses?sort=tuition")
    assert response.status_code == 200
    data = response.json()["data"]
    assert [course["title"] for course in data] == ["Cheap", "Pricey"]
    assert data[0]["bootcamp"] == {
        "id": bootcamp.id,
        "name": "Summary Camp",
        "description": "Summary Camp teaches practical software skills.",
    }


def test_get_courses_filters_by_operator_and_in(client, db_session, seeded_users):
    """
    Validate course filters.

    1. Seed courses with different tuition and skill.
    2. Filter by tuition[gte].
    3. Filter by minimum_skill[in].
    4. Validate both result sets.
    """
    bootcamp = create_bootcamp(db_session, seeded_users["publisher"], "Filter Camp")
    create_course(db_session, bootcamp, "Basics", tuition=4000, minimum_skill=MinimumSkill.beginner)
    create_course(db_session, bootcamp, "Middle", tuition=10000, minimum_skill=MinimumSkill.intermediate)
    create_course(db_session, bootcamp, "Expert", tuition=15000, minimum_skill=MinimumSkill.advanced)

    response = client.get("/api/v1/courses?tuition[gte]=10000&sort=tuition&select=title")
    assert [course["title"] for course in response.json()["data"]] == ["Middle", "Expert"]

    response = client.get("/api/v1/courses", params={"minimum_skill[in]": "beginner,advanced", "sort": "title"})
    assert [course["title"] for course in response.json()["data"]] == ["Basics", "Expert"]

    response = client.get("/api/v1/courses?tuition[gte]=lots")
    assert response.status_code == 400


def test_get_bootcamp_courses(client, db_session, seeded_users):
    """
    Validate per-bootcamp course listing.

    1. Seed two bootcamps with courses.
    2. List courses of the first bootcamp.
    3. Validate count and titles.
    4. Validate unknown bootcamp returns 404.
    """
    first = create_bootcamp(db_session, seeded_users["publisher"], "First Camp")
    second = create_bootcamp(db_session, seeded_users["other_publisher"], "Second Camp")
    create_course(db_session, first, "First A")
    create_course(db_session, first, "First B")
    create_course(db_session, second, "Second A")

    response = client.get(f"/api/v1/bootcamps/{first.id}/courses")
    assert response.status_code == 200
    payload = response.json()
    assert payload["count"] == 2
    assert [course["title"] for course in payload["data"]] == ["First A", "First B"]
    assert "pagination" not in payload

    assert client.get("/api/v1/bootcamps/999/courses").status_code == 404


def test_get_course_by_id(client, db_session, seeded_users):
    """
    Validate single course lookup.

    1. Seed a course.
    2. Fetch it by id and validate bootcamp summary.
    3. Fetch an unknown id and validate 404 message.
    """
    bootcamp = create_bootcamp(db_session, seeded_users["publisher"], "Single Camp")
    course = create_course(db_session, bootcamp, "Single Course")
    response = client.get(f"/api/v1/courses/{course.id}")
    assert response.status_code == 200
    assert response.json()["data"]["bootcamp"]["name"] == "Single Camp"

    response = client.get("/api/v1/courses/999")
    assert response.status_code == 404
    assert response.json()["error"] == "No course with the id of 999"


def test_create_course_updates_average_cost(client, db_session, seeded_users):
    """
    Validate course creation by bootcamp owner.

    1. Seed a bootcamp for a publisher.
    2. Create a course as another publisher and receive 403.
    3. Create two courses as owner.
    4. Validate the bootcamp average cost.
    """
    bootcamp = create_bootcamp(db_session, seeded_users["publisher"], "Average Camp")
    url = f"/api/v1/bootcamps/{bootcamp.id}/courses"

    response = client.post(url, json=COURSE_PAYLOAD, headers=user_header(seeded_users["other_publisher"]))
    assert response.status_code == 403

    headers = user_header(seeded_users["publisher"])
    response = client.post(url, json=COURSE_PAYLOAD, headers=headers)
    assert response.status_code == 201
    assert response.json()["data"]["bootcamp_id"] == bootcamp.id
    response = client.post(url, json={**COURSE_PAYLOAD, "title": "Front End", "tuition": 8005}, headers=headers)
    assert response.status_code == 201

    assert client.get(f"/api/v1/bootcamps/{bootcamp.id}").json()["data"]["average_cost"] == 9010


def test_create_course_rejects_invalid_skill(client, db_session, seeded_users):
    """
    Validate course payload validation.

    1. Seed a bootcamp.
    2. Create a course with an unknown skill level.
    3. Validate 400.
    """
    bootcamp = create_bootcamp(db_session, seeded_users["publisher"], "Strict Camp")
    response = client.post(
        f"/api/v1/bootcamps/{bootcamp.id}/courses",
        json={**COURSE_PAYLOAD, "minimum_skill": "wizard"},
        headers=user_header(seeded_users["publisher"]),
    )
    assert response.status_code == 400


def test_update_and_delete_course(client, db_session, seeded_users):
    """
    Validate course owner writes.

    1. Seed a course for a publisher.
    2. Update it as another publisher and receive 403.
    3. Update tuition as owner.
    4. Delete as admin and validate 404 afterwards.
    """
    bootcamp = create_bootcamp(db_session, seeded_users["publisher"], "Write Camp")
    course = create_course(db_session, bootcamp, "Write Course", tuition=1000)
    course_id = course.id
    url = f"/api/v1/courses/{course_id}"

    response = client.put(url, json={"tuition": 1}, headers=user_header(seeded_users["other_publisher"]))
    assert response.status_code == 403

    response = client.put(url, json={"tuition": 2000}, headers=user_header(seeded_users["publisher"]))
    assert response.status_code == 200
    assert response.json()["data"]["tuition"] == 2000

    response = client.delete(url, headers=user_header(seeded_users["admin"]))
    assert response.json() == {"success": True, "data": {}}
    assert client.get(url).status_code == 404
