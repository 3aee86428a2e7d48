import argparse

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from devcamper.application.services.bootcamp_service import bootcamp_slug
from devcamper.application.services.course_service import refresh_average_cost
from devcamper.application.services.review_service import refresh_average_rating
from devcamper.application.services.security_service import hash_password
from devcamper.domain.courses import Career, MinimumSkill
from devcamper.domain.roles import UserRole
from devcamper.infrastructure.db.models import Bootcamp, Course, Review, User
from devcamper.infrastructure.db.session import SessionLocal
from devcamper.infrastructure.logging import configure_logging, get_logger

logger = get_logger(__name__)

DEMO_PASSWORD = "123456"

USERS = [
    ("Admin Account", "admin@devcamper.io", UserRole.admin),
    ("John Doe", "john@devcamper.io", UserRole.publisher),
    ("Kevin Smith", "kevin@devcamper.io", UserRole.publisher),
    ("Mary Williams", "mary@devcamper.io", UserRole.publisher),
    ("Jane Doe", "jane@devcamper.io", UserRole.user),
    ("Sasha Ryan", "sasha@devcamper.io", UserRole.user),
]

BOOTCAMPS = [
    {
        "owner": "john@devcamper.io",
        "name": "Devworks Bootcamp",
        "description": "Devworks is a full stack JavaScript Bootcamp located in the heart of Boston.",
        "website": "https://devworks.com",
        "phone": "(111) 111-1111",
        "email": "enroll@devworks.com",
        "address": "233 Bay State Rd Boston MA 02215",
        "location": {"longitude": -71.104028, "latitude": 42.350846, "city": "Boston", "state": "MA", "zipcode": "02215"},
        "careers": [Career.web_development, Career.ui_ux, Career.business],
        "housing": True,
        "job_assistance": True,
        "job_guarantee": False,
        "accept_gi": True,
    },
    {
        "owner": "kevin@devcamper.io",
        "name": "ModernTech Bootcamp",
        "description": "ModernTech has one goal, and that is to make you a rockstar developer and/or designer.",
        "website": "https://moderntech.com",
        "phone": "(222) 222-2222",
        "email": "enroll@moderntech.com",
        "address": "220 Pawtucket St, Lowell, MA 01854",
        "location": {"longitude": -71.324643, "latitude": 42.646342, "city": "Lowell", "state": "MA", "zipcode": "01854"},
        "careers": [Career.web_development, Career.ui_ux, Career.mobile_development],
        "housing": False,
        "job_assistance": True,
        "job_guarantee": False,
        "accept_gi": True,
    },
    {
        "owner": "mary@devcamper.io",
        "name": "Codemasters",
        "description": "Is coding your passion? Codemasters will give you the skills and the tools to become the best.",
        "website": "https://codemasters.com",
        "phone": "(333) 333-3333",
        "email": "enroll@codemasters.com",
        "address": "85 South Prospect Street Burlington VT 05405",
        "location": {"longitude": -73.197293, "latitude": 44.477302, "city": "Burlington", "state": "VT", "zipcode": "05405"},
        "careers": [Career.web_development, Career.data_science, Career.business],
        "housing": False,
        "job_assistance": False,
        "job_guarantee": False,
        "accept_gi": False,
    },
]

COURSES = [
    ("Devworks Bootcamp", "Front End Web Development", "8", 8000, MinimumSkill.beginner, True),
    ("Devworks Bootcamp", "Full Stack Web Development", "12", 10000, MinimumSkill.intermediate, True),
    ("ModernTech Bootcamp", "Web Design & Development", "10", 12000, MinimumSkill.beginner, True),
    ("ModernTech Bootcamp", "Mobile Development", "12", 15000, MinimumSkill.intermediate, False),
    ("Codemasters", "Python with Django", "10", 9000, MinimumSkill.intermediate, False),
    ("Codemasters", "Data Science Program", "14", 18000, MinimumSkill.advanced, True),
]

REVIEWS = [
    ("Devworks Bootcamp", "jane@devcamper.io", "Learned a ton!", "Great instructors and a solid curriculum.", 10),
    ("Devworks Bootcamp", "sasha@devcamper.io", "Great bootcamp", "Housing helped a lot while studying.", 8),
    ("ModernTech Bootcamp", "jane@devcamper.io", "Good but fast", "The pace was hard at the beginning.", 7),
    ("Codemasters", "sasha@devcamper.io", "Worth it", "Found a data job two months after finishing.", 9),
]


def create_user_if_missing(db: Session, name: str, email: str, role: UserRole) -> User:
    existing = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if existing is not None:
        return existing

    user = User(name=name, email=email, role=role.value, hashed_password=hash_password(DEMO_PASSWORD), is_active=True)
    db.add(user)
    db.flush()
    return user


def create_bootcamp_if_missing(db: Session, owner: User, data: dict) -> Bootcamp:
    existing = db.execute(select(Bootcamp).where(Bootcamp.name == data["name"])).scalar_one_or_none()
    if existing is not None:
        return existing

    location = data["location"]
    bootcamp = Bootcamp(
        user_id=owner.id,
        name=data["name"],
        slug=bootcamp_slug(data["name"]),
        description=data["description"],
        website=data["website"],
        phone=data["phone"],
        email=data["email"],
        address=data["address"],
        formatted_address=data["address"],
        careers=[career.value for career in data["careers"]],
        housing=data["housing"],
        job_assistance=data["job_assistance"],
        job_guarantee=data["job_guarantee"],
        accept_gi=data["accept_gi"],
        country="US",
        **location,
    )
    db.add(bootcamp)
    db.flush()
    return bootcamp


def create_course_if_missing(
    db: Session,
    bootcamp: Bootcamp,
    title: str,
    weeks: str,
    tuition: int,
    minimum_skill: MinimumSkill,
    scholarship_available: bool,
) -> Course:
    existing = db.execute(
        select(Course).where(Course.bootcamp_id == bootcamp.id, Course.title == title)
    ).scalar_one_or_none()
    if existing is not None:
        return existing

    course = Course(
        bootcamp_id=bootcamp.id,
        user_id=bootcamp.user_id,
        title=title,
        description=f"{title} at {bootcamp.name}.",
        weeks=weeks,
        tuition=tuition,
        minimum_skill=minimum_skill.value,
        scholarship_available=scholarship_available,
    )
    db.add(course)
    db.flush()
    return course


def create_review_if_missing(db: Session, bootcamp: Bootcamp, user: User, title: str, text: str, rating: int) -> Review:
    existing = db.execute(
        select(Review).where(Review.bootcamp_id == bootcamp.id, Review.user_id == user.id)
    ).scalar_one_or_none()
    if existing is not None:
        return existing

    review = Review(bootcamp_id=bootcamp.id, user_id=user.id, title=title, text=text, rating=rating)
    db.add(review)
    db.flush()
    return review


def import_data(db: Session) -> None:
    users = {email: create_user_if_missing(db=db, name=name, email=email, role=role) for name, email, role in USERS}
    bootcamps = {
        data["name"]: create_bootcamp_if_missing(db=db, owner=users[data["owner"]], data=data) for data in BOOTCAMPS
    }
    for bootcamp_name, title, weeks, tuition, minimum_skill, scholarship in COURSES:
        create_course_if_missing(
            db=db,
            bootcamp=bootcamps[bootcamp_name],
            title=title,
            weeks=weeks,
            tuition=tuition,
            minimum_skill=minimum_skill,
            scholarship_available=scholarship,
        )
    for bootcamp_name, email, title, text, rating in REVIEWS:
        create_review_if_missing(db=db, bootcamp=bootcamps[bootcamp_name], user=users[email], title=title, text=text, rating=rating)

    for bootcamp in bootcamps.values():
        refresh_average_cost(db=db, bootcamp_id=bootcamp.id)
        refresh_average_rating(db=db, bootcamp_id=bootcamp.id)
    db.commit()
    logger.info("seed_data_imported", users=len(users), bootcamps=len(bootcamps), courses=len(COURSES), reviews=len(REVIEWS))


def destroy_data(db: Session) -> None:
    for model in (Review, Course, Bootcamp, User):
        db.execute(delete(model))
    db.commit()
    logger.info("seed_data_destroyed")


def main() -> None:
    parser = argparse.ArgumentParser(description="Import or destroy demo bootcamp directory data.")
    parser.add_argument("action", choices=["import", "destroy"])
    args = parser.parse_args()

    configure_logging()
    db = SessionLocal()
    try:
        if args.action == "import":
            import_data(db)
        else:
            destroy_data(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
