import math
from pathlib import PurePath

from slugify import slugify
from sqlalchemy import select
from sqlalchemy.orm import Session

from devcamper.application.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from devcamper.config import settings
from devcamper.domain.roles import UserRole
from devcamper.infrastructure.db.collection import serialize_document
from devcamper.infrastructure.db.models import Bootcamp, User
from devcamper.infrastructure.geocoding.geocoder import GeocodedLocation, geocode
from devcamper.infrastructure.logging import get_logger
from devcamper.infrastructure.storage.file_storage import save_upload
from devcamper.interfaces.api.v1.schemas.bootcamp import BootcampCreate, BootcampUpdate

logger = get_logger(__name__)

BOOTCAMP_SUMMARY_FIELDS = ("name", "description")
EARTH_RADIUS_MILES = 3963.0
LOCATION_FIELDS = ("longitude", "latitude", "formatted_address", "street", "city", "state", "zipcode", "country")


def bootcamp_slug(name: str) -> str:
    return slugify(name) or "bootcamp"


def serialize_bootcamp(bootcamp: Bootcamp) -> dict:
    return serialize_document(bootcamp)


def serialize_bootcamp_summary(bootcamp: Bootcamp) -> dict:
    return serialize_document(bootcamp, BOOTCAMP_SUMMARY_FIELDS)


def get_bootcamp_by_id(db: Session, bootcamp_id: int) -> Bootcamp | None:
    return db.get(Bootcamp, bootcamp_id)


def get_bootcamp_or_raise(db: Session, bootcamp_id: int) -> Bootcamp:
    bootcamp = get_bootcamp_by_id(db=db, bootcamp_id=bootcamp_id)
    if bootcamp is None:
        raise NotFoundError(f"Bootcamp not found with id of {bootcamp_id}")
    return bootcamp


def is_owner_or_admin(owner_id: int, user: User) -> bool:
    return owner_id == user.id or user.role == UserRole.admin.value


def ensure_bootcamp_owner(bootcamp: Bootcamp, user: User, action: str = "update") -> None:
    if not is_owner_or_admin(bootcamp.user_id, user):
        raise ForbiddenError(f"User {user.id} is not authorized to {action} bootcamp {bootcamp.id}")


def _apply_location(bootcamp: Bootcamp, location: GeocodedLocation | None) -> None:
    for field in LOCATION_FIELDS:
        setattr(bootcamp, field, getattr(location, field) if location is not None else None)


def _ensure_unique_name(db: Session, name: str) -> None:
    existing = db.execute(select(Bootcamp).where(Bootcamp.name == name)).scalar_one_or_none()
    if existing is not None:
        raise ConflictError("Bootcamp name already exists")


def create_bootcamp(db: Session, payload: BootcampCreate, owner: User) -> Bootcamp:
    if owner.role != UserRole.admin.value:
        published = db.execute(select(Bootcamp.id).where(Bootcamp.user_id == owner.id)).first()
        if published is not None:
            raise ValidationError(f"The user with id {owner.id} has already published a bootcamp")
    _ensure_unique_name(db=db, name=payload.name)

    values = payload.model_dump()
    values["careers"] = [career.value for career in payload.careers]
    bootcamp = Bootcamp(user_id=owner.id, slug=bootcamp_slug(payload.name), **values)
    _apply_location(bootcamp, geocode(payload.address))

    db.add(bootcamp)
    db.commit()
    db.refresh(bootcamp)
    logger.info("bootcamp_created", bootcamp_id=bootcamp.id, user_id=owner.id, city=bootcamp.city)
    return bootcamp


def update_bootcamp(db: Session, bootcamp: Bootcamp, payload: BootcampUpdate) -> Bootcamp:
    values = payload.model_dump(exclude_unset=True)
    if values.get("name") is not None and values["name"] != bootcamp.name:
        _ensure_unique_name(db=db, name=values["name"])
        bootcamp.slug = bootcamp_slug(values["name"])
    if payload.careers is not None:
        values["careers"] = [career.value for career in payload.careers]
    address_changed = values.get("address") is not None and values["address"] != bootcamp.address

    for field, value in values.items():
        if value is None:
            continue
        setattr(bootcamp, field, value)
    if address_changed:
        _apply_location(bootcamp, geocode(bootcamp.address))

    db.commit()
    db.refresh(bootcamp)
    logger.info("bootcamp_updated", bootcamp_id=bootcamp.id, fields=sorted(values))
    return bootcamp


def delete_bootcamp(db: Session, bootcamp: Bootcamp) -> None:
    bootcamp_id = bootcamp.id
    db.delete(bootcamp)
    db.commit()
    logger.info("bootcamp_deleted", bootcamp_id=bootcamp_id)


def distance_in_miles(latitude_a: float, longitude_a: float, latitude_b: float, longitude_b: float) -> float:
    lat_a, lng_a, lat_b, lng_b = map(math.radians, (latitude_a, longitude_a, latitude_b, longitude_b))
    haversine = math.sin((lat_b - lat_a) / 2) ** 2 + math.cos(lat_a) * math.cos(lat_b) * math.sin((lng_b - lng_a) / 2) ** 2
    return 2 * EARTH_RADIUS_MILES * math.asin(math.sqrt(haversine))


def get_bootcamps_in_radius(db: Session, *, zipcode: str, distance: float) -> list[Bootcamp]:
    if distance < 0:
        raise ValidationError("Distance must be a positive number of miles")
    origin = geocode(zipcode)
    if origin is None:
        raise NotFoundError(f"Could not locate zipcode {zipcode}")

    candidates = db.execute(
        select(Bootcamp)
        .where(Bootcamp.latitude.is_not(None), Bootcamp.longitude.is_not(None))
        .order_by(Bootcamp.id)
    ).scalars()
    return [
        bootcamp
        for bootcamp in candidates
        if distance_in_miles(origin.latitude, origin.longitude, bootcamp.latitude, bootcamp.longitude) <= distance
    ]


def upload_bootcamp_photo(
    db: Session,
    bootcamp: Bootcamp,
    *,
    filename: str | None,
    content_type: str | None,
    content: bytes,
) -> str:
    if not content:
        raise ValidationError("Please upload a photo for the bootcamp")
    if not content_type or not content_type.startswith("image"):
        raise ValidationError("Please upload an image file for the bootcamp")
    if len(content) > settings.max_file_upload_size:
        raise ValidationError(
            f"Please upload an image file for the bootcamp less than {settings.max_file_upload_size / 1_000_000:g} MB"
        )

    file_name = f"photo_{bootcamp.id}{PurePath(filename or '').suffix}"
    save_upload(file_name, content)
    bootcamp.photo = file_name
    db.commit()
    logger.info("bootcamp_photo_uploaded", bootcamp_id=bootcamp.id, file_name=file_name)
    return file_name
