from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from devcamper.application.services.advanced_results_service import Populate
from devcamper.application.services.bootcamp_service import (
    create_bootcamp,
    delete_bootcamp,
    ensure_bootcamp_owner,
    get_bootcamp_or_raise,
    get_bootcamps_in_radius,
    serialize_bootcamp,
    update_bootcamp,
    upload_bootcamp_photo,
)
from devcamper.config import settings
from devcamper.infrastructure.db.models import Bootcamp, User
from devcamper.infrastructure.db.session import get_db
from devcamper.infrastructure.storage.file_storage import read_upload
from devcamper.interfaces.api.v1.dependencies.advanced_results import advanced_results
from devcamper.interfaces.api.v1.dependencies.auth import require_publisher
from devcamper.interfaces.api.v1.schemas.bootcamp import (
    BootcampCreate,
    BootcampEnvelope,
    BootcampListResponse,
    BootcampPhotoResponse,
    BootcampUpdate,
)
from devcamper.interfaces.api.v1.schemas.common import DeleteResponse
from devcamper.interfaces.api.v1.schemas.pagination import ListingResponse

router = APIRouter(prefix="/bootcamps", tags=["bootcamps"])


@router.get(
    "",
    response_model=ListingResponse,
    summary="List bootcamps",
    description="Filter, select, sort and paginate bootcamps. Each bootcamp includes its courses.",
)
def get_bootcamps(results: dict = Depends(advanced_results(Bootcamp, populate=Populate(path="courses")))):
    return results


@router.get(
    "/radius/{zipcode}/{distance}",
    response_model=BootcampListResponse,
    summary="List bootcamps within a radius",
    description="Geocode the zipcode and return bootcamps within `distance` miles.",
)
def get_bootcamps_within_radius(zipcode: str, distance: float, db: Session = Depends(get_db)):
    bootcamps = get_bootcamps_in_radius(db=db, zipcode=zipcode, distance=distance)
    return {"success": True, "count": len(bootcamps), "data": [serialize_bootcamp(bootcamp) for bootcamp in bootcamps]}


@router.get("/{bootcamp_id}", response_model=BootcampEnvelope, responses={404: {"description": "Bootcamp not found"}})
def get_bootcamp(bootcamp_id: int, db: Session = Depends(get_db)):
    bootcamp = get_bootcamp_or_raise(db=db, bootcamp_id=bootcamp_id)
    return {"success": True, "data": serialize_bootcamp(bootcamp)}


@router.post(
    "",
    response_model=BootcampEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create bootcamp",
    description="Publishers may own a single bootcamp; admins are not limited.",
    responses={401: {"description": "Unauthorized"}, 403: {"description": "Insufficient role"}},
)
def create_bootcamp_endpoint(
    payload: BootcampCreate,
    current_user: User = Depends(require_publisher),
    db: Session = Depends(get_db),
):
    bootcamp = create_bootcamp(db=db, payload=payload, owner=current_user)
    return {"success": True, "data": serialize_bootcamp(bootcamp)}


@router.put("/{bootcamp_id}", response_model=BootcampEnvelope)
def update_bootcamp_endpoint(
    bootcamp_id: int,
    payload: BootcampUpdate,
    current_user: User = Depends(require_publisher),
    db: Session = Depends(get_db),
):
    bootcamp = get_bootcamp_or_raise(db=db, bootcamp_id=bootcamp_id)
    ensure_bootcamp_owner(bootcamp, current_user)
    updated = update_bootcamp(db=db, bootcamp=bootcamp, payload=payload)
    return {"success": True, "data": serialize_bootcamp(updated)}


@router.delete("/{bootcamp_id}", response_model=DeleteResponse)
def delete_bootcamp_endpoint(
    bootcamp_id: int,
    current_user: User = Depends(require_publisher),
    db: Session = Depends(get_db),
):
    bootcamp = get_bootcamp_or_raise(db=db, bootcamp_id=bootcamp_id)
    ensure_bootcamp_owner(bootcamp, current_user, action="delete")
    delete_bootcamp(db=db, bootcamp=bootcamp)
    return DeleteResponse()


@router.put(
    "/{bootcamp_id}/photo",
    response_model=BootcampPhotoResponse,
    summary="Upload bootcamp photo",
    description="Multipart upload of a single image in the `file` field.",
)
def upload_bootcamp_photo_endpoint(
    bootcamp_id: int,
    file: UploadFile = File(...),
    current_user: User = Depends(require_publisher),
    db: Session = Depends(get_db),
):
    bootcamp = get_bootcamp_or_raise(db=db, bootcamp_id=bootcamp_id)
    ensure_bootcamp_owner(bootcamp, current_user)
    content = read_upload(file.file, settings.max_file_upload_size)
    file_name = upload_bootcamp_photo(
        db=db,
        bootcamp=bootcamp,
        filename=file.filename,
        content_type=file.content_type,
        content=content,
    )
    return {"success": True, "data": file_name}
