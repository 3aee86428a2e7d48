from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from devcamper.domain.courses import Career

WEBSITE_PATTERN = r"^https?://[\w.-]+(?:\.[\w.-]+)+[\w\-._~:/?#\[\]@!$&'()*+,;=%]*$"


class BootcampCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=1, max_length=500)
    website: str | None = Field(default=None, pattern=WEBSITE_PATTERN)
    phone: str | None = Field(default=None, max_length=20)
    email: EmailStr | None = None
    address: str = Field(min_length=1)
    careers: list[Career] = Field(min_length=1)
    housing: bool = False
    job_assistance: bool = False
    job_guarantee: bool = False
    accept_gi: bool = False


class BootcampUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, min_length=1, max_length=500)
    website: str | None = Field(default=None, pattern=WEBSITE_PATTERN)
    phone: str | None = Field(default=None, max_length=20)
    email: EmailStr | None = None
    address: str | None = Field(default=None, min_length=1)
    careers: list[Career] | None = Field(default=None, min_length=1)
    housing: bool | None = None
    job_assistance: bool | None = None
    job_guarantee: bool | None = None
    accept_gi: bool | None = None


class BootcampSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str


class BootcampResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    slug: str
    description: str
    website: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str
    longitude: float | None = None
    latitude: float | None = None
    formatted_address: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    country: str | None = None
    careers: list[str]
    average_rating: float | None = None
    average_cost: int | None = None
    photo: str
    housing: bool
    job_assistance: bool
    job_guarantee: bool
    accept_gi: bool
    created_at: datetime
    updated_at: datetime


class BootcampEnvelope(BaseModel):
    success: bool = True
    data: BootcampResponse


class BootcampListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[BootcampResponse]


class BootcampPhotoResponse(BaseModel):
    success: bool = True
    data: str
