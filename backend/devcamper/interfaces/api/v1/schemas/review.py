from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from devcamper.interfaces.api.v1.schemas.bootcamp import BootcampSummary


class ReviewCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    text: str = Field(min_length=1)
    rating: int = Field(ge=1, le=10)


class ReviewUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=100)
    text: str | None = Field(default=None, min_length=1)
    rating: int | None = Field(default=None, ge=1, le=10)


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    bootcamp_id: int
    user_id: int
    title: str
    text: str
    rating: int
    created_at: datetime
    updated_at: datetime
    bootcamp: BootcampSummary | None = None


class ReviewEnvelope(BaseModel):
    success: bool = True
    data: ReviewResponse


class ReviewListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[ReviewResponse]
