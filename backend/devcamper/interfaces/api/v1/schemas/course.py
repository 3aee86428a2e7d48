from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from devcamper.domain.courses import MinimumSkill
from devcamper.interfaces.api.v1.schemas.bootcamp import BootcampSummary


class CourseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    weeks: str = Field(min_length=1, max_length=20)
    tuition: int = Field(ge=0)
    minimum_skill: MinimumSkill
    scholarship_available: bool = False


class CourseUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    weeks: str | None = Field(default=None, min_length=1, max_length=20)
    tuition: int | None = Field(default=None, ge=0)
    minimum_skill: MinimumSkill | None = None
    scholarship_available: bool | None = None


class CourseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    bootcamp_id: int
    user_id: int
    title: str
    description: str
    weeks: str
    tuition: int
    minimum_skill: MinimumSkill
    scholarship_available: bool
    created_at: datetime
    updated_at: datetime
    bootcamp: BootcampSummary | None = None


class CourseEnvelope(BaseModel):
    success: bool = True
    data: CourseResponse


class CourseListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[CourseResponse]
