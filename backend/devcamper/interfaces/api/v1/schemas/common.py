from typing import Any

from pydantic import BaseModel, Field


class DeleteResponse(BaseModel):
    success: bool = True
    data: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
