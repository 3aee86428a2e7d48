from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    success: bool = True
    message: str
    version: str
    status: Literal["ok", "degraded"]
    db_connected: bool
    redis_connected: bool
