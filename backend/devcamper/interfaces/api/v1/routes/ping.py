from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from devcamper.application.services.health_service import get_health_status
from devcamper.infrastructure.cache.redis_client import get_redis_client
from devcamper.infrastructure.db.session import get_db
from devcamper.interfaces.api.v1.schemas.health import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/ping",
    response_model=HealthResponse,
    summary="Health check",
    description="Reports database and redis connectivity. Always public.",
)
def ping(db: Session = Depends(get_db)):
    return get_health_status(db=db, redis_client=get_redis_client())
