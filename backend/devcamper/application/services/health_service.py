from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from devcamper.config import settings
from devcamper.infrastructure.cache.redis_client import ping_redis
from devcamper.infrastructure.logging import get_logger

logger = get_logger(__name__)


def database_is_reachable(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("health_database_unreachable", error=str(exc))
        return False
    return True


def get_health_status(db: Session, redis_client) -> dict:
    db_connected = database_is_reachable(db)
    redis_connected = ping_redis(redis_client)
    if not (db_connected and redis_connected):
        logger.warning("health_degraded", db_connected=db_connected, redis_connected=redis_connected)
    return {
        "success": True,
        "message": f"{settings.app_name} is running",
        "version": settings.app_version,
        "status": "ok" if db_connected and redis_connected else "degraded",
        "db_connected": db_connected,
        "redis_connected": redis_connected,
    }
