from celery import Celery

from devcamper.config import settings

EMAIL_QUEUE = "email"


def create_celery_app() -> Celery:
    app = Celery(
        "devcamper",
        broker=settings.celery_broker_url or settings.redis_url,
        backend=settings.redis_url,
        include=["devcamper.infrastructure.tasks.email_tasks"],
    )
    app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        result_expires=60 * 60,
        timezone="UTC",
        enable_utc=True,
        task_routes={"auth.*": {"queue": EMAIL_QUEUE}},
        task_always_eager=settings.celery_task_always_eager,
        broker_connection_retry_on_startup=True,
    )
    return app


celery_app = create_celery_app()
