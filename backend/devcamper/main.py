import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from devcamper.application.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from devcamper.config import settings
from devcamper.infrastructure.logging import bind_request_context, clear_request_context, configure_logging, get_logger
from devcamper.interfaces.api.v1.router import api_router
from devcamper.interfaces.api.v1.schemas.common import ErrorResponse

logger = get_logger(__name__)

OPENAPI_DESCRIPTION = """
Bootcamp directory API: bootcamps, courses, reviews, users and authentication.

How to call this API:
- Register at `POST /api/v1/auth/register` or log in at `POST /api/v1/auth/login`.
- Use `Authorization: Bearer <token>` in protected endpoints.
- Listing endpoints accept `select`, `sort`, `page`, `limit` and field filters such as
  `tuition[gte]=5000` or `careers[in]=Business,UI/UX`.
"""

OPENAPI_TAGS = [
    {"name": "health", "description": "Service health and connectivity checks."},
    {"name": "auth", "description": "Registration, login, tokens and password management."},
    {"name": "users", "description": "User administration (admin only)."},
    {"name": "bootcamps", "description": "Bootcamp listings, geo radius search and photos."},
    {"name": "courses", "description": "Courses offered by bootcamps."},
    {"name": "reviews", "description": "User reviews and ratings of bootcamps."},
]


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    logger.info("app_startup", app_name=settings.app_name, version=settings.app_version)
    yield
    logger.info("app_shutdown", app_name=settings.app_name)


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description=OPENAPI_DESCRIPTION,
    openapi_tags=OPENAPI_TAGS,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def bind_request_logging_context(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    bind_request_context(request_id=request_id, method=request.method, path=request.url.path)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info("request_completed", status_code=response.status_code, duration_ms=duration_ms)
        response.headers["X-Request-ID"] = request_id
        return response
    finally:
        clear_request_context()


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.get("/")
def root():
    return {"success": True, "message": f"{settings.app_name} is running", "docs": app.docs_url}


@app.exception_handler(NotFoundError)
async def handle_not_found(_: Request, exc: NotFoundError):
    return error_response(status.HTTP_404_NOT_FOUND, str(exc))


@app.exception_handler(ConflictError)
async def handle_conflict(_: Request, exc: ConflictError):
    return error_response(status.HTTP_409_CONFLICT, str(exc))


@app.exception_handler(ForbiddenError)
async def handle_forbidden(_: Request, exc: ForbiddenError):
    return error_response(status.HTTP_403_FORBIDDEN, str(exc))


@app.exception_handler(UnauthorizedError)
async def handle_unauthorized(_: Request, exc: UnauthorizedError):
    return error_response(status.HTTP_401_UNAUTHORIZED, str(exc))


@app.exception_handler(ValidationError)
async def handle_validation(_: Request, exc: ValidationError):
    return error_response(status.HTTP_400_BAD_REQUEST, str(exc))


@app.exception_handler(RequestValidationError)
async def handle_request_validation(_: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return error_response(status.HTTP_400_BAD_REQUEST, "; ".join(messages) or "Invalid request")


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(_: Request, exc: StarletteHTTPException):
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(IntegrityError)
async def handle_integrity(_: Request, exc: IntegrityError):
    logger.warning("integrity_error", error=str(exc.orig))
    return error_response(status.HTTP_409_CONFLICT, "Duplicate field value entered")


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception):
    logger.exception("unhandled_error", path=request.url.path, error=str(exc))
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


app.include_router(api_router)
