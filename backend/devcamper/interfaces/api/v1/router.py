from fastapi import APIRouter

from devcamper.interfaces.api.v1.routes.auth import router as auth_router
from devcamper.interfaces.api.v1.routes.bootcamps import router as bootcamps_router
from devcamper.interfaces.api.v1.routes.courses import bootcamp_courses_router
from devcamper.interfaces.api.v1.routes.courses import router as courses_router
from devcamper.interfaces.api.v1.routes.ping import router as ping_router
from devcamper.interfaces.api.v1.routes.reviews import bootcamp_reviews_router
from devcamper.interfaces.api.v1.routes.reviews import router as reviews_router
from devcamper.interfaces.api.v1.routes.users import router as users_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth_router)
api_router.include_router(bootcamp_courses_router)
api_router.include_router(bootcamp_reviews_router)
api_router.include_router(bootcamps_router)
api_router.include_router(courses_router)
api_router.include_router(ping_router)
api_router.include_router(reviews_router)
api_router.include_router(users_router)
