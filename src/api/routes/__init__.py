"""API router configuration."""

from fastapi import APIRouter

from api.routes.tasks import router as tasks_router
from api.routes.users import router as users_router

router = APIRouter()
router.include_router(users_router)
router.include_router(tasks_router)
