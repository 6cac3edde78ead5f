from fastapi import APIRouter
from api.v1.routes.notifications import router as notifications_router
from api.v1.routes.preferences import router as preferences_router
from api.v1.routes.push import router as push_router


router = APIRouter()
router.include_router(notifications_router)
router.include_router(preferences_router)
router.include_router(push_router)
