from fastapi import APIRouter

from contact_api.features.contact.routes import router as contact_router
from contact_api.features.health.routes import router as health_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(contact_router, tags=["contact"])
