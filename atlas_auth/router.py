"""Central router aggregating all domain routers."""

from fastapi import APIRouter

from atlas_auth.auth.pages import router as pages_router
from atlas_auth.auth.router import router as auth_router
from atlas_auth.health.router import router as health_router

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(pages_router)
