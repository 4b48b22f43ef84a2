"""API routes."""
from fastapi import APIRouter

from cad_api.api import admin, auth, citizen, health, leo, name_change, warrants, weapons

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(citizen.router, prefix="/citizen", tags=["Citizens"])
api_router.include_router(weapons.router, prefix="/weapons", tags=["Weapons"])
api_router.include_router(name_change.router, prefix="/name-change", tags=["Name Change"])
api_router.include_router(warrants.router, prefix="/warrants", tags=["Warrants"])
api_router.include_router(leo.router, prefix="/leo", tags=["LEO"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
