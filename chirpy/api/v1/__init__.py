"""API v1 routes."""

from fastapi import APIRouter

from chirpy.api.v1 import auth, chirps, health, polka, users

router = APIRouter()
router.include_router(health.router, tags=["health"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(auth.router, tags=["auth"])
router.include_router(chirps.router, prefix="/chirps", tags=["chirps"])
router.include_router(polka.router, prefix="/polka", tags=["polka"])
