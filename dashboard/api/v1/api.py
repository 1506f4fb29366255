"""
API v1 router.
"""
from fastapi import APIRouter

from dashboard.api.v1.endpoints import app_config, auth, health, snapshots, users

api_router = APIRouter()

# Each endpoint router carries its own prefix and tags
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(app_config.router)
api_router.include_router(snapshots.router)
api_router.include_router(health.router)
