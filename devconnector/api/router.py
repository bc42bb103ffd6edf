"""Agregador de routers de la API."""
from fastapi import APIRouter

from devconnector.api.routers import auth, health, posts, profile

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.users_router)
api_router.include_router(auth.router)
api_router.include_router(posts.router)
api_router.include_router(profile.router)
