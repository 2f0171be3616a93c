"""API routes."""
from fastapi import APIRouter
from app.api import releases, artists

api_router = APIRouter()

# Releases
api_router.include_router(releases.router, tags=["releases"])

# Artists
api_router.include_router(artists.router, tags=["artists"])
