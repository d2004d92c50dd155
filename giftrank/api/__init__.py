"""API routes"""

from fastapi import APIRouter
from .gifts import router as gifts_router
from .taxonomy import router as taxonomy_router

api_router = APIRouter()

api_router.include_router(gifts_router, prefix="/gifts", tags=["gifts"])
api_router.include_router(taxonomy_router, prefix="/taxonomy", tags=["taxonomy"])
