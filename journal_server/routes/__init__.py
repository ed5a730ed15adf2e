from __future__ import annotations

from fastapi import APIRouter

from .chronicle import router as chronicle_router
from .entries import router as entries_router
from .meta import router as meta_router
from .summaries import router as summaries_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(meta_router)
api_router.include_router(entries_router)
api_router.include_router(summaries_router)
api_router.include_router(chronicle_router)

__all__ = ["api_router"]
