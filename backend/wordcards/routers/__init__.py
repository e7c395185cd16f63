"""API routers module."""

from .folders import router as folders_router
from .cards import router as cards_router
from .review import router as review_router

__all__ = [
    "folders_router",
    "cards_router",
    "review_router",
]
