"""Models module for Pydantic schemas."""

from .folder import (
    Folder,
    FolderBase,
    FolderCreate,
    FolderResponse,
    FolderListResponse,
)
from .card import (
    Card,
    CardBase,
    CardCreate,
    CardUpdate,
    CardResponse,
    CardListResponse,
)
from .review import (
    ReviewNextResponse,
    ReviewRequest,
    ReviewResponse,
)

__all__ = [
    "Folder",
    "FolderBase",
    "FolderCreate",
    "FolderResponse",
    "FolderListResponse",
    "Card",
    "CardBase",
    "CardCreate",
    "CardUpdate",
    "CardResponse",
    "CardListResponse",
    "ReviewNextResponse",
    "ReviewRequest",
    "ReviewResponse",
]
