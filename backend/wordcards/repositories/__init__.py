"""Repositories module for data access layer."""

from .folder_repository import (
    FolderRepository,
    FolderNotFoundError,
    get_folder_repository,
)
from .card_repository import (
    CardRepository,
    CardNotFoundError,
    CardConflictError,
    get_card_repository,
)

__all__ = [
    "FolderRepository",
    "FolderNotFoundError",
    "get_folder_repository",
    "CardRepository",
    "CardNotFoundError",
    "CardConflictError",
    "get_card_repository",
]
