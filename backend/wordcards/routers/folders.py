"""Folders API router."""

import logging

from fastapi import APIRouter, HTTPException, status

from wordcards.models import Folder, FolderCreate, FolderListResponse, FolderResponse
from wordcards.repositories import FolderNotFoundError, get_card_repository, get_folder_repository
from wordcards.srs import due_count, get_session_store, next_due_at, utc_datetime_to_iso_z, utc_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/folders", tags=["folders"])


def _folder_response(folder: Folder) -> FolderResponse:
    """Build a folder response with due metrics computed from a fresh card snapshot."""
    cards = get_card_repository().list_by_folder(folder.id)
    earliest = next_due_at(cards)
    return FolderResponse(
        **folder.model_dump(),
        dueCardCount=due_count(cards, utc_now()),
        nextDueAt=utc_datetime_to_iso_z(earliest) if earliest else None,
    )


@router.get("", response_model=FolderListResponse)
async def list_folders() -> FolderListResponse:
    """List all folders with due card metrics."""
    folders = get_folder_repository().list_all()
    responses = [_folder_response(folder) for folder in folders]
    return FolderListResponse(folders=responses, count=len(responses))


@router.get("/{folder_id}", response_model=FolderResponse)
async def get_folder(folder_id: str) -> FolderResponse:
    """Get a specific folder by ID."""
    try:
        folder = get_folder_repository().get_by_id(folder_id)
    except FolderNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Folder with ID {folder_id} not found",
        )
    return _folder_response(folder)


@router.post("", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
async def create_folder(folder_create: FolderCreate) -> FolderResponse:
    """Create a new folder."""
    folder = get_folder_repository().create(folder_create)
    logger.info(f"Folder created: folder={folder.id}")
    return FolderResponse(**folder.model_dump())


@router.delete("/{folder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_folder(folder_id: str) -> None:
    """Delete a folder and all its cards."""
    folder_repo = get_folder_repository()
    card_repo = get_card_repository()

    if not folder_repo.exists(folder_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Folder with ID {folder_id} not found",
        )

    try:
        # Delete all cards in the folder first
        deleted = card_repo.delete_by_folder(folder_id)
        folder_repo.delete(folder_id)
    except FolderNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Folder with ID {folder_id} not found",
        )

    get_session_store().reset(folder_id)
    logger.info(f"Folder deleted: folder={folder_id}, cards_deleted={deleted}")
