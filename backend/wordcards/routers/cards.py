"""Cards API router."""

import logging

from fastapi import APIRouter, HTTPException, status

from wordcards.models import CardCreate, CardListResponse, CardResponse, CardUpdate
from wordcards.repositories import (
    CardConflictError,
    CardNotFoundError,
    FolderNotFoundError,
    get_card_repository,
    get_folder_repository,
)
from wordcards.srs import get_session_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cards"])


def _card_not_found(card_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Card with ID {card_id} not found",
    )


def _folder_not_found(folder_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Folder with ID {folder_id} not found",
    )


@router.get("/cards/{folder_id}", response_model=CardListResponse)
async def list_cards(folder_id: str) -> CardListResponse:
    """List all cards in a folder."""
    if not get_folder_repository().exists(folder_id):
        raise _folder_not_found(folder_id)

    cards = get_card_repository().list_by_folder(folder_id)
    return CardListResponse(
        cards=[CardResponse(**card.model_dump()) for card in cards],
        count=len(cards),
    )


@router.post("/api/save", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
async def save_card(card_create: CardCreate) -> CardResponse:
    """Save a generated flashcard into a folder. New cards are due right away."""
    if not get_folder_repository().exists(card_create.folderId):
        raise _folder_not_found(card_create.folderId)

    try:
        card = get_card_repository().create(card_create)
    except FolderNotFoundError:
        raise _folder_not_found(card_create.folderId)
    logger.info(f"Card saved: folder={card.folderId}, card={card.id}")
    return CardResponse(**card.model_dump())


@router.get("/api/cards/{card_id}", response_model=CardResponse)
async def get_card(card_id: str) -> CardResponse:
    """Get a specific card by ID."""
    try:
        card = get_card_repository().get_by_id(card_id)
    except CardNotFoundError:
        raise _card_not_found(card_id)
    return CardResponse(**card.model_dump())


@router.put("/api/cards/{card_id}", response_model=CardResponse)
async def update_card(card_id: str, card_update: CardUpdate) -> CardResponse:
    """Edit a card's content."""
    try:
        card = get_card_repository().update(card_id, card_update)
    except CardNotFoundError:
        raise _card_not_found(card_id)
    except CardConflictError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Card with ID {card_id} was modified concurrently, reload and try again",
        )
    return CardResponse(**card.model_dump())


@router.delete("/api/cards/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_card(card_id: str) -> None:
    """Delete a card."""
    try:
        card = get_card_repository().delete(card_id)
    except CardNotFoundError:
        raise _card_not_found(card_id)

    get_session_store().release_card(card.folderId, card.id)
    logger.info(f"Card deleted: folder={card.folderId}, card={card.id}")
