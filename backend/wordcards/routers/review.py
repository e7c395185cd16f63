"""Review (SRS) API router."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status

from wordcards.models import Card, CardResponse, ReviewNextResponse, ReviewRequest, ReviewResponse
from wordcards.repositories import (
    CardConflictError,
    CardNotFoundError,
    get_card_repository,
    get_folder_repository,
)
from wordcards.srs import (
    EmptyDueQueue,
    InvalidRating,
    InvalidState,
    Rating,
    SchedulerPolicy,
    due_count,
    get_scheduler_policy,
    get_session_store,
    transition,
    utc_datetime_to_iso_z,
    utc_now,
)

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/review", tags=["review"])


def apply_review(card_repo, card_id: str, rating: Rating, policy: SchedulerPolicy) -> Card:
    """Read a card, compute its next scheduling state and write it back.

    The write is conditional on the card not having changed since it was
    read. On a conflict the card is read again and the transition recomputed
    from the fresh state, up to ``policy.review_max_attempts`` times.

    Args:
        card_repo: The card repository for persistence
        card_id: ID of the reviewed card
        rating: The learner's rating
        policy: Scheduling constants

    Returns:
        The persisted card

    Raises:
        CardNotFoundError: If the card does not exist
        InvalidState: If the stored scheduling state breaks an invariant
        CardConflictError: If every attempt lost a race with another writer
    """
    for attempt in range(1, policy.review_max_attempts + 1):
        card = card_repo.get_by_id(card_id)
        new_state = transition(card.scheduling_state(), rating, utc_now(), policy)
        try:
            updated = card_repo.update_scheduling_state(card, new_state, rating)
        except CardConflictError:
            logger.warning(
                f"Review conflict: card={card_id}, attempt={attempt}/{policy.review_max_attempts}"
            )
            if attempt == policy.review_max_attempts:
                raise
            continue

        logger.info(
            f"Review applied: folder={updated.folderId}, card={card_id}, rating={rating}, "
            f"repetitions={updated.repetitions}, ease={updated.ease}, "
            f"interval_days={updated.intervalDays}, next_review={updated.nextReview}"
        )
        return updated

    raise CardConflictError(card_id)


def _verify_folder(folder_id: str) -> None:
    if not get_folder_repository().exists(folder_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Folder with ID {folder_id} not found",
        )


@router.post("", response_model=ReviewResponse)
async def review_card(req: ReviewRequest) -> ReviewResponse:
    """Apply a rating to a card and reschedule it."""
    card_repo = get_card_repository()
    policy = get_scheduler_policy()

    try:
        card = apply_review(card_repo, req.id, req.rating, policy)
    except CardNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card with ID {req.id} not found",
        )
    except InvalidRating as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except InvalidState as e:
        logger.error(f"Stored scheduling state rejected: card={req.id}, error={e}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Card with ID {req.id} has an invalid scheduling state: {e}",
        )
    except CardConflictError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Card with ID {req.id} is being reviewed concurrently, try again",
        )

    # The review completes whatever session was presenting this card
    get_session_store().release_card(card.folderId, card.id)

    remaining = due_count(card_repo.list_by_folder(card.folderId), utc_now())
    return ReviewResponse(card=CardResponse(**card.model_dump()), dueCount=remaining)


@router.get("/next", response_model=ReviewNextResponse)
async def review_next(folderId: str = Query(..., min_length=1)) -> ReviewNextResponse:
    """Present the next due card of a folder, or report that nothing is due."""
    _verify_folder(folderId)

    cards = get_card_repository().list_by_folder(folderId)
    now = utc_now()
    session = get_session_store().get_or_create(folderId)
    selection = session.present(cards, now)
    remaining = due_count(cards, now)

    if isinstance(selection, EmptyDueQueue):
        next_due = utc_datetime_to_iso_z(selection.next_due_at) if selection.next_due_at else None
        logger.info(f"Review queue empty: folder={folderId}, next_due_at={next_due}")
        return ReviewNextResponse(card=None, dueCount=0, nextDueAt=next_due)

    return ReviewNextResponse(
        card=CardResponse(**selection.model_dump()),
        dueCount=remaining,
        nextDueAt=None,
    )


@router.post("/cancel", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_review(folderId: str = Query(..., min_length=1)) -> None:
    """Abandon the card being presented; its schedule is not changed."""
    session = get_session_store().get(folderId)
    if session is not None and session.is_presenting:
        logger.info(f"Review cancelled: folder={folderId}, card={session.card.id}")
        session.cancel()
