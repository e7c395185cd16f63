"""Models for review endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from wordcards.models.card import CardResponse
from wordcards.srs.scheduler import Rating


class ReviewRequest(BaseModel):
    """Request for POST /review."""

    id: str = Field(..., min_length=1, description="ID of the reviewed card")
    rating: Rating = Field(..., description="One of again, hard, good, easy")


class ReviewResponse(BaseModel):
    """Response for POST /review."""

    card: CardResponse = Field(..., description="The card with its new schedule")
    dueCount: int = Field(..., ge=0, description="Cards still due in the card's folder")


class ReviewNextResponse(BaseModel):
    """Response for GET /review/next."""

    card: CardResponse | None = Field(None, description="The card to review now, null when nothing is due")
    dueCount: int = Field(..., ge=0, description="Number of cards currently due")
    nextDueAt: str | None = Field(
        None,
        description="Earliest upcoming nextReview when no card is due now",
    )
