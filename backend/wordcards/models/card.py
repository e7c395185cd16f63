"""Card models for API requests and responses."""

from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from wordcards.srs.scheduler import Rating, SchedulingState
from wordcards.srs.time import parse_iso_z, utc_datetime_to_iso_z, utc_now_iso


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid4())


class CardBase(BaseModel):
    """Flashcard content as produced by the word generator."""

    word: str = Field(..., min_length=1, max_length=200, description="The word being studied")
    pronunciation: str = Field("", max_length=500, description="Pronunciation guide")
    meaning: str = Field("", max_length=2000, description="Meaning of the word")
    synonyms: str = Field("", max_length=1000, description="Comma separated synonyms")
    examples: list[str] = Field(default_factory=list, description="Example sentences")


class CardCreate(CardBase):
    """Model for saving a generated flashcard into a folder."""

    folderId: str = Field(..., min_length=1, description="Target folder ID")


class CardUpdate(BaseModel):
    """Model for editing a card's content. Scheduling fields are not editable."""

    word: str | None = Field(None, min_length=1, max_length=200)
    pronunciation: str | None = Field(None, max_length=500)
    meaning: str | None = Field(None, max_length=2000)
    synonyms: str | None = Field(None, max_length=1000)
    examples: list[str] | None = None


class Card(CardBase):
    """Full card model as stored in the database."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174001",
                "folderId": "123e4567-e89b-12d3-a456-426614174000",
                "word": "ephemeral",
                "pronunciation": "/ɪˈfem(ə)rəl/",
                "meaning": "Lasting for a very short time",
                "synonyms": "fleeting, transient",
                "examples": ["Fashions are ephemeral."],
                "createdAt": "2025-01-01T00:00:00Z",
                "updatedAt": "2025-01-01T00:00:00Z",
                "nextReview": "2025-01-01T00:00:00Z",
            }
        },
    )

    id: str = Field(default_factory=generate_uuid, description="Unique identifier")
    folderId: str = Field(..., description="Parent folder ID (partition key)")
    createdAt: str = Field(default_factory=utc_now_iso, description="Creation timestamp")
    updatedAt: str = Field(default_factory=utc_now_iso, description="Last update timestamp")

    # Scheduling fields (persisted)
    repetitions: int = Field(0, description="Consecutive successful reviews since the last lapse")
    ease: float = Field(2.5, description="SM-2 ease factor (min 1.3)")
    intervalDays: int = Field(0, description="Days from the last review to nextReview")
    nextReview: str = Field(..., description="Next due timestamp (UTC ISO Z)")
    lastReviewed: str | None = Field(None, description="Last review timestamp (UTC ISO Z)")
    lastRating: Rating | None = Field(None, description="Most recent rating applied to this card")

    # Storage concurrency token, read from Cosmos and never written back
    etag: str | None = Field(None, alias="_etag", exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _new_cards_are_due_at_creation(cls, data):
        # Records saved before scheduling existed have no nextReview
        if isinstance(data, dict) and not data.get("nextReview"):
            data = dict(data)
            data.setdefault("createdAt", utc_now_iso())
            data["nextReview"] = data["createdAt"]
        return data

    def scheduling_state(self) -> SchedulingState:
        return SchedulingState(
            repetitions=self.repetitions,
            ease=self.ease,
            interval_days=self.intervalDays,
            next_review=parse_iso_z(self.nextReview),
            last_reviewed=parse_iso_z(self.lastReviewed) if self.lastReviewed else None,
        )

    def with_scheduling_state(self, state: SchedulingState, rating: Rating | None = None) -> "Card":
        """Return a copy of this card carrying ``state``; the card itself is unchanged."""
        reviewed_at = utc_datetime_to_iso_z(state.last_reviewed) if state.last_reviewed else None
        update = {
            "repetitions": state.repetitions,
            "ease": state.ease,
            "intervalDays": state.interval_days,
            "nextReview": utc_datetime_to_iso_z(state.next_review),
            "lastReviewed": reviewed_at,
            "updatedAt": reviewed_at or utc_now_iso(),
        }
        if rating is not None:
            update["lastRating"] = rating
        return self.model_copy(update=update)


class CardResponse(CardBase):
    """Card response model returned by API."""

    id: str
    folderId: str
    createdAt: str
    updatedAt: str

    repetitions: int
    ease: float
    intervalDays: int
    nextReview: str
    lastReviewed: str | None
    lastRating: Rating | None


class CardListResponse(BaseModel):
    """Response containing a list of cards."""

    cards: list[CardResponse]
    count: int
