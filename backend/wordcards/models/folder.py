"""Folder models for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field

from wordcards.models.card import generate_uuid
from wordcards.srs.time import utc_now_iso


class FolderBase(BaseModel):
    """Base folder model with common fields."""

    name: str = Field(..., min_length=1, max_length=200, description="Name of the folder")


class FolderCreate(FolderBase):
    """Model for creating a new folder."""

    pass


class Folder(FolderBase):
    """Full folder model as stored in the database."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "GRE Vocabulary",
                "createdAt": "2025-01-01T00:00:00Z",
                "updatedAt": "2025-01-01T00:00:00Z",
            }
        }
    )

    id: str = Field(default_factory=generate_uuid, description="Unique identifier")
    createdAt: str = Field(default_factory=utc_now_iso, description="Creation timestamp")
    updatedAt: str = Field(default_factory=utc_now_iso, description="Last update timestamp")


class FolderResponse(FolderBase):
    """Folder response model returned by API."""

    id: str
    createdAt: str
    updatedAt: str
    dueCardCount: int = Field(0, ge=0, description="Number of cards currently due")
    nextDueAt: str | None = Field(None, description="Earliest nextReview in the folder")


class FolderListResponse(BaseModel):
    """Response containing a list of folders."""

    folders: list[FolderResponse]
    count: int
