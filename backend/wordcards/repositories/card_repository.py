"""Repository for Card CRUD operations.

Writes to an existing card are conditional on the etag the card was read
with, so two reviews of the same card cannot both start from the same stale
scheduling state: the second write fails with CardConflictError and the
caller re-reads before trying again.
"""

import logging

from azure.core import MatchConditions
from azure.cosmos import ContainerProxy
from azure.cosmos.exceptions import CosmosAccessConditionFailedError, CosmosResourceNotFoundError

from wordcards.db import get_cards_container
from wordcards.models import Card, CardCreate, CardUpdate
from wordcards.repositories.folder_repository import FolderNotFoundError, get_folder_repository
from wordcards.srs.scheduler import Rating, SchedulingState
from wordcards.srs.time import utc_now_iso

logger = logging.getLogger(__name__)


class CardNotFoundError(Exception):
    """Raised when a card is not found."""

    pass


class CardConflictError(Exception):
    """Raised when a card changed in storage since it was read."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(f"Card with ID {card_id} was modified concurrently")


class CardRepository:
    """Repository for Card database operations."""

    def __init__(self, container: ContainerProxy | None = None):
        self._container = container

    @property
    def container(self) -> ContainerProxy:
        """Get the container, lazily initializing if needed."""
        if self._container is None:
            self._container = get_cards_container()
        return self._container

    def list_by_folder(self, folder_id: str) -> list[Card]:
        """List all cards in a folder in creation order."""
        items = self.container.query_items(
            query="SELECT * FROM c WHERE c.folderId = @folderId ORDER BY c.createdAt ASC",
            parameters=[{"name": "@folderId", "value": folder_id}],
            partition_key=folder_id,
        )
        return [Card(**item) for item in items]

    def get_by_id(self, card_id: str) -> Card:
        """Get a card by ID.

        The review API only carries the card id, so this is a cross-partition
        point query rather than a read_item.
        """
        items = list(
            self.container.query_items(
                query="SELECT * FROM c WHERE c.id = @id",
                parameters=[{"name": "@id", "value": card_id}],
                enable_cross_partition_query=True,
            )
        )
        if not items:
            raise CardNotFoundError(f"Card with ID {card_id} not found")
        return Card(**items[0])

    def create(self, card_create: CardCreate) -> Card:
        """Save a new card with a fresh scheduling state (due now)."""
        folder_repo = get_folder_repository()
        if not folder_repo.exists(card_create.folderId):
            raise FolderNotFoundError(f"Folder with ID {card_create.folderId} not found")

        card = Card(**card_create.model_dump())
        created_item = self.container.create_item(body=card.model_dump(mode="json"))
        return Card(**created_item)

    def _replace(self, card: Card) -> Card:
        """Conditionally replace a card on the etag it was read with."""
        try:
            updated_item = self.container.replace_item(
                item=card.id,
                body=card.model_dump(mode="json"),
                etag=card.etag,
                match_condition=MatchConditions.IfNotModified if card.etag else None,
            )
        except CosmosAccessConditionFailedError:
            raise CardConflictError(card.id)
        except CosmosResourceNotFoundError:
            raise CardNotFoundError(f"Card with ID {card.id} not found")
        return Card(**updated_item)

    def update(self, card_id: str, card_update: CardUpdate) -> Card:
        """Edit a card's content; its schedule is left as is."""
        existing = self.get_by_id(card_id)

        update_data = card_update.model_dump(exclude_unset=True)
        if not update_data:
            return existing

        update_data["updatedAt"] = utc_now_iso()
        return self._replace(existing.model_copy(update=update_data))

    def update_scheduling_state(
        self, card: Card, new_state: SchedulingState, rating: Rating | None = None
    ) -> Card:
        """Persist a card's new scheduling state.

        ``card`` must be the version the state was computed from; if the
        stored card has changed since, CardConflictError is raised and nothing
        is written.
        """
        updated = self._replace(card.with_scheduling_state(new_state, rating))
        logger.debug(f"Scheduling state written: card={card.id}, nextReview={updated.nextReview}")
        return updated

    def delete(self, card_id: str) -> Card:
        """Delete a card by ID and return the deleted card."""
        card = self.get_by_id(card_id)
        try:
            self.container.delete_item(item=card_id, partition_key=card.folderId)
        except CosmosResourceNotFoundError:
            raise CardNotFoundError(f"Card with ID {card_id} not found")
        return card

    def delete_by_folder(self, folder_id: str) -> int:
        """Delete all cards in a folder. Returns count of deleted cards."""
        cards = self.list_by_folder(folder_id)
        for card in cards:
            self.container.delete_item(item=card.id, partition_key=folder_id)
        return len(cards)


# Singleton instance
_card_repository: CardRepository | None = None


def get_card_repository() -> CardRepository:
    """Get the card repository singleton."""
    global _card_repository
    if _card_repository is None:
        _card_repository = CardRepository()
    return _card_repository
