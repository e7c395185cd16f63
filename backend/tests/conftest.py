"""Pytest configuration and fixtures."""

from dataclasses import dataclass, field

import pytest
from fastapi.testclient import TestClient

from wordcards.main import app
from wordcards.models import Card, CardCreate, CardUpdate, Folder, FolderCreate
from wordcards.repositories import CardConflictError, CardNotFoundError, FolderNotFoundError
from wordcards.srs import session as session_module
from wordcards.srs.policy import get_scheduler_policy


@dataclass
class StubFolderRepo:
    folders: dict[str, dict] = field(default_factory=dict)

    def list_all(self) -> list[Folder]:
        return [Folder(**raw) for raw in sorted(self.folders.values(), key=lambda f: f["createdAt"])]

    def get_by_id(self, folder_id: str) -> Folder:
        if folder_id not in self.folders:
            raise FolderNotFoundError("not found")
        return Folder(**self.folders[folder_id])

    def create(self, folder_create: FolderCreate) -> Folder:
        folder = Folder(name=folder_create.name)
        self.folders[folder.id] = folder.model_dump()
        return folder

    def delete(self, folder_id: str) -> None:
        if self.folders.pop(folder_id, None) is None:
            raise FolderNotFoundError("not found")

    def exists(self, folder_id: str) -> bool:
        return folder_id in self.folders


@dataclass
class StubCardRepo:
    """In-memory card store with etag versioning like Cosmos."""

    cards: dict[str, dict] = field(default_factory=dict)
    writes: int = 0
    # Number of upcoming scheduling writes to fail with a conflict
    conflicts_to_raise: int = 0

    def add(self, **raw) -> Card:
        raw.setdefault("_etag", "1")
        card = Card(**raw)
        self.cards[card.id] = {**card.model_dump(mode="json"), "_etag": raw["_etag"]}
        return card

    def list_by_folder(self, folder_id: str) -> list[Card]:
        items = [raw for raw in self.cards.values() if raw["folderId"] == folder_id]
        return [Card(**raw) for raw in sorted(items, key=lambda c: c["createdAt"])]

    def get_by_id(self, card_id: str) -> Card:
        if card_id not in self.cards:
            raise CardNotFoundError("not found")
        return Card(**self.cards[card_id])

    def create(self, card_create: CardCreate) -> Card:
        card = Card(**card_create.model_dump())
        self.cards[card.id] = {**card.model_dump(mode="json"), "_etag": "1"}
        return Card(**self.cards[card.id])

    def _replace(self, card: Card) -> Card:
        stored = self.cards.get(card.id)
        if stored is None:
            raise CardNotFoundError("not found")
        if card.etag is not None and stored["_etag"] != card.etag:
            raise CardConflictError(card.id)
        self.writes += 1
        self.cards[card.id] = {**card.model_dump(mode="json"), "_etag": str(int(stored["_etag"]) + 1)}
        return Card(**self.cards[card.id])

    def update(self, card_id: str, card_update: CardUpdate) -> Card:
        existing = self.get_by_id(card_id)
        return self._replace(existing.model_copy(update=card_update.model_dump(exclude_unset=True)))

    def update_scheduling_state(self, card, new_state, rating=None) -> Card:
        if self.conflicts_to_raise:
            self.conflicts_to_raise -= 1
            # Simulate another reviewer writing first
            stored = self.cards[card.id]
            stored["_etag"] = str(int(stored["_etag"]) + 1)
        return self._replace(card.with_scheduling_state(new_state, rating))

    def delete(self, card_id: str) -> Card:
        card = self.get_by_id(card_id)
        del self.cards[card_id]
        return card

    def delete_by_folder(self, folder_id: str) -> int:
        ids = [cid for cid, raw in self.cards.items() if raw["folderId"] == folder_id]
        for cid in ids:
            del self.cards[cid]
        return len(ids)


@pytest.fixture(autouse=True)
def fresh_review_state():
    """Each test gets its own session store and policy."""
    session_module.reset_session_store()
    get_scheduler_policy.cache_clear()
    yield
    session_module.reset_session_store()
    get_scheduler_policy.cache_clear()


@pytest.fixture
def folder_repo():
    return StubFolderRepo(
        folders={
            "folder-1": {
                "id": "folder-1",
                "name": "GRE words",
                "createdAt": "2025-01-01T00:00:00Z",
                "updatedAt": "2025-01-01T00:00:00Z",
            }
        }
    )


@pytest.fixture
def card_repo():
    return StubCardRepo()


@pytest.fixture
def client(monkeypatch, folder_repo, card_repo):
    """Test client with every router wired to the in-memory repositories."""
    from wordcards.routers import cards, folders, review

    for module in (cards, folders, review):
        monkeypatch.setattr(module, "get_folder_repository", lambda: folder_repo)
        monkeypatch.setattr(module, "get_card_repository", lambda: card_repo)
    return TestClient(app)
