"""Tests for the review session state machine and its store."""

import time
from datetime import datetime, timedelta, timezone

import pytest

from wordcards.models import Card
from wordcards.srs.scheduler import InvalidRating, Rating
from wordcards.srs.selector import EmptyDueQueue
from wordcards.srs.session import NoCardPresented, ReviewSession, ReviewSessionStore

T = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_card(card_id: str, next_review: str, **extra) -> Card:
    return Card(
        id=card_id,
        folderId="folder-1",
        word=card_id,
        createdAt="2025-02-01T00:00:00Z",
        nextReview=next_review,
        **extra,
    )


@pytest.fixture
def cards():
    return [
        make_card("due-later", "2025-03-01T11:00:00Z"),
        make_card("due-first", "2025-02-27T08:00:00Z"),
        make_card("not-due", "2025-03-04T00:00:00Z"),
    ]


class TestReviewSession:
    def test_starts_idle(self):
        session = ReviewSession(folder_id="folder-1")

        assert session.mode == "idle"
        assert session.card is None
        assert not session.is_presenting

    def test_present_moves_to_presenting(self, cards):
        session = ReviewSession(folder_id="folder-1")

        card = session.present(cards, T)

        assert card.id == "due-first"
        assert session.mode == "presenting"
        assert session.card is card

    def test_present_with_nothing_due_stays_idle(self, cards):
        session = ReviewSession(folder_id="folder-1")

        result = session.present(cards[2:], T)

        assert isinstance(result, EmptyDueQueue)
        assert result.next_due_at == datetime(2025, 3, 4, tzinfo=timezone.utc)
        assert session.mode == "idle"

    def test_present_twice_returns_card_in_flight(self, cards):
        session = ReviewSession(folder_id="folder-1")
        first = session.present(cards, T)

        again = session.present(cards, T)

        assert again.id == first.id

    def test_present_drops_card_rescheduled_elsewhere(self, cards):
        session = ReviewSession(folder_id="folder-1")
        session.present(cards, T)

        rescheduled = [
            make_card("due-first", "2025-03-02T08:00:00Z", repetitions=1, intervalDays=1,
                      lastReviewed="2025-03-01T08:00:00Z"),
            cards[0],
            cards[2],
        ]

        assert session.present(rescheduled, T).id == "due-later"

    def test_present_drops_deleted_card(self, cards):
        session = ReviewSession(folder_id="folder-1")
        session.present(cards, T)

        result = session.present(cards[2:], T)

        assert isinstance(result, EmptyDueQueue)
        assert session.mode == "idle"

    def test_submit_returns_new_state_and_goes_idle(self, cards):
        session = ReviewSession(folder_id="folder-1")
        session.present(cards, T)

        card, new_state = session.submit(Rating.GOOD, T)

        assert card.id == "due-first"
        assert new_state.repetitions == 1
        assert new_state.interval_days == 1
        assert new_state.next_review == T + timedelta(days=1)
        assert session.mode == "idle"
        # The card itself is never mutated by the session
        assert card.repetitions == 0
        assert card.nextReview == "2025-02-27T08:00:00Z"

    def test_submit_with_invalid_rating_keeps_presenting(self, cards):
        session = ReviewSession(folder_id="folder-1")
        presented = session.present(cards, T)

        with pytest.raises(InvalidRating):
            session.submit("excellent", T)

        assert session.card is presented

    def test_submit_while_idle_raises(self):
        session = ReviewSession(folder_id="folder-1")

        with pytest.raises(NoCardPresented):
            session.submit(Rating.GOOD, T)

    def test_cancel_returns_to_idle_without_changes(self, cards):
        session = ReviewSession(folder_id="folder-1")
        presented = session.present(cards, T)

        session.cancel()

        assert session.mode == "idle"
        assert presented.repetitions == 0
        assert presented.nextReview == "2025-02-27T08:00:00Z"


class TestReviewSessionStore:
    def test_get_missing_returns_none(self):
        store = ReviewSessionStore()
        assert store.get("folder-1") is None

    def test_get_or_create_reuses_session(self):
        store = ReviewSessionStore()

        first = store.get_or_create("folder-1")
        second = store.get_or_create("folder-1")

        assert first is second
        assert store.get("folder-1") is first

    def test_sessions_are_per_folder(self):
        store = ReviewSessionStore()

        assert store.get_or_create("folder-1") is not store.get_or_create("folder-2")

    def test_release_card_only_releases_matching_card(self, cards):
        store = ReviewSessionStore()
        session = store.get_or_create("folder-1")
        session.present(cards, T)

        assert store.release_card("folder-1", "due-later") is False
        assert session.is_presenting

        assert store.release_card("folder-1", "due-first") is True
        assert session.mode == "idle"

    def test_release_card_without_session(self):
        store = ReviewSessionStore()
        assert store.release_card("folder-1", "card-1") is False

    def test_reset_and_clear(self):
        store = ReviewSessionStore()
        store.get_or_create("folder-1")
        store.get_or_create("folder-2")

        store.reset("folder-1")
        assert store.get("folder-1") is None
        assert store.get("folder-2") is not None

        store.clear()
        assert store.get("folder-2") is None

    def test_sessions_expire(self):
        store = ReviewSessionStore(ttl_seconds=0.01)
        store.get_or_create("folder-1")

        time.sleep(0.05)
        assert store.get("folder-1") is None
