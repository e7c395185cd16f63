"""Review session state machine and its TTL-based store.

A session has one card in flight at most:

    Idle -> Presenting(card) -> Idle

``present`` picks the most overdue card, ``submit`` turns a rating into the
card's next scheduling state and returns to Idle, ``cancel`` abandons the card
without touching its schedule. The session never persists anything; callers
write the returned state through the card repository and then ask for the
next card.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Generic, Iterable, Literal

from cachetools import TTLCache

from .policy import DEFAULT_POLICY, SchedulerPolicy, get_scheduler_policy
from .scheduler import Rating, SchedulingState, transition
from .selector import CardT, EmptyDueQueue, next_to_review

logger = logging.getLogger(__name__)


SessionMode = Literal["idle", "presenting"]


class NoCardPresented(RuntimeError):
    """Raised when a rating is submitted while no card is being presented."""


@dataclass
class ReviewSession(Generic[CardT]):
    """Review session for one folder.

    Attributes:
        folder_id: Folder whose cards are being reviewed
        card: The card currently presented, None while idle
    """

    folder_id: str
    card: CardT | None = None

    @property
    def mode(self) -> SessionMode:
        return "idle" if self.card is None else "presenting"

    @property
    def is_presenting(self) -> bool:
        return self.card is not None

    def present(self, cards: Iterable[CardT], now: datetime) -> CardT | EmptyDueQueue:
        """Present the next due card.

        While a card is already in flight and still due in ``cards`` it is
        returned again, refreshed from the snapshot. A card that was deleted or
        rescheduled elsewhere in the meantime is dropped first. When nothing
        is due the session stays idle and the EmptyDueQueue is returned.
        """
        cards = list(cards)
        if self.card is not None:
            current = next((card for card in cards if card.id == self.card.id), None)
            if current is not None and current.scheduling_state().is_due(now):
                self.card = current
                return current
            self.card = None

        selection = next_to_review(cards, now)
        if isinstance(selection, EmptyDueQueue):
            return selection

        self.card = selection
        return selection

    def submit(
        self,
        rating: Rating | str,
        now: datetime,
        policy: SchedulerPolicy = DEFAULT_POLICY,
    ) -> tuple[CardT, SchedulingState]:
        """Rate the presented card and return it with its next scheduling state.

        The session only returns to idle once the transition succeeds; an
        invalid rating or state leaves the same card presented.
        """
        if self.card is None:
            raise NoCardPresented(f"No card is being presented in folder {self.folder_id}")

        card = self.card
        new_state = transition(card.scheduling_state(), rating, now, policy)
        self.card = None
        return card, new_state

    def cancel(self) -> None:
        self.card = None


class ReviewSessionStore:
    """Thread-safe TTL-based session store.

    Stores ReviewSession keyed by folder id. Sessions expire after TTL seconds
    of inactivity (sliding window), which also abandons any card in flight.
    """

    DEFAULT_TTL_SECONDS = 30 * 60
    MAX_SESSIONS = 10000

    def __init__(self, ttl_seconds: int = DEFAULT_TTL_SECONDS, maxsize: int = MAX_SESSIONS):
        self._cache: TTLCache[str, ReviewSession] = TTLCache(maxsize=maxsize, ttl=ttl_seconds)
        self._lock = threading.Lock()

    def get(self, folder_id: str) -> ReviewSession | None:
        """Get the session for a folder, refreshing its TTL.

        Returns None if no session exists or it has expired.
        """
        with self._lock:
            session = self._cache.get(folder_id)
            if session is not None:
                # Re-set to refresh TTL (sliding window)
                self._cache[folder_id] = session
            return session

    def get_or_create(self, folder_id: str) -> ReviewSession:
        with self._lock:
            session = self._cache.get(folder_id)
            if session is None:
                session = ReviewSession(folder_id=folder_id)
            self._cache[folder_id] = session
            return session

    def release_card(self, folder_id: str, card_id: str) -> bool:
        """Return a folder's session to idle if ``card_id`` is the card in flight.

        Returns:
            True if a presented card was released
        """
        with self._lock:
            session = self._cache.get(folder_id)
            if session is None or session.card is None or session.card.id != card_id:
                return False
            session.cancel()
            self._cache[folder_id] = session
        logger.debug(f"Released card {card_id} from review session of folder {folder_id}")
        return True

    def reset(self, folder_id: str) -> None:
        with self._lock:
            self._cache.pop(folder_id, None)

    def clear(self) -> None:
        """Clear all sessions (for testing)."""
        with self._lock:
            self._cache.clear()


# Singleton instance
_session_store: ReviewSessionStore | None = None


def get_session_store() -> ReviewSessionStore:
    """Get the singleton session store instance."""
    global _session_store
    if _session_store is None:
        _session_store = ReviewSessionStore(ttl_seconds=get_scheduler_policy().session_ttl_seconds)
    return _session_store


def reset_session_store() -> None:
    """Reset the session store (for testing)."""
    global _session_store
    _session_store = None
