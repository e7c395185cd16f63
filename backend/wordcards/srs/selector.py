"""Due-card selection over a snapshot of a folder's cards.

These helpers never mutate the cards they are given; only a subsequent
``transition`` (persisted by the caller) changes a card's schedule.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Protocol, TypeVar

from .scheduler import SchedulingState
from .time import ensure_utc


class Schedulable(Protocol):
    id: str

    def scheduling_state(self) -> SchedulingState: ...


CardT = TypeVar("CardT", bound=Schedulable)


@dataclass(frozen=True)
class EmptyDueQueue:
    """Returned by ``next_to_review`` when nothing is due.

    Attributes:
        next_due_at: Earliest upcoming nextReview in the folder, or None if
            the folder has no cards at all
    """

    next_due_at: datetime | None = None

    def __bool__(self) -> bool:
        return False


def _next_review(card: Schedulable) -> datetime:
    return card.scheduling_state().next_review


def due_cards(cards: Iterable[CardT], now: datetime) -> list[CardT]:
    """Cards with nextReview <= now, earliest first; ties keep input order."""
    now = ensure_utc(now)
    due = [card for card in cards if _next_review(card) <= now]
    # list.sort is stable, so equal nextReview values keep their input order
    due.sort(key=_next_review)
    return due


def due_count(cards: Iterable[Schedulable], now: datetime) -> int:
    now = ensure_utc(now)
    return sum(1 for card in cards if _next_review(card) <= now)


def next_due_at(cards: Iterable[Schedulable]) -> datetime | None:
    """Earliest nextReview among ``cards`` (None when there are no cards)."""
    return min((_next_review(card) for card in cards), default=None)


def next_to_review(cards: Iterable[CardT], now: datetime) -> CardT | EmptyDueQueue:
    """Return the most overdue card, or an EmptyDueQueue when none is due."""
    cards = list(cards)
    due = due_cards(cards, now)
    if due:
        return due[0]
    return EmptyDueQueue(next_due_at=next_due_at(cards))
