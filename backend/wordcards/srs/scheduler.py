"""SM-2 family review scheduler.

A card's scheduling state is an immutable value. ``transition`` takes the
current state, the learner's rating and the review time, and returns the next
state; it reads no clock and touches no storage, so the caller persists the
result.

Rules (defaults from ``SchedulerPolicy``):
- again: repetitions = 0, EF = max(1.3, EF - 0.2), intervalDays = 1
- hard/good/easy:
    repetitions += 1
    EF' = EF - 0.15 (hard), EF (good), EF + 0.15 (easy), never below 1.3
    repetitions == 1: intervalDays = 1
    repetitions == 2: intervalDays = 6
    else: intervalDays = round(previousIntervalDays * factor) where factor is
          1.2 for hard, EF' for good and EF' * 1.3 for easy
- lastReviewed = now, nextReview = now + intervalDays
"""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from .policy import DEFAULT_POLICY, SchedulerPolicy
from .time import add_days, ensure_utc


class SchedulingError(ValueError):
    """Base class for refused transitions."""


class InvalidRating(SchedulingError):
    """Raised when a rating is not one of again/hard/good/easy."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid rating: {value!r} (expected one of {', '.join(Rating.values())})")


class InvalidState(SchedulingError):
    """Raised when a stored scheduling state breaks an invariant."""


class Rating(str, Enum):
    """Review rating, ordered again < hard < good < easy."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def parse(cls, value: object) -> "Rating":
        """Return the Rating for ``value``; no case folding or trimming is applied."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        raise InvalidRating(value)

    @property
    def rank(self) -> int:
        return list(Rating).index(self)

    @property
    def is_lapse(self) -> bool:
        return self is Rating.AGAIN

    def _compare(self, other, op):
        if not isinstance(other, Rating):
            return NotImplemented
        return op(self.rank, other.rank)

    # str already defines every comparison, so all four are overridden
    def __lt__(self, other):
        return self._compare(other, operator.lt)

    def __le__(self, other):
        return self._compare(other, operator.le)

    def __gt__(self, other):
        return self._compare(other, operator.gt)

    def __ge__(self, other):
        return self._compare(other, operator.ge)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SchedulingState:
    repetitions: int
    ease: float
    interval_days: int
    next_review: datetime
    last_reviewed: datetime | None = None

    @classmethod
    def new(cls, created_at: datetime, policy: SchedulerPolicy = DEFAULT_POLICY) -> "SchedulingState":
        """State of a card that has never been reviewed: due at creation time."""
        return cls(
            repetitions=0,
            ease=policy.default_ease,
            interval_days=0,
            next_review=ensure_utc(created_at),
            last_reviewed=None,
        )

    @property
    def is_new(self) -> bool:
        return self.last_reviewed is None

    def is_due(self, now: datetime) -> bool:
        return self.next_review <= ensure_utc(now)

    def validate(self, policy: SchedulerPolicy = DEFAULT_POLICY) -> None:
        """Raise InvalidState if any invariant is broken."""
        if isinstance(self.repetitions, bool) or not isinstance(self.repetitions, int):
            raise InvalidState(f"repetitions must be an integer, got {self.repetitions!r}")
        if self.repetitions < 0:
            raise InvalidState(f"repetitions must be >= 0, got {self.repetitions}")
        if not math.isfinite(self.ease) or self.ease < policy.min_ease:
            raise InvalidState(f"ease must be >= {policy.min_ease}, got {self.ease}")
        if self.interval_days < 0:
            raise InvalidState(f"intervalDays must be >= 0, got {self.interval_days}")


def _adjust_ease(ease: float, rating: Rating, policy: SchedulerPolicy) -> float:
    if rating is Rating.GOOD:
        return ease
    if rating is Rating.AGAIN:
        ease -= policy.lapse_ease_penalty
    elif rating is Rating.HARD:
        ease -= policy.hard_ease_penalty
    else:
        ease += policy.easy_ease_bonus
    # Two decimals keep stored values stable across repeated transitions
    return max(policy.min_ease, round(ease, 2))


def _next_interval(
    previous: int, repetitions: int, ease: float, rating: Rating, policy: SchedulerPolicy
) -> int:
    if repetitions == 1:
        return policy.first_interval_days
    if repetitions == 2:
        return policy.second_interval_days

    if rating is Rating.HARD:
        factor = policy.hard_interval_multiplier
    elif rating is Rating.EASY:
        factor = ease * policy.easy_bonus
    else:
        factor = ease

    # Successful reviews never shorten the interval
    return max(1, previous, round(previous * factor))


def transition(
    state: SchedulingState,
    rating: Rating | str,
    now: datetime,
    policy: SchedulerPolicy = DEFAULT_POLICY,
) -> SchedulingState:
    """Compute the scheduling state that follows a review.

    Args:
        state: Current state of the card (must satisfy the invariants)
        rating: The learner's rating
        now: Review time; becomes lastReviewed and the base for nextReview
        policy: Scheduling constants

    Returns:
        A new SchedulingState; ``state`` is left untouched.

    Raises:
        InvalidRating: If ``rating`` is not again/hard/good/easy
        InvalidState: If ``state`` breaks an invariant, or ``now`` is earlier
            than the state's last review
    """
    rating = Rating.parse(rating)
    state.validate(policy)

    now = ensure_utc(now)
    if state.last_reviewed is not None and now < state.last_reviewed:
        raise InvalidState(
            f"review time {now.isoformat()} is earlier than last review {state.last_reviewed.isoformat()}"
        )

    ease = _adjust_ease(state.ease, rating, policy)
    if rating.is_lapse:
        repetitions = 0
        interval = policy.lapse_interval_days
    else:
        repetitions = state.repetitions + 1
        interval = _next_interval(state.interval_days, repetitions, ease, rating, policy)

    return replace(
        state,
        repetitions=repetitions,
        ease=ease,
        interval_days=interval,
        last_reviewed=now,
        next_review=add_days(now, interval),
    )
