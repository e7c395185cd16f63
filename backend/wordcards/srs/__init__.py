"""SRS core: scheduling state, SM-2 transition, due-card selection and review sessions."""

from .policy import DEFAULT_POLICY, SchedulerPolicy, get_scheduler_policy
from .scheduler import (
    InvalidRating,
    InvalidState,
    Rating,
    SchedulingError,
    SchedulingState,
    transition,
)
from .selector import EmptyDueQueue, due_cards, due_count, next_due_at, next_to_review
from .session import NoCardPresented, ReviewSession, ReviewSessionStore, get_session_store
from .time import (
    utc_now,
    utc_now_iso,
    utc_datetime_to_iso_z,
    parse_iso_z,
    add_days,
    add_days_iso,
)

__all__ = [
    "DEFAULT_POLICY",
    "SchedulerPolicy",
    "get_scheduler_policy",
    "InvalidRating",
    "InvalidState",
    "Rating",
    "SchedulingError",
    "SchedulingState",
    "transition",
    "EmptyDueQueue",
    "due_cards",
    "due_count",
    "next_due_at",
    "next_to_review",
    "NoCardPresented",
    "ReviewSession",
    "ReviewSessionStore",
    "get_session_store",
    "utc_now",
    "utc_now_iso",
    "utc_datetime_to_iso_z",
    "parse_iso_z",
    "add_days",
    "add_days_iso",
]
