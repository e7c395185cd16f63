"""Scheduling policy constants, overridable from environment variables."""

import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SchedulerPolicy(BaseModel):
    """SM-2 family scheduling constants.

    The defaults follow the common SM-2 convention for four-button review:
    lapses cost 0.2 ease, "hard" costs 0.15 and "easy" earns 0.15.
    """

    model_config = ConfigDict(frozen=True)

    default_ease: float = Field(2.5, ge=1.3)
    # Ease never drops below 1.3, a policy may only raise the floor
    min_ease: float = Field(1.3, ge=1.3)
    lapse_ease_penalty: float = Field(0.2, ge=0)
    hard_ease_penalty: float = Field(0.15, ge=0)
    easy_ease_bonus: float = Field(0.15, ge=0)

    lapse_interval_days: int = Field(1, ge=1)
    first_interval_days: int = Field(1, ge=1)
    second_interval_days: int = Field(6, ge=1)
    # Used in place of the ease factor for "hard" answers
    hard_interval_multiplier: float = Field(1.2, ge=1.0)
    # Applied on top of the ease factor for "easy" answers
    easy_bonus: float = Field(1.3, ge=1.0)

    session_ttl_seconds: int = Field(1800, gt=0)
    review_max_attempts: int = Field(3, ge=1)

    @model_validator(mode="after")
    def _new_cards_start_above_floor(self) -> "SchedulerPolicy":
        if self.default_ease < self.min_ease:
            raise ValueError(
                f"default_ease ({self.default_ease}) must be >= min_ease ({self.min_ease})"
            )
        return self


DEFAULT_POLICY = SchedulerPolicy()


_ENV_OVERRIDES = {
    "SRS_DEFAULT_EASE": "default_ease",
    "SRS_MIN_EASE": "min_ease",
    "SRS_LAPSE_EASE_PENALTY": "lapse_ease_penalty",
    "SRS_HARD_EASE_PENALTY": "hard_ease_penalty",
    "SRS_EASY_EASE_BONUS": "easy_ease_bonus",
    "SRS_HARD_INTERVAL_MULTIPLIER": "hard_interval_multiplier",
    "SRS_EASY_BONUS": "easy_bonus",
    "SRS_SESSION_TTL_SECONDS": "session_ttl_seconds",
    "SRS_REVIEW_MAX_ATTEMPTS": "review_max_attempts",
}


@lru_cache()
def get_scheduler_policy() -> SchedulerPolicy:
    """Get the cached scheduling policy, applying any SRS_* environment overrides."""
    overrides = {
        field: os.environ[env_name]
        for env_name, field in _ENV_OVERRIDES.items()
        if os.getenv(env_name)
    }
    if not overrides:
        return DEFAULT_POLICY
    return SchedulerPolicy(**overrides)
