"""Tests for scheduler policy configuration."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from wordcards.srs.policy import _ENV_OVERRIDES, DEFAULT_POLICY, SchedulerPolicy, get_scheduler_policy
from wordcards.srs.scheduler import Rating, SchedulingState, transition


@pytest.fixture(autouse=True)
def clear_policy_cache():
    get_scheduler_policy.cache_clear()
    yield
    get_scheduler_policy.cache_clear()


def test_defaults():
    assert DEFAULT_POLICY.default_ease == 2.5
    assert DEFAULT_POLICY.min_ease == 1.3
    assert DEFAULT_POLICY.lapse_ease_penalty == 0.2
    assert DEFAULT_POLICY.hard_ease_penalty == 0.15
    assert DEFAULT_POLICY.easy_ease_bonus == 0.15
    assert DEFAULT_POLICY.hard_interval_multiplier == 1.2
    assert DEFAULT_POLICY.easy_bonus == 1.3
    assert DEFAULT_POLICY.review_max_attempts == 3


def test_without_overrides_returns_default_policy(monkeypatch):
    for name in _ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    assert get_scheduler_policy() == DEFAULT_POLICY


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SRS_EASY_BONUS", "1.5")
    monkeypatch.setenv("SRS_REVIEW_MAX_ATTEMPTS", "5")

    policy = get_scheduler_policy()

    assert policy.easy_bonus == 1.5
    assert policy.review_max_attempts == 5
    assert policy.default_ease == 2.5


def test_invalid_override_is_rejected(monkeypatch):
    monkeypatch.setenv("SRS_MIN_EASE", "0.5")

    with pytest.raises(ValidationError):
        get_scheduler_policy()


def test_policy_is_frozen():
    with pytest.raises(ValidationError):
        DEFAULT_POLICY.min_ease = 1.1


def test_policy_validation():
    with pytest.raises(ValidationError):
        SchedulerPolicy(review_max_attempts=0)


def test_min_ease_override_cannot_lower_floor(monkeypatch):
    monkeypatch.setenv("SRS_MIN_EASE", "1.1")

    with pytest.raises(ValidationError):
        get_scheduler_policy()


def test_min_ease_may_be_raised():
    policy = SchedulerPolicy(min_ease=1.5)
    assert policy.min_ease == 1.5


def test_default_ease_below_floor_is_rejected():
    with pytest.raises(ValidationError) as exc_info:
        SchedulerPolicy(min_ease=2.6)

    assert "default_ease" in str(exc_info.value)


def test_new_cards_are_reviewable_under_raised_floor():
    now = datetime(2025, 3, 1, tzinfo=timezone.utc)
    policy = SchedulerPolicy(default_ease=2.6, min_ease=2.6)

    result = transition(SchedulingState.new(now, policy), Rating.GOOD, now, policy)

    assert result.ease == 2.6
    assert result.repetitions == 1
