"""SM-2 family scheduler.

Per-card state: due date, interval (days), ease factor, repetition count.
`next_state` is a pure function of the current state, the outcome and the
injected `now`; nothing here reads a clock or touches storage.
"""

import dataclasses
from datetime import date, datetime, timedelta, timezone

from losrs.errors import ValidationError
from losrs.models import ReviewOutcome, ReviewState


@dataclasses.dataclass(frozen=True)
class SchedulerConfig:
    seed_interval: int = 1
    default_ease: float = 2.5
    ease_floor: float = 1.3
    min_interval: int = 1
    fail_penalty: float = 0.2
    easy_bonus: float = 0.15
    hard_penalty: float = 0.15

    def __post_init__(self):
        if self.seed_interval < 1:
            raise ValidationError(f"seed_interval must be at least 1, got {self.seed_interval}")
        if self.min_interval < 1:
            raise ValidationError(f"min_interval must be at least 1, got {self.min_interval}")
        if self.ease_floor <= 0:
            raise ValidationError(f"ease_floor must be positive, got {self.ease_floor}")
        if self.default_ease < self.ease_floor:
            raise ValidationError(
                f"default_ease {self.default_ease} is below ease_floor {self.ease_floor}")
        for name in ("fail_penalty", "easy_bonus", "hard_penalty"):
            value = getattr(self, name)
            if value < 0:
                raise ValidationError(f"{name} must be non-negative")
            if 0 < value < 0.01:
                raise ValidationError(
                    f"{name} must be 0 or at least 0.01 (ease is kept to 2 decimals), got {value}")


DEFAULT_CONFIG = SchedulerConfig()


def utc_today(now: datetime) -> date:
    """Calendar date of `now` in UTC. Naive datetimes are taken as UTC."""
    if now.tzinfo is None:
        return now.date()
    return now.astimezone(timezone.utc).date()


def _clamp_ease(ease: float, config: SchedulerConfig) -> float:
    """Round to the 2 decimals the review line stores, then apply the floor."""
    return max(round(ease, 2), config.ease_floor)


def next_state(current: ReviewState | None, outcome: ReviewOutcome, now: datetime,
               config: SchedulerConfig = DEFAULT_CONFIG) -> ReviewState:
    """Compute the review state after grading a card with `outcome` at `now`."""
    today = utc_today(now)

    if current is None:
        if not outcome.is_failing:
            interval = config.seed_interval
            return ReviewState(due_date=today + timedelta(days=interval), interval=interval,
                               ease_factor=config.default_ease, repetition_count=1)
        ease = config.default_ease
        interval = config.seed_interval
        reps = 0
    else:
        ease = current.ease_factor
        interval = current.interval
        reps = current.repetition_count

    if outcome.is_failing:
        reps = 0
        interval = config.min_interval
        ease = _clamp_ease(ease - config.fail_penalty, config)
    else:
        reps += 1
        interval = max(round(interval * ease), interval + 1)
        if outcome is ReviewOutcome.EASY:
            ease = _clamp_ease(ease + config.easy_bonus, config)
        elif outcome is ReviewOutcome.HARD:
            ease = _clamp_ease(ease - config.hard_penalty, config)

    return ReviewState(due_date=today + timedelta(days=interval), interval=interval,
                       ease_factor=ease, repetition_count=reps)
