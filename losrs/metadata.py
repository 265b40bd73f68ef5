"""Review-state metadata lines.

Persisted form, one line under the card bullet:

    card-review:: due:2024-01-02 interval:1 ease:2.50 reps:1

Pages last reviewed with Logseq's own SRS carry these instead, which are
read (never written) when no `card-review` line is present:

    card-last-interval:: 39.06
    card-repeats:: 4
    card-ease-factor:: 2.36
    card-next-schedule:: 2025-07-15T00:00:00.000Z
"""

import math
from datetime import date, datetime, timezone

from losrs.errors import ValidationError
from losrs.models import Bullet, ReviewState
from losrs.scheduler import DEFAULT_CONFIG

REVIEW_KEY = "card-review"
_FIELDS = ("due", "interval", "ease", "reps")

LEGACY_INTERVAL_KEY = "card-last-interval"
LEGACY_REPEATS_KEY = "card-repeats"
LEGACY_EASE_KEY = "card-ease-factor"
LEGACY_SCHEDULE_KEY = "card-next-schedule"


def format_review_state(state: ReviewState) -> str:
    return (f"due:{state.due_date.isoformat()} interval:{state.interval} "
            f"ease:{state.ease_factor:.2f} reps:{state.repetition_count}")


def format_review_line(state: ReviewState, indent: str) -> str:
    return f"{indent}{REVIEW_KEY}:: {format_review_state(state)}"


def parse_review_state(value: str, line: int | None = None,
                       ease_floor: float = DEFAULT_CONFIG.ease_floor) -> ReviewState:
    """Deserialize a `card-review` value. Raises ValidationError on any defect."""
    fields: dict[str, str] = {}
    for token in value.split():
        k, sep, v = token.partition(":")
        if not sep or not v:
            raise ValidationError(f"malformed review field {token!r}", line)
        if k not in _FIELDS:
            raise ValidationError(f"unknown review field {k!r}", line)
        if k in fields:
            raise ValidationError(f"duplicate review field {k!r}", line)
        fields[k] = v
    missing = [k for k in _FIELDS if k not in fields]
    if missing:
        raise ValidationError(f"review line missing {', '.join(missing)}", line)

    try:
        due_date = date.fromisoformat(fields["due"])
        interval = int(fields["interval"])
        ease = float(fields["ease"])
        reps = int(fields["reps"])
    except ValueError as e:
        raise ValidationError(f"cannot parse review line: {e}", line) from e

    if interval < 1:
        raise ValidationError(f"interval must be at least 1 day, got {interval}", line)
    if reps < 0:
        raise ValidationError(f"repetition count must be non-negative, got {reps}", line)
    if not math.isfinite(ease) or ease <= 0:
        raise ValidationError(f"ease must be a positive number, got {fields['ease']}", line)
    # A line written under a lower floor is raised to the current one.
    return ReviewState(due_date=due_date, interval=interval,
                       ease_factor=max(ease, ease_floor), repetition_count=reps)


def _utc_date(value: str) -> date:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).date()


def _legacy_review_state(bullet: Bullet, ease_floor: float) -> ReviewState | None:
    interval_prop = bullet.get_property(LEGACY_INTERVAL_KEY)
    if interval_prop is None:
        return None
    line = interval_prop.line
    try:
        last_interval = float(interval_prop.value)
        if last_interval <= 0:
            return None
        repeats = bullet.get_property(LEGACY_REPEATS_KEY)
        ease = bullet.get_property(LEGACY_EASE_KEY)
        schedule = bullet.get_property(LEGACY_SCHEDULE_KEY)
        if schedule is None:
            raise ValidationError(f"{LEGACY_INTERVAL_KEY} without {LEGACY_SCHEDULE_KEY}", line)
        line = schedule.line
        due_date = _utc_date(schedule.value)
        reps = int(repeats.value) if repeats else 0
        ease_factor = float(ease.value) if ease else DEFAULT_CONFIG.default_ease
    except ValueError as e:
        raise ValidationError(f"cannot parse Logseq SRS properties: {e}", line) from e
    return ReviewState(
        due_date=due_date,
        interval=max(1, math.ceil(last_interval)),
        ease_factor=max(ease_factor, ease_floor),
        repetition_count=max(reps, 0),
    )


def read_review_state(bullet: Bullet,
                      ease_floor: float = DEFAULT_CONFIG.ease_floor) -> ReviewState | None:
    """Review state recorded on a bullet, or None for a never-reviewed card."""
    prop = bullet.get_property(REVIEW_KEY)
    if prop is not None:
        return parse_review_state(prop.value, prop.line, ease_floor)
    return _legacy_review_state(bullet, ease_floor)
