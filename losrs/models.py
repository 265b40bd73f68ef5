"""Shared data classes used across the parser, extractor, scheduler and writer."""

import enum
from dataclasses import dataclass, field
from datetime import date


@dataclass
class Property:
    key: str
    value: str
    line: int


@dataclass
class Bullet:
    """One outline node. The root bullet has depth -1 and line 0."""
    text: str
    depth: int
    line: int
    head_end: int
    children: list["Bullet"] = field(default_factory=list)
    properties: list[Property] = field(default_factory=list)

    def get_property(self, key: str) -> Property | None:
        for prop in self.properties:
            if prop.key == key:
                return prop
        return None

    def walk(self):
        """Yield descendants in document order (pre-order), excluding self."""
        for child in self.children:
            yield child
            yield from child.walk()


@dataclass(frozen=True)
class ClozeSpan:
    start: int
    end: int
    answer: str


@dataclass(frozen=True)
class ReviewState:
    due_date: date
    interval: int
    ease_factor: float
    repetition_count: int


class ReviewOutcome(enum.Enum):
    FAIL = "fail"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @classmethod
    def parse(cls, name: str) -> "ReviewOutcome":
        name = name.strip().lower()
        if name == "again":
            return cls.FAIL
        try:
            return cls(name)
        except ValueError:
            choices = ", ".join(o.value for o in cls)
            raise ValueError(f"Unknown review outcome {name!r} (expected one of: {choices})")

    @property
    def is_failing(self) -> bool:
        return self is ReviewOutcome.FAIL


@dataclass
class Card:
    prompt: str
    response: str = ""
    cloze_spans: list[ClozeSpan] = field(default_factory=list)
    review_state: ReviewState | None = None
    line: int = 0

    def is_due(self, today: date) -> bool:
        if self.review_state is None:
            return True
        return self.review_state.due_date <= today
