"""losrs — spaced repetition cards embedded in Logseq pages."""

__version__ = "0.1.0"

from losrs.errors import LosrsError, NotFoundError, ParseError, ValidationError
from losrs.extract import extract_cards
from losrs.models import Bullet, Card, ClozeSpan, Property, ReviewOutcome, ReviewState
from losrs.outline import parse_outline
from losrs.page import Page
from losrs.scheduler import SchedulerConfig, next_state
from losrs.writer import apply_reviews, write_review_state

__all__ = [
    "Bullet", "Card", "ClozeSpan", "LosrsError", "NotFoundError", "Page", "ParseError",
    "Property", "ReviewOutcome", "ReviewState", "SchedulerConfig", "ValidationError",
    "apply_reviews", "extract_cards", "next_state", "parse_outline", "write_review_state",
]
