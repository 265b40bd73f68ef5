"""Page: central object that wires parsing, scheduling and writing for one file."""

import logging
import pathlib
from datetime import datetime

from losrs.extract import extract_cards, normalize_prompt
from losrs.models import Card, ReviewOutcome, ReviewState
from losrs.outline import parse_outline
from losrs.scheduler import DEFAULT_CONFIG, SchedulerConfig, next_state
from losrs.writer import apply_reviews

logger = logging.getLogger(__name__)


def _read_text(path: pathlib.Path) -> str:
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


class Page:
    """Holds one page's text, its cards and the reviews not yet written.

    Usage:
        page = Page.load(path)
        for card in page.due_cards(today):
            page.review(card, outcome, now)
        page.save()

    Reviews are queued in memory and only written by `save`, which matches
    cards by prompt against the file as it is at that moment.
    """

    def __init__(self, text: str, path: pathlib.Path | str | None = None,
                 config: SchedulerConfig = DEFAULT_CONFIG):
        self.path = pathlib.Path(path) if path is not None else None
        self.text = text
        self.config = config
        self.root = parse_outline(text)
        self.cards = extract_cards(self.root, config.ease_floor)
        self.pending: list[Card] = []

    @classmethod
    def load(cls, path: pathlib.Path | str, config: SchedulerConfig = DEFAULT_CONFIG) -> "Page":
        path = pathlib.Path(path)
        return cls(_read_text(path), path, config)

    def due_cards(self, today) -> list[Card]:
        return [c for c in self.cards if c.is_due(today)]

    def find(self, prompt: str) -> Card | None:
        """First card whose prompt matches `prompt` after tag and whitespace normalization."""
        prompt = normalize_prompt(prompt)
        for card in self.cards:
            if card.prompt == prompt:
                return card
        return None

    def review(self, card: Card, outcome: ReviewOutcome, now: datetime) -> ReviewState:
        """Schedule `card` and queue its new state for `save`."""
        state = next_state(card.review_state, outcome, now, self.config)
        card.review_state = state
        self.pending.append(card)
        logger.debug("%s: %r graded %s, next due %s", self.path, card.prompt,
                     outcome.value, state.due_date)
        return state

    def render(self) -> str:
        """Page text with every queued review applied."""
        return apply_reviews(self.text, self.pending, self.config.ease_floor)

    def save(self) -> bool:
        """Write queued reviews back to the file. Returns True if the file changed.

        The file is re-read first, so edits made since `load` are kept as long
        as the reviewed prompts still exist; a vanished prompt raises
        NotFoundError and nothing is written.
        """
        if self.path is None:
            raise ValueError("Page has no path to save to")
        current = _read_text(self.path)
        new_text = apply_reviews(current, self.pending, self.config.ease_floor)
        changed = new_text != current
        if changed:
            with open(self.path, "w", encoding="utf-8", newline="") as f:
                f.write(new_text)
        self.text = new_text
        self.root = parse_outline(new_text)
        self.cards = extract_cards(self.root, self.config.ease_floor)
        self.pending = []
        return changed
