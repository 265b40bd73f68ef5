"""Metadata writer: persist a card's review state back into the page text.

Cards are located by prompt text, never by position, so a page can be parsed
once, reviewed for a whole session and written at the end. When two cards on
a page share a prompt, the first one in document order receives the update.
"""

import logging

from losrs.errors import NotFoundError, ValidationError
from losrs.extract import card_bullets, normalize_prompt
from losrs.metadata import REVIEW_KEY, format_review_line, read_review_state
from losrs.models import Bullet, Card
from losrs.outline import INDENT, parse_outline
from losrs.scheduler import DEFAULT_CONFIG

logger = logging.getLogger(__name__)


def find_card_bullet(root: Bullet, prompt: str) -> Bullet:
    matches = [b for b in card_bullets(root) if normalize_prompt(b.text) == prompt]
    if not matches:
        raise NotFoundError(prompt)
    if len(matches) > 1:
        logger.debug("prompt %r matches %d cards (lines %s); writing to the first",
                     prompt, len(matches), ", ".join(str(b.line) for b in matches))
    return matches[0]


def write_review_state(text: str, root: Bullet, card: Card,
                       ease_floor: float = DEFAULT_CONFIG.ease_floor) -> str:
    """Return `text` with `card.review_state` written under the matching bullet."""
    if card.review_state is None:
        raise ValidationError(f"card {card.prompt!r} has no review state to write")
    bullet = find_card_bullet(root, card.prompt)
    if read_review_state(bullet, ease_floor) == card.review_state:
        return text

    lines = text.split("\n")
    bullet_line = lines[bullet.line - 1]
    eol = "\r" if bullet_line.endswith("\r") else ""

    prop = bullet.get_property(REVIEW_KEY)
    if prop is not None:
        old = lines[prop.line - 1].rstrip("\r")
        indent = old[:len(old) - len(old.lstrip())]
        lines[prop.line - 1] = format_review_line(card.review_state, indent) + eol
    else:
        indent = " " * (INDENT * (bullet.depth + 1))
        lines.insert(bullet.head_end, format_review_line(card.review_state, indent) + eol)
    return "\n".join(lines)


def apply_reviews(text: str, cards: list[Card],
                  ease_floor: float = DEFAULT_CONFIG.ease_floor) -> str:
    """Write several cards in sequence, re-parsing between writes."""
    for card in cards:
        text = write_review_state(text, parse_outline(text), card, ease_floor)
    return text
