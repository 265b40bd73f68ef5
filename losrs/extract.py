"""Card extraction from a parsed outline.

A bullet is a card when its text carries the `#card` tag (or `#[[card]]`),
or its `tags::` property lists `card`:

    - What is the capital of France? #card
      card-review:: due:2024-01-02 interval:1 ease:2.50 reps:1
      - {{cloze Paris}}, on the Seine

The prompt is the bullet text without tags, whitespace collapsed. The
response is the descendant bullets rendered as a markdown list, stopping at
the first descendant that is itself a card.
"""

import logging
import re

from losrs.errors import ParseError
from losrs.metadata import read_review_state
from losrs.models import Bullet, Card, ClozeSpan
from losrs.scheduler import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

CARD_TAG = "card"
TAGS_KEY = "tags"

_TAG_RE = re.compile(r'(?<!\S)#(?:card|\[\[card\]\])(?!\S)', re.IGNORECASE)
_CLOZE_OPEN_RE = re.compile(r'\{\{cloze(?=[\s}])')
_CLOZE_CLOSE = "}}"


def _tags_from_property(value: str) -> set[str]:
    tags = set()
    for raw in value.split(","):
        tag = raw.strip().lstrip("#").strip()
        if tag.startswith("[[") and tag.endswith("]]"):
            tag = tag[2:-2]
        if tag:
            tags.add(tag.lower())
    return tags


def is_card_root(bullet: Bullet) -> bool:
    if _TAG_RE.search(bullet.text):
        return True
    prop = bullet.get_property(TAGS_KEY)
    return prop is not None and CARD_TAG in _tags_from_property(prop.value)


def normalize_prompt(text: str) -> str:
    """Strip card tags and collapse whitespace."""
    return " ".join(_TAG_RE.sub(" ", text).split())


def _render_response(card_root: Bullet) -> tuple[str, list[tuple[int, int, int]]]:
    """Render descendants as a markdown list.

    Returns (response, segments) where each segment is (start, end, line):
    the offsets one bullet occupies in the response and its source line.
    """
    entries = []
    segments = []
    offset = 0
    for bullet in card_root.walk():
        if is_card_root(bullet):
            logger.debug("card on line %d: response stops at nested card on line %d",
                         card_root.line, bullet.line)
            break
        pad = "  " * (bullet.depth - card_root.depth - 1)
        first, *rest = bullet.text.split("\n")
        entry = f"{pad}- {first}" + "".join(f"\n{pad}  {line}" for line in rest)
        if entries:
            offset += 1
        segments.append((offset, offset + len(entry), bullet.line))
        entries.append(entry)
        offset += len(entry)
    return "\n".join(entries), segments


def _line_at(segments: list[tuple[int, int, int]], offset: int, default: int) -> int:
    for start, end, line in segments:
        if start <= offset <= end:
            return line
    return default


def find_cloze_spans(text: str, segments: list[tuple[int, int, int]] | None = None,
                     default_line: int = 0) -> list[ClozeSpan]:
    """Find `{{cloze answer}}` spans in order. Malformed delimiters raise ParseError."""
    segments = segments or []
    opens = [m.start() for m in _CLOZE_OPEN_RE.finditer(text)]
    spans = []
    for i, start in enumerate(opens):
        line = _line_at(segments, start, default_line)
        close = text.find(_CLOZE_CLOSE, start)
        if close == -1:
            raise ParseError("unterminated cloze (missing '}}')", line)
        if i + 1 < len(opens) and opens[i + 1] < close:
            raise ParseError("nested or overlapping cloze",
                             _line_at(segments, opens[i + 1], default_line))
        if _line_at(segments, close, default_line) != line:
            raise ParseError("cloze spans more than one bullet", line)
        answer = text[start + len("{{cloze"):close].strip()
        if not answer:
            raise ParseError("empty cloze", line)
        spans.append(ClozeSpan(start=start, end=close + len(_CLOZE_CLOSE), answer=answer))
    return spans


def extract_card(bullet: Bullet, ease_floor: float = DEFAULT_CONFIG.ease_floor) -> Card:
    response, segments = _render_response(bullet)
    return Card(
        prompt=normalize_prompt(bullet.text),
        response=response,
        cloze_spans=find_cloze_spans(response, segments, bullet.line),
        review_state=read_review_state(bullet, ease_floor),
        line=bullet.line,
    )


def card_bullets(root: Bullet):
    """Yield card-root bullets in document order."""
    for bullet in root.walk():
        if is_card_root(bullet):
            yield bullet


def extract_cards(root: Bullet, ease_floor: float = DEFAULT_CONFIG.ease_floor) -> list[Card]:
    """Extract every card in the tree, in document order."""
    return [extract_card(b, ease_floor) for b in card_bullets(root)]
