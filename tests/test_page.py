"""Tests for losrs.page."""

from datetime import date, datetime

import pytest

from losrs.errors import NotFoundError
from losrs.models import ReviewOutcome
from losrs.page import Page
from losrs.scheduler import SchedulerConfig


def test_load(page_file):
    page = Page.load(page_file)
    assert page.path == page_file
    assert len(page.cards) == 2
    assert page.pending == []


def test_due_cards(page_file):
    page = Page.load(page_file)
    assert [c.line for c in page.due_cards(date(2024, 1, 1))] == [3]
    assert [c.line for c in page.due_cards(date(2024, 1, 10))] == [3, 5]


def test_find(page_file):
    page = Page.load(page_file)
    assert page.find("Photosynthesis happens in the").line == 5
    assert page.find("nope") is None


def test_find_normalizes_prompt():
    page = Page("- What  is   X? #card\n  - y\n")
    assert page.find("What  is   X?").line == 1
    assert page.find(" What is X? #card ").line == 1


def test_ease_written_under_lower_floor_still_loads(tmp_path):
    text = "- Q #card\n  card-review:: due:2024-01-02 interval:1 ease:1.30 reps:0\n"
    path = tmp_path / "q.md"
    path.write_text(text)
    page = Page.load(path, SchedulerConfig(ease_floor=1.5))
    assert page.cards[0].review_state.ease_factor == 1.5
    assert page.save() is False
    assert path.read_text() == text


def test_review_does_not_touch_file(page_file, sample_text):
    page = Page.load(page_file)
    card = page.find("Photosynthesis happens in the")
    state = page.review(card, ReviewOutcome.GOOD, datetime(2024, 1, 10))
    assert state.interval == 15
    assert card.review_state == state
    assert page_file.read_text() == sample_text


def test_save_writes_all_reviews(page_file):
    page = Page.load(page_file)
    for card in page.due_cards(date(2024, 1, 10)):
        page.review(card, ReviewOutcome.GOOD, datetime(2024, 1, 10))
    assert page.save() is True
    assert page.pending == []

    reloaded = Page.load(page_file)
    states = [c.review_state for c in reloaded.cards]
    assert [s.due_date for s in states] == [date(2024, 1, 11), date(2024, 1, 25)]
    assert [s.repetition_count for s in states] == [1, 3]


def test_save_without_reviews_leaves_file(page_file, sample_text):
    page = Page.load(page_file)
    assert page.save() is False
    assert page_file.read_text() == sample_text


def test_save_preserves_crlf(tmp_path):
    path = tmp_path / "crlf.md"
    path.write_bytes(b"- Q #card\r\n  - A\r\n")
    page = Page.load(path)
    page.review(page.cards[0], ReviewOutcome.GOOD, datetime(2024, 1, 1))
    page.save()
    assert path.read_bytes() == (
        b"- Q #card\r\n"
        b"  card-review:: due:2024-01-02 interval:1 ease:2.50 reps:1\r\n"
        b"  - A\r\n"
    )


def test_save_after_card_deleted(page_file):
    page = Page.load(page_file)
    card = page.find("Photosynthesis happens in the")
    page.review(card, ReviewOutcome.GOOD, datetime(2024, 1, 10))
    page_file.write_text("- Everything was rewritten\n")
    with pytest.raises(NotFoundError):
        page.save()
    assert page.pending == [card]


def test_config_is_used(page_file):
    page = Page.load(page_file, SchedulerConfig(seed_interval=4))
    card = page.cards[0]
    assert page.review(card, ReviewOutcome.GOOD, datetime(2024, 1, 1)).interval == 4


def test_page_without_path():
    page = Page("- Q #card\n")
    page.review(page.cards[0], ReviewOutcome.EASY, datetime(2024, 1, 1))
    assert "card-review::" in page.render()
    with pytest.raises(ValueError):
        page.save()


def test_save_keeps_edits_made_since_load(page_file, sample_text):
    page = Page.load(page_file)
    page.review(page.cards[0], ReviewOutcome.GOOD, datetime(2024, 1, 1))
    page_file.write_text(sample_text + "- Added while reviewing\n")
    assert page.save() is True
    text = page_file.read_text()
    assert text.endswith("- Not a card\n- Added while reviewing\n")
    assert "    card-review:: due:2024-01-02 interval:1 ease:2.50 reps:1\n" in text
