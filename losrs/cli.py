"""CLI: command-line interface for losrs."""

import argparse
import logging
import pathlib
import sys
from datetime import date, datetime, timezone

from losrs.config import get_config_dir, load_settings, scheduler_config
from losrs.errors import LosrsError, NotFoundError
from losrs.models import ReviewOutcome
from losrs.page import Page
from losrs.scanner import find_page_files
from losrs.scheduler import utc_today


def _load_pages(args, config) -> list[Page]:
    return [Page.load(p, config) for p in find_page_files(pathlib.Path(args.path))]


def _describe(card) -> str:
    if card.review_state is None:
        return "new"
    return f"due {card.review_state.due_date.isoformat()}"


def cmd_cards(args, config):
    pages = _load_pages(args, config)
    total = 0
    for page in pages:
        for card in page.cards:
            print(f"{page.path}:{card.line}: [{_describe(card)}] {card.prompt}")
            total += 1
    print(f"{total} card(s) in {len(pages)} page(s)")


def cmd_due(args, config):
    today = args.today or utc_today(datetime.now(timezone.utc))
    pages = _load_pages(args, config)
    total = 0
    for page in pages:
        for card in page.due_cards(today):
            print(f"{page.path}:{card.line}: [{_describe(card)}] {card.prompt}")
            total += 1
    print(f"{total} card(s) due on {today.isoformat()}")


def cmd_grade(args, config):
    outcome = ReviewOutcome.parse(args.outcome)
    now = args.now or datetime.now(timezone.utc)
    for page in _load_pages(args, config):
        card = page.find(args.prompt)
        if card is None:
            continue
        state = page.review(card, outcome, now)
        page.save()
        print(f"{page.path}:{card.line}: next review {state.due_date.isoformat()} "
              f"(interval {state.interval}d, ease {state.ease_factor:.2f}, "
              f"reps {state.repetition_count})")
        return
    raise NotFoundError(args.prompt)


def cmd_check(args, config):
    failures = 0
    cards = 0
    page_files = find_page_files(pathlib.Path(args.path))
    for path in page_files:
        try:
            page = Page.load(path, config)
        except LosrsError as e:
            print(f"{path}: {e}", file=sys.stderr)
            failures += 1
            continue
        cards += len(page.cards)
    print(f"{len(page_files)} page(s), {cards} card(s), {failures} error(s)")
    if failures:
        sys.exit(1)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r} (expected YYYY-MM-DD)")


def _parse_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid timestamp {value!r} (expected ISO 8601)")


def main():
    parser = argparse.ArgumentParser(
        prog="losrs", description="Spaced repetition cards embedded in Logseq pages")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--config-dir", help="Directory holding settings.toml")
    subparsers = parser.add_subparsers(dest="command")

    p_cards = subparsers.add_parser("cards", help="List cards in a page or graph")
    p_cards.add_argument("path", help="Page file or graph root")

    p_due = subparsers.add_parser("due", help="List cards due for review")
    p_due.add_argument("path", help="Page file or graph root")
    p_due.add_argument("--today", type=_parse_date, help="Review date (default: today, UTC)")

    p_grade = subparsers.add_parser("grade", help="Record a review outcome for one card")
    p_grade.add_argument("path", help="Page file or graph root")
    p_grade.add_argument("prompt", help="Card prompt, without the #card tag")
    p_grade.add_argument("outcome", help="fail, hard, good or easy")
    p_grade.add_argument("--now", type=_parse_datetime, help="Review time (default: now)")

    p_check = subparsers.add_parser("check", help="Parse pages and report errors")
    p_check.add_argument("path", help="Page file or graph root")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    config_dir = pathlib.Path(args.config_dir) if args.config_dir else get_config_dir()
    try:
        config = scheduler_config(load_settings(config_dir))
        if args.command == "cards":
            cmd_cards(args, config)
        elif args.command == "due":
            cmd_due(args, config)
        elif args.command == "grade":
            cmd_grade(args, config)
        elif args.command == "check":
            cmd_check(args, config)
    except (LosrsError, FileNotFoundError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
