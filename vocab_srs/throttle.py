"""
vocab_srs.throttle
------------------

This module tracks how many new and review cards were shown today against the daily caps.

The counters are plain immutable values: every operation takes the current counters and
the local date explicitly and returns new counters, leaving persistence to the caller.

Classes:
    ShownKind: Enum representing the two kinds of shown cards.
    DailyCounters: How many new and review cards were shown on a given day.
    DailyCounts: Today's throughput figures for a card pool.

Functions:
    get_counts: Computes today's throughput figures.
    bump_shown: Records one more shown card.
    reset_counters: Starts today's counters over.
    apply_caps: Restricts a list of due cards to what today's caps still allow.
"""

from __future__ import annotations
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from enum import Enum
import json
import logging
from typing import TypedDict
from typing_extensions import Self

from vocab_srs.card import Card, Mode, format_date, local_today, parse_date
from vocab_srs.selector import Filters
from vocab_srs.settings import Settings

logger = logging.getLogger(__name__)


class ShownKind(str, Enum):
    """
    Enum representing the two kinds of shown cards.
    """

    New = "new"
    Review = "review"


class DailyCountersDict(TypedDict):
    """
    JSON-serializable dictionary representation of a DailyCounters object.
    """

    dateKey: str
    shownNew: int
    shownReview: int


@dataclass(frozen=True)
class DailyCounters:
    """
    How many new and review cards were shown on a given day.

    Counters belonging to an earlier day are stale: they read as zero today and are only
    replaced when the first card of the new day is recorded.

    Attributes:
        date_key: The day the counters belong to.
        shown_new: New cards shown that day.
        shown_review: Review cards shown that day.
    """

    date_key: date
    shown_new: int = 0
    shown_review: int = 0

    def for_day(self, today: date) -> DailyCounters:
        """
        Returns the counters as they stand on `today`.
        """

        if self.date_key == today:
            return self
        return DailyCounters(date_key=today)

    def to_dict(self) -> DailyCountersDict:
        """
        Returns a JSON-serializable dictionary representation of the DailyCounters object.
        """

        return {
            "dateKey": self.date_key.isoformat(),
            "shownNew": self.shown_new,
            "shownReview": self.shown_review,
        }

    @classmethod
    def from_dict(cls, source_dict: DailyCountersDict) -> Self:
        """
        Creates a DailyCounters object from an existing dictionary.

        Raises:
            ValueError: If the date key is missing or not a date.
        """

        date_key = parse_date(source_dict["dateKey"])
        if date_key is None:
            raise ValueError(f"Invalid dateKey {source_dict['dateKey']!r}")

        return cls(
            date_key=date_key,
            shown_new=int(source_dict["shownNew"]),
            shown_review=int(source_dict["shownReview"]),
        )

    def to_json(self, indent: int | str | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        source_dict: DailyCountersDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)


@dataclass(frozen=True)
class DailyCounts:
    """
    Today's throughput figures for a card pool.

    Attributes:
        date_key: The day the figures were computed for.
        total: Cards in the pool.
        due_all: Cards in the pool that are due.
        new_all: Cards in the pool that were never graded successfully.
        reviews_cap: The configured maximum reviews per day.
        new_cap: The configured number of new cards per day.
        reviews_due_today: Due cards that will still be shown today.
        review_backlog: Due cards pushed past today by the review cap.
        new_today: New cards that will still be introduced today.
    """

    date_key: date
    total: int
    due_all: int
    new_all: int
    reviews_cap: int
    new_cap: int
    reviews_due_today: int
    review_backlog: int
    new_today: int


def _is_due_today(card: Card, today: date) -> bool:
    return card.next_review is not None and card.next_review <= today


def get_counts(
    cards: Iterable[Card],
    counters: DailyCounters | None,
    settings: Settings,
    today: date | None = None,
    filters: Filters | None = None,
) -> DailyCounts:
    """
    Computes today's throughput figures for the flashcard pool.

    The figures are advisory: they report what the caps allow but do not change which cards are due.

    Args:
        cards: The card collection.
        counters: The stored counters, or None if nothing was recorded yet.
        settings: Supplies the daily caps.
        today: The local date. Defaults to the local date.
        filters: Category and difficulty filters. Defaults to no filtering.

    Returns:
        DailyCounts: The figures for today.
    """

    if today is None:
        today = local_today()
    if filters is None:
        filters = Filters()
    if counters is None:
        counters = DailyCounters(date_key=today)
    counters = counters.for_day(today)

    pool = [
        card
        for card in cards
        if card.modes.enabled(Mode.Flashcard) and filters.matches(card)
    ]

    due_all = sum(1 for card in pool if _is_due_today(card, today))
    new_all = sum(1 for card in pool if card.is_new)

    reviews_cap_left = max(0, settings.max_reviews_per_day - counters.shown_review)
    new_cap_left = max(0, settings.new_cards_per_day - counters.shown_new)

    return DailyCounts(
        date_key=today,
        total=len(pool),
        due_all=due_all,
        new_all=new_all,
        reviews_cap=settings.max_reviews_per_day,
        new_cap=settings.new_cards_per_day,
        reviews_due_today=min(due_all, reviews_cap_left),
        review_backlog=max(0, due_all - reviews_cap_left),
        new_today=min(new_all, new_cap_left),
    )


def bump_shown(
    counters: DailyCounters | None,
    kind: ShownKind | str,
    today: date | None = None,
) -> DailyCounters:
    """
    Records one more shown card of the given kind.

    Counters from an earlier day are reset first.

    Args:
        counters: The stored counters, or None if nothing was recorded yet.
        kind: "new" or "review".
        today: The local date. Defaults to the local date.

    Returns:
        DailyCounters: The updated counters.

    Raises:
        ValueError: If `kind` is neither "new" nor "review".
    """

    kind = ShownKind(kind)
    if today is None:
        today = local_today()

    if counters is None or counters.date_key != today:
        logger.debug(
            "Starting daily counters for %s (previous %s)",
            format_date(today),
            format_date(counters.date_key) if counters else None,
        )
        counters = DailyCounters(date_key=today)

    if kind == ShownKind.New:
        return DailyCounters(
            date_key=today,
            shown_new=counters.shown_new + 1,
            shown_review=counters.shown_review,
        )

    return DailyCounters(
        date_key=today,
        shown_new=counters.shown_new,
        shown_review=counters.shown_review + 1,
    )


def reset_counters(today: date | None = None) -> DailyCounters:
    """
    Starts today's counters over, e.g. from a manual "reset today" action.
    """

    if today is None:
        today = local_today()
    return DailyCounters(date_key=today)


def apply_caps(
    cards: Iterable[Card],
    counters: DailyCounters | None,
    settings: Settings,
    today: date | None = None,
) -> list[Card]:
    """
    Restricts a list of due cards to what today's caps still allow.

    Insertion order is kept. New cards are admitted up to the remaining new-card cap and
    review cards up to the remaining review cap; the rest stay due for a later day.

    Args:
        cards: The due cards, as returned by `due_cards`.
        counters: The stored counters, or None if nothing was recorded yet.
        settings: Supplies the daily caps.
        today: The local date. Defaults to the local date.

    Returns:
        list[Card]: The cards that may be shown today.
    """

    if today is None:
        today = local_today()
    if counters is None:
        counters = DailyCounters(date_key=today)
    counters = counters.for_day(today)

    new_left = max(0, settings.new_cards_per_day - counters.shown_new)
    reviews_left = max(0, settings.max_reviews_per_day - counters.shown_review)

    admitted = []
    for card in cards:
        if card.is_new:
            if new_left > 0:
                admitted.append(card)
                new_left -= 1
        elif reviews_left > 0:
            admitted.append(card)
            reviews_left -= 1

    return admitted


def shown_kind(card: Card) -> ShownKind:
    """
    Returns how showing `card` counts against the caps, judged before it is graded.
    """

    if card.is_new:
        return ShownKind.New
    return ShownKind.Review


__all__ = [
    "ShownKind",
    "DailyCounters",
    "DailyCounts",
    "get_counts",
    "bump_shown",
    "reset_counters",
    "apply_caps",
    "shown_kind",
]
