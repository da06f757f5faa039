"""
vocab_srs.stats
---------------

This module derives learning statistics from a card collection and its review log.

Everything here is a pure computation relative to an explicit local date.

Classes:
    DayTally: Reviews recorded on one day.
    DayCount: A per-day card count.
    IntervalBucket: One bar of the interval histogram.
    MaturityCounts: The card collection split into new, learning and mature cards.
    StatsSnapshot: All statistics for one day.

Functions:
    compute_stats: Computes a StatsSnapshot.
"""

from __future__ import annotations
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from vocab_srs.card import Card, local_today
from vocab_srs.review_log import ReviewLogEntry

MATURE_INTERVAL = 21
RECENT_DAYS = 7
FORECAST_DAYS = 7
ADDED_WINDOW_DAYS = 30
RETENTION_WINDOW_DAYS = 30

# (label, lowest interval, highest interval or None for no upper bound)
INTERVAL_BUCKETS: tuple[tuple[str, int, int | None], ...] = (
    ("1", 0, 1),
    ("2", 2, 2),
    ("3", 3, 3),
    ("4-7", 4, 7),
    ("8-14", 8, 14),
    ("15-30", 15, 30),
    ("31-90", 31, 90),
    ("91+", 91, None),
)


@dataclass(frozen=True)
class DayTally:
    """
    Reviews recorded on one day.

    Attributes:
        day: The date.
        total: Number of reviews.
        correct: Number of correct reviews.
    """

    day: date
    total: int = 0
    correct: int = 0

    @property
    def accuracy(self) -> float:
        """Fraction of correct reviews, 0 when there were none."""
        if self.total == 0:
            return 0.0
        return self.correct / self.total


@dataclass(frozen=True)
class DayCount:
    day: date
    count: int


@dataclass(frozen=True)
class IntervalBucket:
    label: str
    count: int


@dataclass(frozen=True)
class MaturityCounts:
    """
    The card collection split into new, learning and mature cards.

    The three counts always add up to the number of cards.
    """

    new: int
    learning: int
    mature: int


@dataclass(frozen=True)
class StatsSnapshot:
    """
    All statistics for one day.

    Attributes:
        today: The date the statistics were computed for.
        streak: Consecutive days with at least one review, ending today.
        today_tally: Today's reviews.
        total_reviews: Reviews in the whole log.
        total_correct: Correct reviews in the whole log.
        recent: Review tallies for the last 7 days, oldest first, ending today.
        due_today: Cards with a scheduled date on or before today.
        future_due: Cards scheduled after today.
        upcoming: Cards falling due on each of the next 7 days.
        total_cards: Cards in the collection.
        maturity: New, learning and mature card counts.
        histogram: Cards per interval bucket.
        added: Cards created on each of the last 30 days, oldest first, ending today.
        true_retention: Accuracy of reviews of mature cards over the last 30 days.
        retention_reviews: Number of reviews the retention figure is based on.
    """

    today: date
    streak: int
    today_tally: DayTally
    total_reviews: int
    total_correct: int
    recent: tuple[DayTally, ...]
    due_today: int
    future_due: int
    upcoming: tuple[DayCount, ...]
    total_cards: int
    maturity: MaturityCounts
    histogram: tuple[IntervalBucket, ...]
    added: tuple[DayCount, ...]
    true_retention: float
    retention_reviews: int

    @property
    def total_accuracy(self) -> float:
        if self.total_reviews == 0:
            return 0.0
        return self.total_correct / self.total_reviews


def is_mature(card: Card) -> bool:
    return card.interval >= MATURE_INTERVAL


def tally_by_day(review_log: Iterable[ReviewLogEntry]) -> dict[date, DayTally]:
    tallies: dict[date, DayTally] = {}

    for entry in review_log:
        tally = tallies.get(entry.date, DayTally(day=entry.date))
        tallies[entry.date] = DayTally(
            day=entry.date,
            total=tally.total + 1,
            correct=tally.correct + (1 if entry.correct else 0),
        )

    return tallies


def streak(review_log: Iterable[ReviewLogEntry], today: date | None = None) -> int:
    """
    Counts consecutive days with at least one review, walking back from today.

    A day without reviews ends the streak, so the streak is 0 until today's first review.
    """

    if today is None:
        today = local_today()

    days = {entry.date for entry in review_log}

    count = 0
    while today - timedelta(days=count) in days:
        count += 1

    return count


def accuracy(review_log: Iterable[ReviewLogEntry], day: date) -> float:
    """
    Returns the fraction of correct reviews on `day`, 0 if there were none.
    """

    return tally_by_day(review_log).get(day, DayTally(day=day)).accuracy


def interval_histogram(cards: Iterable[Card]) -> tuple[IntervalBucket, ...]:
    """
    Counts cards per interval bucket.

    Cards that were never graded (interval 0) are counted with the 1-day bucket, so every
    card falls into exactly one bucket.
    """

    counts = [0] * len(INTERVAL_BUCKETS)

    for card in cards:
        interval = max(0, card.interval)
        for index, (_, low, high) in enumerate(INTERVAL_BUCKETS):
            if interval >= low and (high is None or interval <= high):
                counts[index] += 1
                break

    return tuple(
        IntervalBucket(label=label, count=count)
        for (label, _, _), count in zip(INTERVAL_BUCKETS, counts)
    )


def maturity_counts(cards: Iterable[Card]) -> MaturityCounts:
    """
    Splits cards into new (never graded successfully, or no interval yet), mature
    (interval of at least 21 days) and learning (everything else).
    """

    new = learning = mature = 0

    for card in cards:
        if card.reps == 0 or card.interval == 0:
            new += 1
        elif is_mature(card):
            mature += 1
        else:
            learning += 1

    return MaturityCounts(new=new, learning=learning, mature=mature)


def upcoming_due(
    cards: Iterable[Card], today: date | None = None, days: int = FORECAST_DAYS
) -> tuple[DayCount, ...]:
    """
    Counts the cards falling due on each of the next `days` days, starting tomorrow.
    """

    if today is None:
        today = local_today()

    window = [today + timedelta(days=offset) for offset in range(1, days + 1)]
    counts = dict.fromkeys(window, 0)

    for card in cards:
        if card.next_review in counts:
            counts[card.next_review] += 1

    return tuple(DayCount(day=day, count=counts[day]) for day in window)


def added_per_day(
    cards: Iterable[Card], today: date | None = None, days: int = ADDED_WINDOW_DAYS
) -> tuple[DayCount, ...]:
    """
    Counts the cards created on each of the last `days` days, oldest first and ending today.
    """

    if today is None:
        today = local_today()

    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    counts = dict.fromkeys(window, 0)

    for card in cards:
        if card.created_at in counts:
            counts[card.created_at] += 1

    return tuple(DayCount(day=day, count=counts[day]) for day in window)


def true_retention(
    cards: Iterable[Card],
    review_log: Iterable[ReviewLogEntry],
    today: date | None = None,
    days: int = RETENTION_WINDOW_DAYS,
) -> tuple[float, int]:
    """
    Estimates retention as the accuracy of reviews of mature cards over the last `days` days.

    An entry that recorded the card's interval at grading time is judged by that interval.
    Older entries without it are judged by the card's current interval, which credits cards that
    matured recently with reviews taken while they were still learning.

    Returns:
        The retention (0 when no review qualifies) and the number of qualifying reviews.
    """

    if today is None:
        today = local_today()

    cutoff = today - timedelta(days=days)
    mature_ids = {card.card_id for card in cards if is_mature(card)}

    total = correct = 0
    for entry in review_log:
        if entry.date < cutoff:
            continue

        if entry.interval is not None:
            mature = entry.interval >= MATURE_INTERVAL
        else:
            mature = entry.card_id in mature_ids

        if mature:
            total += 1
            correct += 1 if entry.correct else 0

    if total == 0:
        return 0.0, 0

    return correct / total, total


def compute_stats(
    cards: Iterable[Card],
    review_log: Iterable[ReviewLogEntry],
    today: date | None = None,
) -> StatsSnapshot:
    """
    Computes all statistics for a card collection and its review log.

    Args:
        cards: The card collection.
        review_log: The review log entries.
        today: The local date. Defaults to the local date.

    Returns:
        StatsSnapshot: The statistics for `today`.
    """

    if today is None:
        today = local_today()

    cards = tuple(cards)
    entries = tuple(review_log)

    tallies = tally_by_day(entries)
    recent = tuple(
        tallies.get(day, DayTally(day=day))
        for day in (
            today - timedelta(days=offset)
            for offset in range(RECENT_DAYS - 1, -1, -1)
        )
    )

    scheduled = [card.next_review for card in cards if card.next_review is not None]
    retention, retention_reviews = true_retention(cards, entries, today)

    return StatsSnapshot(
        today=today,
        streak=streak(entries, today),
        today_tally=tallies.get(today, DayTally(day=today)),
        total_reviews=len(entries),
        total_correct=sum(1 for entry in entries if entry.correct),
        recent=recent,
        due_today=sum(1 for day in scheduled if day <= today),
        future_due=sum(1 for day in scheduled if day > today),
        upcoming=upcoming_due(cards, today),
        total_cards=len(cards),
        maturity=maturity_counts(cards),
        histogram=interval_histogram(cards),
        added=added_per_day(cards, today),
        true_retention=retention,
        retention_reviews=retention_reviews,
    )


__all__ = [
    "DayTally",
    "DayCount",
    "IntervalBucket",
    "MaturityCounts",
    "StatsSnapshot",
    "compute_stats",
    "streak",
    "accuracy",
    "interval_histogram",
    "maturity_counts",
    "upcoming_due",
    "added_per_day",
    "true_retention",
]
