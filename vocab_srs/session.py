"""
vocab_srs.session
-----------------

This module ties the scheduling components together into a grading pipeline.

Classes:
    Presentation: A card handed out for grading, stamped with the card's revision.
    ReviewSession: Serves due cards, applies grades and keeps the review log and daily counters.
"""

from __future__ import annotations
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
import logging
import threading
from typing import Any

from vocab_srs.card import Card, Mode, local_today, new_card, normalize_card
from vocab_srs.grade import Grade, passed
from vocab_srs.review_log import ReviewLog, ReviewLogEntry
from vocab_srs.scheduler import Strategy
from vocab_srs.selector import Filters, ReviewQueue, due_cards
from vocab_srs.settings import Settings
from vocab_srs.spelling import SpellingResult, check_spelling
from vocab_srs.stats import StatsSnapshot, compute_stats
from vocab_srs.throttle import (
    DailyCounters,
    DailyCounts,
    apply_caps,
    bump_shown,
    get_counts,
    reset_counters,
    shown_kind,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Presentation:
    """
    A card handed out for grading.

    Attributes:
        card: The card as it was presented.
        revision: How many times the card had been graded in this session when it was presented.
        mode: The practice pool the card was presented in.
    """

    card: Card
    revision: int
    mode: Mode


class ReviewSession:
    """
    Serves due cards, applies grades and keeps the review log and daily counters.

    A presentation can be graded at most once: grading bumps the card's revision, and a grade
    carrying an older revision (a repeated submit, or a card changed in the meantime) is rejected.
    Grading and collection changes are serialized with a lock.

    Attributes:
        settings: The scheduler configuration.
        review_log: The review log grades are appended to.
        counters: Today's shown-card counters, or None before the first grade.
        queue: The due cards and the cursor over them.
    """

    def __init__(
        self,
        cards: Iterable[Card | Mapping[str, Any]] = (),
        review_log: ReviewLog | None = None,
        counters: DailyCounters | None = None,
        settings: Settings | None = None,
        mode: Mode | str = Mode.Flashcard,
        filters: Filters | None = None,
        today: date | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self._scheduler = self.settings.scheduler()
        self.review_log = review_log if review_log is not None else ReviewLog()
        self.counters = counters
        self._today = today
        self._lock = threading.Lock()

        self._cards: dict[str, Card] = {}
        for raw in cards:
            card = normalize_card(raw)
            self._cards[card.card_id] = card
        self._revisions = dict.fromkeys(self._cards, 0)

        self.mode = Mode(mode)
        self.filters = filters or Filters()
        self._served_day = self.today
        self.queue = ReviewQueue(
            self._servable(self._served_day), self.mode, self.filters, self._served_day
        )

    @property
    def today(self) -> date:
        if self._today is not None:
            return self._today
        return local_today()

    @property
    def cards(self) -> tuple[Card, ...]:
        return tuple(self._cards.values())

    def get_card(self, card_id: str) -> Card | None:
        return self._cards.get(card_id)

    def _servable(self, today: date) -> list[Card]:
        cards = list(self._cards.values())
        if not self.settings.enforce_caps:
            return cards

        due = due_cards(cards, self.mode, self.filters, today)
        return apply_caps(due, self.counters, self.settings, today)

    def _follow_today(self) -> None:
        # the queue was selected for an earlier day
        today = self.today
        if today != self._served_day:
            logger.debug("Reselecting due cards for %s", today.isoformat())
            self._served_day = today
            self.queue.refresh(self._servable(today), today)

    def set_filters(self, filters: Filters) -> None:
        """
        Applies new filters and starts over from the first due card.
        """

        with self._lock:
            self.filters = filters
            self.queue.refresh(self._servable(self.today), self.today)
            self.queue.set_filters(filters)

    def present(self) -> Presentation | None:
        """
        Returns the current due card, or None if nothing is due.
        """

        with self._lock:
            self._follow_today()
            card = self.queue.current
            if card is None:
                return None

            return Presentation(
                card=card,
                revision=self._revisions[card.card_id],
                mode=self.queue.mode,
            )

    def grade(
        self,
        presentation: Presentation,
        outcome: Any,
        today: date | None = None,
    ) -> tuple[Card, ReviewLogEntry] | None:
        """
        Grades a presented card.

        Applies the configured scheduler, appends the review to the log, counts the card against
        today's caps and moves the cursor past it.

        Args:
            presentation: The presentation being graded.
            outcome: The grading outcome, as accepted by the configured scheduler.
            today: The local date. Defaults to the session's date.

        Returns:
            tuple[Card, ReviewLogEntry]: The updated card and its log entry, or None if the
            presentation was already graded or the card changed since it was presented.

        Raises:
            ValueError: If the outcome is not accepted by the configured scheduler.
        """

        if today is None:
            today = self.today

        with self._lock:
            card_id = presentation.card.card_id
            current = self._cards.get(card_id)

            if current is None or self._revisions[card_id] != presentation.revision:
                logger.warning(
                    "Ignoring grade for card %s: it changed since it was presented",
                    card_id,
                )
                return None

            graded = self._scheduler.advance(current, outcome, today)
            entry = ReviewLogEntry.from_card(
                current, passed(outcome), presentation.mode, today
            )

            self.review_log.append(entry)
            self.counters = bump_shown(self.counters, shown_kind(current), today)
            self._cards[card_id] = graded
            self._revisions[card_id] += 1

            self.queue.move_past(graded, self._servable(today), today)

        return graded, entry

    def submit_spelling(
        self,
        presentation: Presentation,
        answer: str,
        today: date | None = None,
    ) -> tuple[SpellingResult, tuple[Card, ReviewLogEntry] | None]:
        """
        Scores a typed answer for a presented card.

        A perfect answer grades the card as recalled. Close and incorrect answers are feedback only
        and leave the card ungraded.

        Returns:
            The spelling result, and the grading result if the answer graded the card.
        """

        result = check_spelling(answer, presentation.card.word)
        if result.outcome is None:
            return result, None

        if self.settings.strategy == Strategy.Binary:
            outcome: bool | Grade = result.outcome
        else:
            outcome = Grade.Good

        return result, self.grade(presentation, outcome, today)

    def add_card(
        self,
        word: str,
        translation: str = "",
        today: date | None = None,
        **fields: Any,
    ) -> Card:
        """
        Adds a fresh card to the collection. It is due immediately.
        """

        if today is None:
            today = self.today

        card = new_card(word, translation, today=today, **fields)

        with self._lock:
            self._cards[card.card_id] = card
            # a reused id never matches a presentation of the removed card
            self._revisions[card.card_id] = (
                self._revisions.get(card.card_id, -1) + 1
            )
            self.queue.refresh(self._servable(today), today)

        return card

    def remove_card(self, card_id: str) -> Card | None:
        """
        Removes a card from the collection. Its review log entries are kept.

        Returns:
            The removed card, or None if there was no such card.
        """

        with self._lock:
            card = self._cards.pop(card_id, None)
            if card is None:
                return None

            self.queue.refresh(self._servable(self.today), self.today)

        return card

    def counts(self, today: date | None = None) -> DailyCounts:
        return get_counts(
            self._cards.values(),
            self.counters,
            self.settings,
            today or self.today,
            self.filters,
        )

    def reset_today(self, today: date | None = None) -> DailyCounters:
        """
        Starts today's shown-card counters over.
        """

        with self._lock:
            self.counters = reset_counters(today or self.today)
            self.queue.refresh(self._servable(today or self.today), today or self.today)

        return self.counters

    def stats(self, today: date | None = None) -> StatsSnapshot:
        return compute_stats(self._cards.values(), self.review_log, today or self.today)


__all__ = ["Presentation", "ReviewSession"]
