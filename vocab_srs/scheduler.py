"""
vocab_srs.scheduler
-------------------

This module defines the schedulers that turn a grading outcome into a card's next state,
as well as the constants used in their calculations.

Classes:
    Strategy: Enum naming the available scheduling strategies.
    Scheduler: Interface shared by every scheduling strategy.
    BinaryScheduler: Schedules cards from a correct/incorrect outcome.
    FourGradeScheduler: Schedules cards from an again/hard/good/easy grade.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from collections.abc import Mapping
from copy import copy
from datetime import date, timedelta
from enum import Enum
import math
from typing import Any

from vocab_srs.card import Card, local_today, normalize_card
from vocab_srs.grade import Grade, passed

MIN_EASE = 1.3
MAX_EASE = 3.5

BINARY_EASE_PENALTY = 0.2
BINARY_EASE_BONUS = 0.02

AGAIN_EASE_PENALTY = 0.3
HARD_EASE_PENALTY = 0.15
EASY_EASE_BONUS = 0.15
HARD_INTERVAL_FACTOR = 0.85
EASY_INTERVAL_FACTOR = 1.3


class Strategy(str, Enum):
    """
    Enum naming the available scheduling strategies.
    """

    Binary = "binary"
    FourGrade = "four_grade"


class Scheduler(ABC):
    """
    Interface shared by every scheduling strategy.

    A scheduler is a pure transition function: given the same card, outcome and date it always
    returns the same new card, and it never modifies the card it is given.
    """

    strategy: Strategy

    @abstractmethod
    def advance(
        self,
        card: Card | Mapping[str, Any],
        outcome: Any,
        today: date | None = None,
    ) -> Card:
        """
        Applies a grading outcome to a card.

        Args:
            card: The card being graded. Partially-populated records are normalized first.
            outcome: The grading outcome. Its accepted form depends on the strategy.
            today: The local date of the review. Defaults to the local date.

        Returns:
            Card: A new card holding the updated scheduling state.
        """

    def _prepare(self, card: Card | Mapping[str, Any]) -> Card:
        return copy(normalize_card(card))

    def _schedule(self, card: Card, today: date | None) -> Card:
        if today is None:
            today = local_today()

        card.ease = clamp(card.ease, MIN_EASE, MAX_EASE)
        card.next_review = today + timedelta(days=max(1, card.interval))

        return card


class BinaryScheduler(Scheduler):
    """
    Schedules cards from a correct/incorrect outcome.

    A failed review resets the streak of successful repetitions and drops the interval to one day.
    Successful reviews step through 1 and 3 days before the interval starts growing by the ease factor.
    """

    strategy = Strategy.Binary

    def advance(
        self,
        card: Card | Mapping[str, Any],
        outcome: Any,
        today: date | None = None,
    ) -> Card:
        """
        Applies a correct/incorrect outcome to a card.

        Args:
            card: The card being graded.
            outcome: True if the card was recalled. A Grade is accepted too; anything but Again counts as correct.
            today: The local date of the review. Defaults to the local date.

        Returns:
            Card: A new card holding the updated scheduling state.

        Raises:
            ValueError: If the outcome is neither a bool nor a grade.
        """

        was_correct = passed(outcome)
        card = self._prepare(card)

        if not was_correct:
            card.reps = 0
            card.lapses += 1
            card.interval = 1
            card.ease = card.ease - BINARY_EASE_PENALTY

        else:
            card.reps += 1
            if card.reps == 1:
                card.interval = 1
            elif card.reps == 2:
                card.interval = 3
            else:
                card.interval = round_half_up(card.interval * card.ease)

            card.ease = card.ease + BINARY_EASE_BONUS

        return self._schedule(card, today)


class FourGradeScheduler(Scheduler):
    """
    Schedules cards from an again/hard/good/easy grade.

    Interval growth uses the ease factor the card had before the review; the ease itself
    is then moved by the grade and clamped to [1.3, 3.5].
    """

    strategy = Strategy.FourGrade

    def __init__(self) -> None:
        self._binary = BinaryScheduler()

    def advance(
        self,
        card: Card | Mapping[str, Any],
        outcome: Any,
        today: date | None = None,
    ) -> Card:
        """
        Applies a self-assessed grade to a card.

        Args:
            card: The card being graded.
            outcome: A Grade, a grade name ("again", "hard", "good", "easy") or a grade value (1-4).
                A plain bool is scheduled by the binary strategy instead.
            today: The local date of the review. Defaults to the local date.

        Returns:
            Card: A new card holding the updated scheduling state.

        Raises:
            ValueError: If the outcome does not name one of the four grades.
        """

        if isinstance(outcome, bool):
            return self._binary.advance(card, outcome, today)

        grade = Grade.parse(outcome)
        card = self._prepare(card)
        ease = card.ease

        match grade:
            case Grade.Again:
                card.reps = 0
                card.lapses += 1
                card.ease = ease - AGAIN_EASE_PENALTY
                card.interval = 1

            case Grade.Hard:
                card.reps += 1
                card.ease = ease - HARD_EASE_PENALTY
                if card.reps == 1:
                    card.interval = 1
                elif card.reps == 2:
                    card.interval = 2
                else:
                    card.interval = max(
                        1, round_half_up(card.interval * ease * HARD_INTERVAL_FACTOR)
                    )

            case Grade.Good:
                card.reps += 1
                if card.reps == 1:
                    card.interval = 1
                elif card.reps == 2:
                    card.interval = 3
                else:
                    card.interval = max(1, round_half_up(card.interval * ease))

            case Grade.Easy:
                card.reps += 1
                card.ease = ease + EASY_EASE_BONUS
                if card.reps <= 2:
                    card.interval = 4
                else:
                    card.interval = max(
                        2, round_half_up(card.interval * ease * EASY_INTERVAL_FACTOR)
                    )

        return self._schedule(card, today)


SCHEDULERS: dict[Strategy, type[Scheduler]] = {
    Strategy.Binary: BinaryScheduler,
    Strategy.FourGrade: FourGradeScheduler,
}


def get_scheduler(strategy: Strategy | str) -> Scheduler:
    """
    Returns a scheduler for the given strategy.

    Raises:
        ValueError: If the strategy is unknown.
    """

    return SCHEDULERS[Strategy(strategy)]()


def round_half_up(value: float) -> int:
    # intervals are whole days, halves round up
    return math.floor(value + 0.5)


def clamp(value, min_value, max_value):
    return max(min(value, max_value), min_value)


__all__ = [
    "Strategy",
    "Scheduler",
    "BinaryScheduler",
    "FourGradeScheduler",
    "get_scheduler",
    "MIN_EASE",
    "MAX_EASE",
]
