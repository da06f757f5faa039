"""
vocab_srs.selector
------------------

This module selects the cards that are due for presentation today.

Classes:
    Filters: Category and difficulty filters chosen by the learner.
    ReviewQueue: The due cards for one practice pool, with a cursor over them.

Functions:
    is_due: Whether a card is due on a given date.
    due_cards: The cards due today in a practice pool, in insertion order.
"""

from __future__ import annotations
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from vocab_srs.card import Card, Mode, local_today

ALL = "all"


@dataclass(frozen=True)
class Filters:
    """
    Category and difficulty filters chosen by the learner.

    Attributes:
        category: The category to keep, or "all".
        difficulty: The difficulty to keep, or "all".
    """

    category: str = ALL
    difficulty: str = ALL

    def matches(self, card: Card) -> bool:
        return (self.category == ALL or card.category == self.category) and (
            self.difficulty == ALL or card.difficulty == self.difficulty
        )


def is_due(card: Card, today: date | None = None) -> bool:
    """
    Returns whether a card is due: it has no scheduled date yet, or that date has arrived.
    """

    if card.next_review is None:
        return True

    if today is None:
        today = local_today()

    return card.next_review <= today


def due_cards(
    cards: Iterable[Card],
    mode: Mode | str = Mode.Flashcard,
    filters: Filters | None = None,
    today: date | None = None,
) -> list[Card]:
    """
    Returns the cards eligible for presentation today, in insertion order.

    Args:
        cards: The card collection.
        mode: The practice pool. Cards with the pool disabled are never returned.
        filters: Category and difficulty filters. Defaults to no filtering.
        today: The local date. Defaults to the local date.

    Returns:
        list[Card]: The due cards.

    Raises:
        ValueError: If `mode` is not a known practice pool.
    """

    mode = Mode(mode)
    if filters is None:
        filters = Filters()
    if today is None:
        today = local_today()

    return [
        card
        for card in cards
        if card.modes.enabled(mode) and is_due(card, today) and filters.matches(card)
    ]


class ReviewQueue:
    """
    The due cards for one practice pool, with a cursor selecting the current card.

    After each grading the cursor moves on circularly. Changing the filters starts over from the first card.

    Attributes:
        mode: The practice pool.
        filters: The active filters.
        cards: The due cards, in insertion order.
        index: The position of the current card.
    """

    mode: Mode
    filters: Filters
    cards: list[Card]
    index: int

    def __init__(
        self,
        cards: Iterable[Card] = (),
        mode: Mode | str = Mode.Flashcard,
        filters: Filters | None = None,
        today: date | None = None,
    ) -> None:
        self.mode = Mode(mode)
        self.filters = filters or Filters()
        self._all_cards = list(cards)
        self._today = today
        self.index = 0
        self.cards = self._select()

    def _select(self) -> list[Card]:
        return due_cards(self._all_cards, self.mode, self.filters, self._today)

    def __len__(self) -> int:
        return len(self.cards)

    @property
    def current(self) -> Card | None:
        if not self.cards:
            return None
        return self.cards[self.index]

    def advance(self) -> Card | None:
        """
        Moves the cursor to the next card, wrapping around to the first one.

        Returns:
            The new current card, or None if nothing is due.
        """

        if self.cards:
            self.index = (self.index + 1) % len(self.cards)
        else:
            self.index = 0
        return self.current

    def set_filters(self, filters: Filters) -> None:
        """
        Applies new filters and resets the cursor to the first card.
        """

        self.filters = filters
        self.index = 0
        self.cards = self._select()

    def refresh(
        self, cards: Iterable[Card], today: date | None = None
    ) -> None:
        """
        Re-selects the due cards from an updated collection, keeping the cursor in range.
        """

        self._all_cards = list(cards)
        if today is not None:
            self._today = today
        self.cards = self._select()
        if self.index >= len(self.cards):
            self.index = 0

    def move_past(
        self, graded: Card, cards: Iterable[Card], today: date | None = None
    ) -> Card | None:
        """
        Re-selects the due cards after `graded` was graded and moves the cursor to the card after it.

        A graded card usually stops being due, in which case the card that followed it already sits
        at the cursor position. The position wraps around to the first card.

        Returns:
            The new current card, or None if nothing is due.
        """

        position = self.index
        self._all_cards = list(cards)
        if today is not None:
            self._today = today
        self.cards = self._select()

        if not self.cards:
            self.index = 0
        elif (
            position < len(self.cards)
            and self.cards[position].card_id == graded.card_id
        ):
            self.index = (position + 1) % len(self.cards)
        else:
            self.index = position % len(self.cards)

        return self.current


__all__ = ["Filters", "ReviewQueue", "is_due", "due_cards"]
