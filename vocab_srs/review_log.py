"""
vocab_srs.review_log
--------------------

This module defines the review log: an append-only record of grading events.

Classes:
    ReviewLogEntry: Represents one grading event.
    ReviewLog: An ordered, append-only collection of ReviewLogEntry objects.

Functions:
    merge_review_logs: Reconciles a locally cached log with a remotely loaded one.
"""

from __future__ import annotations
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date
import json
import logging
from typing import TypedDict
from typing_extensions import NotRequired, Self

from vocab_srs.card import Card, Mode, local_today, parse_date

logger = logging.getLogger(__name__)


class ReviewLogEntryDict(TypedDict):
    """
    JSON-serializable dictionary representation of a ReviewLogEntry object.
    """

    cardId: str
    word: str
    correct: bool
    mode: str
    date: str
    interval: NotRequired[int]


@dataclass(frozen=True)
class ReviewLogEntry:
    """
    Represents one grading event.

    Attributes:
        card_id: The id of the graded card.
        word: The card's word at the time it was graded.
        correct: Whether the card was recalled.
        mode: The practice pool the card was graded in.
        date: The local date of the review.
        interval: The card's interval when it was graded, or None for entries recorded without it.
    """

    card_id: str
    word: str
    correct: bool
    mode: Mode
    date: date
    interval: int | None = None

    @classmethod
    def from_card(
        cls,
        card: Card,
        correct: bool,
        mode: Mode | str = Mode.Flashcard,
        today: date | None = None,
    ) -> Self:
        """
        Creates the entry for grading `card`, snapshotting its word and interval before the grade is applied.
        """

        if today is None:
            today = local_today()

        return cls(
            card_id=card.card_id,
            word=card.word,
            correct=bool(correct),
            mode=Mode(mode),
            date=today,
            interval=card.interval,
        )

    @property
    def key(self) -> tuple[date, str, Mode]:
        """The identity used to recognise the same event in two copies of a log."""
        return (self.date, self.card_id, self.mode)

    def to_dict(self) -> ReviewLogEntryDict:
        """
        Returns a JSON-serializable dictionary representation of the ReviewLogEntry object.

        Returns:
            A dictionary representation of the ReviewLogEntry object.
        """

        return_dict: ReviewLogEntryDict = {
            "cardId": self.card_id,
            "word": self.word,
            "correct": self.correct,
            "mode": self.mode.value,
            "date": self.date.isoformat(),
        }
        if self.interval is not None:
            return_dict["interval"] = self.interval

        return return_dict

    @classmethod
    def from_dict(cls, source_dict: ReviewLogEntryDict) -> Self:
        """
        Creates a ReviewLogEntry object from an existing dictionary.

        Args:
            source_dict: A dictionary representing an existing ReviewLogEntry object.

        Returns:
            A ReviewLogEntry object created from the provided dictionary.

        Raises:
            ValueError: If the date or the mode is invalid.
        """

        review_date = parse_date(source_dict["date"])
        if review_date is None:
            raise ValueError(f"Invalid review date {source_dict['date']!r}")

        interval = source_dict.get("interval")

        return cls(
            card_id=source_dict["cardId"],
            word=source_dict["word"],
            correct=bool(source_dict["correct"]),
            mode=Mode(source_dict["mode"]),
            date=review_date,
            interval=int(interval) if interval is not None else None,
        )

    def to_json(self, indent: int | str | None = None) -> str:
        """
        Returns a JSON-serialized string of the ReviewLogEntry object.

        Args:
            indent: Equivalent argument to the indent in json.dumps()

        Returns:
            str: A JSON-serialized string of the ReviewLogEntry object.
        """

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        """
        Creates a ReviewLogEntry object from a JSON-serialized string.

        Args:
            source_json: A JSON-serialized string of an existing ReviewLogEntry object.

        Returns:
            Self: A ReviewLogEntry object created from the JSON string.
        """

        source_dict: ReviewLogEntryDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)


class ReviewLog:
    """
    An ordered, append-only collection of ReviewLogEntry objects.

    Entries are never modified or removed in place. `archive_before` returns a shorter copy
    for callers that want to move old entries elsewhere.
    """

    def __init__(self, entries: Iterable[ReviewLogEntry] = ()) -> None:
        self._entries: list[ReviewLogEntry] = list(entries)

    def append(self, entry: ReviewLogEntry) -> ReviewLogEntry:
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> tuple[ReviewLogEntry, ...]:
        return tuple(self._entries)

    def __iter__(self) -> Iterator[ReviewLogEntry]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReviewLog):
            return NotImplemented
        return self._entries == other._entries

    def archive_before(
        self, cutoff: date
    ) -> tuple[ReviewLog, list[ReviewLogEntry]]:
        """
        Splits off the entries recorded before `cutoff`.

        Args:
            cutoff: The first date to keep.

        Returns:
            A new log holding the entries on or after `cutoff`, and the archived older entries.
        """

        kept = [entry for entry in self._entries if entry.date >= cutoff]
        archived = [entry for entry in self._entries if entry.date < cutoff]

        return ReviewLog(kept), archived

    def to_list(self) -> list[ReviewLogEntryDict]:
        return [entry.to_dict() for entry in self._entries]

    @classmethod
    def from_list(cls, source_list: Iterable[ReviewLogEntryDict]) -> Self:
        return cls(ReviewLogEntry.from_dict(item) for item in source_list)

    def to_json(self, indent: int | str | None = None) -> str:
        return json.dumps(self.to_list(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        return cls.from_list(json.loads(source_json))


def merge_review_logs(
    local: Iterable[ReviewLogEntry],
    remote: Iterable[ReviewLogEntry],
) -> list[ReviewLogEntry]:
    """
    Reconciles a locally cached log with a remotely loaded one.

    Entries are identified by (date, card id, mode). When both logs hold the same event the
    remote copy wins.

    Args:
        local: The locally cached entries.
        remote: The remotely loaded entries.

    Returns:
        list[ReviewLogEntry]: The merged entries, sorted by date (entries of the same day keep their order).
    """

    merged: dict[tuple[date, str, Mode], ReviewLogEntry] = {}

    for entry in local:
        merged[entry.key] = entry

    for entry in remote:
        if entry.key in merged:
            logger.debug("Remote review entry replaces local copy for %s", entry.key)
        merged[entry.key] = entry

    return sorted(merged.values(), key=lambda entry: entry.date)


__all__ = ["ReviewLogEntry", "ReviewLog", "merge_review_logs"]
