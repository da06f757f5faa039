"""
vocab_srs.card
--------------

This module defines the Card class and the helpers used to bring raw card records into it.

Classes:
    Mode: Enum representing the two independent practice pools.
    Modes: Which practice pools a card takes part in.
    Card: Represents one vocabulary card and its scheduling metadata.

Functions:
    normalize_card: Builds a fully-populated Card from a partial record.
    new_card: Creates a fresh, never-reviewed Card.
    parse_date: Converts a record value to a calendar date.
    format_date: Converts a calendar date to its YYYY-MM-DD key.
    local_today: Today's calendar date in local time.
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
import json
import logging
import math
from typing import Any, TypedDict
import uuid
from typing_extensions import NotRequired, Self

logger = logging.getLogger(__name__)

DEFAULT_EASE = 2.5
DEFAULT_CATEGORY = "noun"
DEFAULT_DIFFICULTY = "medium"


class Mode(str, Enum):
    """
    Enum representing the practice pool a card is presented in.
    """

    Flashcard = "flashcard"
    Spelling = "spelling"


def local_today() -> date:
    """
    Returns today's calendar date in local time.

    Every scheduling calculation works on calendar dates anchored at local midnight,
    never on raw timestamps.
    """

    return date.today()


def format_date(value: date | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def parse_date(value: Any) -> date | None:
    """
    Converts a record value to a calendar date.

    Accepts date objects, datetime objects (timezone-aware values are first converted
    to local time) and ISO strings, of which only the leading YYYY-MM-DD part is used.

    Args:
        value: The raw value.

    Returns:
        The calendar date, or None if the value is empty or cannot be parsed.
    """

    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            logger.warning("Ignoring unparseable date %r", value)
            return None

    logger.warning("Ignoring date of unsupported type %s", type(value).__name__)
    return None


class ModesDict(TypedDict):
    """
    JSON-serializable dictionary representation of a Modes object.
    """

    flashcard: bool
    spelling: bool


@dataclass(frozen=True)
class Modes:
    """
    Which practice pools a card takes part in.

    The pools are independent: a card may be due as a flashcard while being absent from spelling practice.

    Attributes:
        flashcard: Whether the card is shown in flashcard practice.
        spelling: Whether the card is shown in spelling practice.
    """

    flashcard: bool = True
    spelling: bool = True

    def enabled(self, mode: Mode | str) -> bool:
        """
        Returns whether the card takes part in the given practice pool.

        Raises:
            ValueError: If `mode` is not a known practice pool.
        """

        if Mode(mode) == Mode.Flashcard:
            return self.flashcard
        return self.spelling

    def to_dict(self) -> ModesDict:
        return {"flashcard": self.flashcard, "spelling": self.spelling}

    @classmethod
    def from_mapping(cls, source: Mapping[str, Any] | None) -> Self:
        """
        Creates a Modes object from a possibly partial mapping.

        A missing mapping, or a missing key within it, enables that pool.
        """

        if not source:
            return cls()
        if not isinstance(source, Mapping):
            logger.warning(
                "Ignoring modes of unsupported type %s", type(source).__name__
            )
            return cls()
        return cls(
            flashcard=source.get("flashcard") is not False,
            spelling=source.get("spelling") is not False,
        )


class CardDict(TypedDict):
    """
    JSON-serializable dictionary representation of a Card object.
    """

    id: str
    word: str
    translation: str
    category: str
    difficulty: str
    interval: int
    ease: float
    reps: int
    lapses: int
    nextReview: str | None
    createdAt: str | None
    modes: ModesDict
    ipa: NotRequired[str]
    mnemonic: NotRequired[str]
    imageUrl: NotRequired[str]
    example: NotRequired[str]


@dataclass(init=False)
class Card:
    """
    Represents one vocabulary card and its scheduling metadata.

    Attributes:
        card_id: The id of the card. Defaults to a random hex uuid.
        word: The word being learned.
        translation: The word's translation.
        category: Free-form classification tag used for filtering (e.g. "noun").
        difficulty: Free-form difficulty tag used for filtering (e.g. "medium").
        interval: Days until the next scheduled review. 0 for a card that has never been graded.
        ease: Multiplier governing how fast the interval grows.
        reps: Consecutive successful reviews since the last lapse.
        lapses: Lifetime count of failed reviews.
        next_review: The calendar date on or after which the card is due, or None if unset.
        created_at: The calendar date the card was added.
        modes: The practice pools the card takes part in.
        ipa: Pronunciation hint.
        mnemonic: Memory hook shown with the card.
        image_url: Picture shown with the card.
        example: Example sentence.
    """

    card_id: str
    word: str
    translation: str
    category: str
    difficulty: str
    interval: int
    ease: float
    reps: int
    lapses: int
    next_review: date | None
    created_at: date | None
    modes: Modes
    ipa: str
    mnemonic: str
    image_url: str
    example: str

    def __init__(
        self,
        word: str = "",
        translation: str = "",
        card_id: str | None = None,
        category: str = DEFAULT_CATEGORY,
        difficulty: str = DEFAULT_DIFFICULTY,
        interval: int = 0,
        ease: float = DEFAULT_EASE,
        reps: int = 0,
        lapses: int = 0,
        next_review: date | None = None,
        created_at: date | None = None,
        modes: Modes | None = None,
        ipa: str = "",
        mnemonic: str = "",
        image_url: str = "",
        example: str = "",
    ) -> None:
        if card_id is None:
            card_id = uuid.uuid4().hex
        self.card_id = card_id

        self.word = word
        self.translation = translation
        self.category = category
        self.difficulty = difficulty

        self.interval = interval
        self.ease = ease
        self.reps = reps
        self.lapses = lapses

        self.next_review = next_review
        self.created_at = created_at

        if modes is None:
            modes = Modes()
        self.modes = modes

        self.ipa = ipa
        self.mnemonic = mnemonic
        self.image_url = image_url
        self.example = example

    @property
    def is_new(self) -> bool:
        """Whether the card has never been graded successfully."""
        return self.reps == 0

    def to_dict(self) -> CardDict:
        """
        Returns a JSON-serializable dictionary representation of the Card object.

        Returns:
            A dictionary representation of the Card object.
        """

        return {
            "id": self.card_id,
            "word": self.word,
            "translation": self.translation,
            "category": self.category,
            "difficulty": self.difficulty,
            "interval": self.interval,
            "ease": self.ease,
            "reps": self.reps,
            "lapses": self.lapses,
            "nextReview": format_date(self.next_review),
            "createdAt": format_date(self.created_at),
            "modes": self.modes.to_dict(),
            "ipa": self.ipa,
            "mnemonic": self.mnemonic,
            "imageUrl": self.image_url,
            "example": self.example,
        }

    @classmethod
    def from_dict(cls, source_dict: CardDict) -> Self:
        """
        Creates a Card object from an existing dictionary.

        The content fields (ipa, mnemonic, imageUrl, example) may be absent. Use `normalize_card`
        for records whose scheduling fields may be missing too.

        Args:
            source_dict: A dictionary representing an existing Card object.

        Returns:
            A Card object created from the provided dictionary.
        """

        return cls(
            card_id=source_dict["id"],
            word=source_dict["word"],
            translation=source_dict["translation"],
            category=source_dict["category"],
            difficulty=source_dict["difficulty"],
            interval=int(source_dict["interval"]),
            ease=float(source_dict["ease"]),
            reps=int(source_dict["reps"]),
            lapses=int(source_dict["lapses"]),
            next_review=parse_date(source_dict["nextReview"]),
            created_at=parse_date(source_dict["createdAt"]),
            modes=Modes.from_mapping(source_dict["modes"]),
            ipa=source_dict.get("ipa", ""),
            mnemonic=source_dict.get("mnemonic", ""),
            image_url=source_dict.get("imageUrl", ""),
            example=source_dict.get("example", ""),
        )

    def to_json(self, indent: int | str | None = None) -> str:
        """
        Returns a JSON-serialized string of the Card object.

        Args:
            indent: Equivalent argument to the indent in json.dumps()

        Returns:
            str: A JSON-serialized string of the Card object.
        """

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        """
        Creates a Card object from a JSON-serialized string.

        Args:
            source_json: A JSON-serialized string of an existing Card object.

        Returns:
            Self: A Card object created from the JSON string.
        """

        source_dict: CardDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _as_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning("Ignoring non-numeric value %r", value)
        return default

    if not math.isfinite(number):
        logger.warning("Ignoring non-finite value %r", value)
        return default
    return int(number)


def _as_float(value: Any, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning("Ignoring non-numeric value %r", value)
        return default

    if not math.isfinite(number):
        logger.warning("Ignoring non-finite value %r", value)
        return default
    return number


def normalize_card(raw: Mapping[str, Any] | Card) -> Card:
    """
    Builds a fully-populated Card from a possibly partial record.

    This is the single ingestion boundary for card records coming from storage, sync or import.
    Missing scheduling fields take the values of a fresh card rather than raising:
    interval 0, ease 2.5, reps 0 and lapses 0. Both camelCase and snake_case keys are understood.

    Args:
        raw: The raw record, or an existing Card which is returned unchanged.

    Returns:
        A Card with every field populated.
    """

    if isinstance(raw, Card):
        return raw

    card_id = _pick(raw, "id", "card_id")
    ease = _as_float(raw.get("ease"), DEFAULT_EASE)

    return Card(
        card_id=str(card_id) if card_id is not None else None,
        word=str(raw.get("word") or ""),
        translation=str(raw.get("translation") or ""),
        category=str(raw.get("category") or DEFAULT_CATEGORY),
        difficulty=str(raw.get("difficulty") or DEFAULT_DIFFICULTY),
        interval=max(0, _as_int(raw.get("interval"), 0)),
        ease=ease or DEFAULT_EASE,
        reps=max(0, _as_int(raw.get("reps"), 0)),
        lapses=max(0, _as_int(raw.get("lapses"), 0)),
        next_review=parse_date(_pick(raw, "nextReview", "next_review")),
        created_at=parse_date(_pick(raw, "createdAt", "created_at")),
        modes=Modes.from_mapping(raw.get("modes")),
        ipa=str(raw.get("ipa") or ""),
        mnemonic=str(raw.get("mnemonic") or ""),
        image_url=str(_pick(raw, "imageUrl", "image_url") or ""),
        example=str(raw.get("example") or ""),
    )


def new_card(
    word: str,
    translation: str = "",
    today: date | None = None,
    **fields: Any,
) -> Card:
    """
    Creates a fresh card that is due immediately.

    Args:
        word: The word being learned.
        translation: The word's translation.
        today: The creation date. Defaults to the local date.
        **fields: Any other Card attribute (category, difficulty, modes, ...).

    Returns:
        A Card with interval 0, ease 2.5, no reps or lapses and next_review set to today.
    """

    if today is None:
        today = local_today()

    return Card(
        word=word,
        translation=translation,
        next_review=today,
        created_at=today,
        **fields,
    )


__all__ = [
    "Card",
    "Mode",
    "Modes",
    "normalize_card",
    "new_card",
    "parse_date",
    "format_date",
    "local_today",
]
