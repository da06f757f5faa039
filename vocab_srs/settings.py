"""
vocab_srs.settings
------------------

This module defines the Settings class that selects the scheduling strategy and the daily caps.

Classes:
    Settings: Scheduler configuration.
"""

from __future__ import annotations
from dataclasses import dataclass
import json
from typing import TypedDict
from typing_extensions import Self

from vocab_srs.scheduler import Scheduler, Strategy, get_scheduler

DEFAULT_NEW_CARDS_PER_DAY = 20
DEFAULT_MAX_REVIEWS_PER_DAY = 200


class SettingsDict(TypedDict):
    """
    JSON-serializable dictionary representation of a Settings object.
    """

    strategy: str
    newCardsPerDay: int
    maxReviewsPerDay: int
    enforceCaps: bool


@dataclass(init=False)
class Settings:
    """
    Scheduler configuration.

    Attributes:
        strategy: Which scheduling strategy grades cards.
        new_cards_per_day: How many never-graded cards may be introduced per day.
        max_reviews_per_day: How many review cards may be shown per day.
        enforce_caps: Whether the caps restrict the cards served, rather than only being reported.
    """

    strategy: Strategy
    new_cards_per_day: int
    max_reviews_per_day: int
    enforce_caps: bool

    def __init__(
        self,
        strategy: Strategy | str = Strategy.Binary,
        new_cards_per_day: int = DEFAULT_NEW_CARDS_PER_DAY,
        max_reviews_per_day: int = DEFAULT_MAX_REVIEWS_PER_DAY,
        enforce_caps: bool = False,
    ) -> None:
        self._validate_caps(
            new_cards_per_day=new_cards_per_day,
            max_reviews_per_day=max_reviews_per_day,
        )

        self.strategy = Strategy(strategy)
        self.new_cards_per_day = new_cards_per_day
        self.max_reviews_per_day = max_reviews_per_day
        self.enforce_caps = enforce_caps

    def _validate_caps(self, *, new_cards_per_day: int, max_reviews_per_day: int) -> None:
        error_messages = []
        if new_cards_per_day < 0:
            error_messages.append(f"new_cards_per_day = {new_cards_per_day} is negative")
        if max_reviews_per_day < 0:
            error_messages.append(
                f"max_reviews_per_day = {max_reviews_per_day} is negative"
            )

        if len(error_messages) > 0:
            raise ValueError(
                "One or more daily caps are invalid:\n" + "\n".join(error_messages)
            )

    def scheduler(self) -> Scheduler:
        """
        Returns a scheduler implementing the configured strategy.
        """

        return get_scheduler(self.strategy)

    def to_dict(self) -> SettingsDict:
        """
        Returns a JSON-serializable dictionary representation of the Settings object.
        """

        return {
            "strategy": self.strategy.value,
            "newCardsPerDay": self.new_cards_per_day,
            "maxReviewsPerDay": self.max_reviews_per_day,
            "enforceCaps": self.enforce_caps,
        }

    @classmethod
    def from_dict(cls, source_dict: SettingsDict) -> Self:
        """
        Creates a Settings object from an existing dictionary.

        Missing keys take their default values.

        Raises:
            ValueError: If the strategy is unknown or a cap is negative.
        """

        return cls(
            strategy=source_dict.get("strategy", Strategy.Binary),
            new_cards_per_day=int(
                source_dict.get("newCardsPerDay", DEFAULT_NEW_CARDS_PER_DAY)
            ),
            max_reviews_per_day=int(
                source_dict.get("maxReviewsPerDay", DEFAULT_MAX_REVIEWS_PER_DAY)
            ),
            enforce_caps=bool(source_dict.get("enforceCaps", False)),
        )

    def to_json(self, indent: int | str | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        source_dict: SettingsDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)


__all__ = ["Settings"]
