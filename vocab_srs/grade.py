from __future__ import annotations
from enum import IntEnum
from typing import Any


class Grade(IntEnum):
    """
    Enum representing the four possible self-assessed grades when reviewing a card.
    """

    Again = 1
    Hard = 2
    Good = 3
    Easy = 4

    @classmethod
    def parse(cls, value: Any) -> Grade:
        """
        Converts a grade given as a Grade, its name ("good", "Good") or its value (3).

        Raises:
            ValueError: If the value does not name one of the four grades.
        """

        if isinstance(value, bool):
            raise ValueError(f"{value!r} is a pass/fail outcome, not a grade")

        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            for grade in cls:
                if grade.name.lower() == value.strip().lower():
                    return grade
            raise ValueError(f"Unknown grade {value!r}")

        if isinstance(value, int):
            return cls(value)

        raise ValueError(f"Unknown grade {value!r}")

    @property
    def passed(self) -> bool:
        """Whether the grade counts as a successful recall."""
        return self != Grade.Again


def passed(outcome: Any) -> bool:
    """
    Reduces a grading outcome to correct/incorrect.

    A bool is taken as-is; a grade counts as correct unless it is Again.

    Raises:
        ValueError: If the outcome is neither a bool nor a grade.
    """

    if isinstance(outcome, bool):
        return outcome
    return Grade.parse(outcome).passed


__all__ = ["Grade", "passed"]
