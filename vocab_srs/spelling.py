"""
vocab_srs.spelling
------------------

This module scores typed spelling answers against the expected word.

Classes:
    EditKind: Enum representing the four alignment operations.
    Op: One aligned step between the guess and the target.
    Alignment: The edit distance between two strings and the operations that achieve it.
    Verdict: Enum classifying a typed answer.
    SpellingResult: The verdict for a typed answer together with its alignment.

Functions:
    score: Computes the Levenshtein alignment between a guess and a target.
    check_spelling: Classifies a typed answer for the grading pipeline.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

CLOSE_DISTANCE = 2


class EditKind(str, Enum):
    """
    Enum representing the four alignment operations.
    """

    Eq = "eq"
    Sub = "sub"
    Del = "del"
    Ins = "ins"


@dataclass(frozen=True)
class Op:
    """
    One aligned step between the guess and the target.

    Attributes:
        kind: The operation.
        source: The guess character, or "" for an insertion.
        target: The target character, or "" for a deletion.
    """

    kind: EditKind
    source: str
    target: str


@dataclass(frozen=True)
class Alignment:
    """
    The edit distance between two strings and the operations that achieve it.

    Attributes:
        distance: The Levenshtein distance.
        ops: The operations, in reading order.
    """

    distance: int
    ops: tuple[Op, ...]


class Verdict(str, Enum):
    """
    Enum classifying a typed answer.
    """

    NoAnswer = "no_answer"
    Perfect = "perfect"
    Close = "close"
    Incorrect = "incorrect"


@dataclass(frozen=True)
class SpellingResult:
    """
    The verdict for a typed answer together with its alignment.

    Attributes:
        verdict: How the answer was classified.
        alignment: The alignment against the target, or None if no answer was given.
    """

    verdict: Verdict
    alignment: Alignment | None

    @property
    def distance(self) -> int | None:
        if self.alignment is None:
            return None
        return self.alignment.distance

    @property
    def outcome(self) -> bool | None:
        """
        The grading outcome implied by the answer.

        Only a perfect answer grades the card automatically; every other verdict is feedback only.
        """

        if self.verdict == Verdict.Perfect:
            return True
        return None

    @property
    def hint(self) -> str:
        """
        Renders the alignment as feedback, marking each position against the target.

        Matching letters are shown as-is, wrong letters as the expected letter in brackets,
        missing letters as the expected letter in parentheses and extra letters struck out with a minus.
        """

        if self.alignment is None:
            return ""

        parts = []
        for op in self.alignment.ops:
            match op.kind:
                case EditKind.Eq:
                    parts.append(op.target)
                case EditKind.Sub:
                    parts.append(f"[{op.target}]")
                case EditKind.Ins:
                    parts.append(f"({op.target})")
                case EditKind.Del:
                    parts.append(f"-{op.source}")

        return "".join(parts)


def score(guess: str, target: str) -> Alignment:
    """
    Computes the Levenshtein alignment between a guess and a target, ignoring case.

    The guess is not trimmed; callers that accept typed input trim it first.
    When several alignments share the minimum cost, a diagonal step (match or substitution)
    is preferred over a deletion, and a deletion over an insertion.

    Args:
        guess: The typed answer.
        target: The expected word.

    Returns:
        Alignment: The distance and the operations turning the guess into the target.
    """

    guess = guess.lower()
    target = target.lower()
    m, n = len(guess), len(target)

    dp = [[0] * (n + 1) for _ in range(m + 1)]
    steps: list[list[EditKind | None]] = [[None] * (n + 1) for _ in range(m + 1)]

    for i in range(1, m + 1):
        dp[i][0] = i
        steps[i][0] = EditKind.Del
    for j in range(1, n + 1):
        dp[0][j] = j
        steps[0][j] = EditKind.Ins

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            cost = 0 if guess[i - 1] == target[j - 1] else 1
            diagonal = dp[i - 1][j - 1] + cost
            deletion = dp[i - 1][j] + 1
            insertion = dp[i][j - 1] + 1
            best = min(diagonal, deletion, insertion)
            dp[i][j] = best

            if best == diagonal:
                steps[i][j] = EditKind.Eq if cost == 0 else EditKind.Sub
            elif best == deletion:
                steps[i][j] = EditKind.Del
            else:
                steps[i][j] = EditKind.Ins

    ops = []
    i, j = m, n
    while i > 0 or j > 0:
        step = steps[i][j]
        if step in (EditKind.Eq, EditKind.Sub):
            ops.append(Op(step, guess[i - 1], target[j - 1]))
            i -= 1
            j -= 1
        elif step == EditKind.Del:
            ops.append(Op(step, guess[i - 1], ""))
            i -= 1
        else:
            ops.append(Op(EditKind.Ins, "", target[j - 1]))
            j -= 1

    ops.reverse()

    return Alignment(distance=dp[m][n], ops=tuple(ops))


def check_spelling(guess: str, target: str) -> SpellingResult:
    """
    Classifies a typed answer for the grading pipeline.

    Both strings are trimmed. An empty guess is reported as NoAnswer without being scored.
    Otherwise an exact match (ignoring case) is Perfect, a distance of at most 2 is Close and
    anything further is Incorrect.

    Args:
        guess: The typed answer.
        target: The expected word.

    Returns:
        SpellingResult: The verdict and the alignment behind it.
    """

    guess = (guess or "").strip()
    target = (target or "").strip()

    if not guess:
        return SpellingResult(verdict=Verdict.NoAnswer, alignment=None)

    alignment = score(guess, target)

    if alignment.distance == 0:
        verdict = Verdict.Perfect
    elif alignment.distance <= CLOSE_DISTANCE:
        verdict = Verdict.Close
    else:
        verdict = Verdict.Incorrect

    return SpellingResult(verdict=verdict, alignment=alignment)


__all__ = [
    "EditKind",
    "Op",
    "Alignment",
    "Verdict",
    "SpellingResult",
    "score",
    "check_spelling",
]
