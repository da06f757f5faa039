"""
vocab-srs
---------

vocab-srs is a spaced repetition engine for vocabulary flashcards, with binary and four-grade schedulers, spelling checks, daily caps and learning statistics.
"""

from vocab_srs.card import Card, Mode, Modes, new_card, normalize_card
from vocab_srs.grade import Grade
from vocab_srs.scheduler import (
    Strategy,
    Scheduler,
    BinaryScheduler,
    FourGradeScheduler,
    get_scheduler,
)
from vocab_srs.spelling import Verdict, SpellingResult, check_spelling, score
from vocab_srs.selector import Filters, ReviewQueue, due_cards
from vocab_srs.settings import Settings
from vocab_srs.throttle import DailyCounters, DailyCounts, get_counts, bump_shown
from vocab_srs.review_log import ReviewLog, ReviewLogEntry, merge_review_logs
from vocab_srs.stats import StatsSnapshot, compute_stats
from vocab_srs.session import Presentation, ReviewSession
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vocab_srs.analysis import HistoryAnalyzer


# lazy load the HistoryAnalyzer module due to heavy dependencies
def __getattr__(name: str) -> type:
    if name == "HistoryAnalyzer":
        global HistoryAnalyzer
        from vocab_srs.analysis import HistoryAnalyzer

        return HistoryAnalyzer
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Card",
    "Mode",
    "Modes",
    "new_card",
    "normalize_card",
    "Grade",
    "Strategy",
    "Scheduler",
    "BinaryScheduler",
    "FourGradeScheduler",
    "get_scheduler",
    "Verdict",
    "SpellingResult",
    "check_spelling",
    "score",
    "Filters",
    "ReviewQueue",
    "due_cards",
    "Settings",
    "DailyCounters",
    "DailyCounts",
    "get_counts",
    "bump_shown",
    "ReviewLog",
    "ReviewLogEntry",
    "merge_review_logs",
    "StatsSnapshot",
    "compute_stats",
    "Presentation",
    "ReviewSession",
    "HistoryAnalyzer",
]
