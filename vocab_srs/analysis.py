"""
vocab_srs.analysis
------------------

This module defines the optional HistoryAnalyzer class.
"""

from __future__ import annotations
from collections.abc import Iterable

from vocab_srs.review_log import ReviewLogEntry

try:
    import pandas as pd

    FRAME_COLUMNS = ["card_id", "word", "correct", "mode", "date", "interval"]

    class HistoryAnalyzer:
        """
        Summarizes a review log with pandas.

        Attributes:
            review_log: The review log entries being analyzed.
        """

        review_log: tuple[ReviewLogEntry, ...]

        def __init__(self, review_log: Iterable[ReviewLogEntry]) -> None:
            self.review_log = tuple(review_log)

        def frame(self) -> pd.DataFrame:
            """
            Returns the review log as a DataFrame with one row per entry, ordered by date.
            """

            review_log_df = pd.DataFrame(
                [
                    {
                        "card_id": entry.card_id,
                        "word": entry.word,
                        "correct": entry.correct,
                        "mode": entry.mode.value,
                        "date": pd.Timestamp(entry.date),
                        "interval": entry.interval,
                    }
                    for entry in self.review_log
                ],
                columns=FRAME_COLUMNS,
            )

            return review_log_df.sort_values(by="date", kind="stable").reset_index(
                drop=True
            )

        def daily(self) -> pd.DataFrame:
            """
            Returns the reviews per day from the first to the last review date.

            Days without reviews are included with zero counts. The frame is indexed by date
            and has the columns total, correct and accuracy.
            """

            review_log_df = self.frame()
            if review_log_df.empty:
                return pd.DataFrame(
                    columns=["total", "correct", "accuracy"],
                    index=pd.DatetimeIndex([], name="date"),
                )

            daily_df = review_log_df.groupby("date").agg(
                total=("correct", "size"),
                correct=("correct", "sum"),
            )

            calendar = pd.date_range(
                daily_df.index.min(), daily_df.index.max(), freq="D", name="date"
            )
            daily_df = daily_df.reindex(calendar, fill_value=0).astype(int)

            # accuracy is 0 on days without reviews
            daily_df["accuracy"] = (
                daily_df["correct"] / daily_df["total"].where(daily_df["total"] > 0)
            ).fillna(0.0)

            return daily_df

        def trouble_words(
            self, min_reviews: int = 3, limit: int | None = 10
        ) -> pd.DataFrame:
            """
            Ranks cards by how often they were missed.

            Args:
                min_reviews: Cards with fewer reviews than this are left out.
                limit: The maximum number of rows to return, or None for all of them.

            Returns:
                A DataFrame with the columns card_id, word, reviews, misses and miss_rate,
                worst first. Ties are broken by the number of misses, then by word.
            """

            review_log_df = self.frame()
            columns = ["card_id", "word", "reviews", "misses", "miss_rate"]
            if review_log_df.empty:
                return pd.DataFrame(columns=columns)

            review_log_df["missed"] = ~review_log_df["correct"].astype(bool)

            trouble_df = (
                review_log_df.groupby("card_id", sort=False)
                .agg(
                    word=("word", "last"),
                    reviews=("missed", "size"),
                    misses=("missed", "sum"),
                )
                .reset_index()
            )
            trouble_df["misses"] = trouble_df["misses"].astype(int)
            trouble_df["miss_rate"] = trouble_df["misses"] / trouble_df["reviews"]

            trouble_df = trouble_df.loc[trouble_df["reviews"] >= min_reviews]
            trouble_df = trouble_df.sort_values(
                by=["miss_rate", "misses", "word"],
                ascending=[False, False, True],
            ).reset_index(drop=True)

            if limit is not None:
                trouble_df = trouble_df.head(limit)

            return trouble_df[columns]

except ImportError:

    class HistoryAnalyzer:
        def __init__(self, *args, **kwargs) -> None:
            raise ImportError(
                'HistoryAnalyzer is not installed.\nInstall it with: pip install "vocab-srs[analysis]"'
            )


__all__ = ["HistoryAnalyzer"]
