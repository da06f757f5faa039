from vocab_srs.card import Card, Modes
from vocab_srs.selector import Filters
from vocab_srs.settings import Settings
from vocab_srs.throttle import (
    DailyCounters,
    ShownKind,
    apply_caps,
    bump_shown,
    get_counts,
    reset_counters,
    shown_kind,
)

from datetime import date, timedelta
import pytest

TODAY = date(2024, 3, 10)
YESTERDAY = TODAY - timedelta(days=1)


def review_card(card_id, next_review=TODAY, **fields):
    return Card(card_id=card_id, reps=2, interval=3, next_review=next_review, **fields)


def fresh_card(card_id, **fields):
    return Card(card_id=card_id, next_review=TODAY, **fields)


class TestDailyCounters:
    def test_bump_shown(self):
        counters = bump_shown(None, ShownKind.New, TODAY)
        counters = bump_shown(counters, "review", TODAY)
        counters = bump_shown(counters, "review", TODAY)

        assert counters == DailyCounters(date_key=TODAY, shown_new=1, shown_review=2)

    def test_stale_counters_reset_on_bump(self):
        stale = DailyCounters(date_key=YESTERDAY, shown_new=7, shown_review=40)

        counters = bump_shown(stale, ShownKind.Review, TODAY)

        assert counters == DailyCounters(date_key=TODAY, shown_new=0, shown_review=1)

    def test_stale_counters_read_as_zero(self):
        stale = DailyCounters(date_key=YESTERDAY, shown_new=7, shown_review=40)
        assert stale.for_day(TODAY) == DailyCounters(date_key=TODAY)

    def test_invalid_kind(self):
        with pytest.raises(ValueError):
            bump_shown(None, "learning", TODAY)

    def test_reset_counters(self):
        assert reset_counters(TODAY) == DailyCounters(date_key=TODAY)

    def test_serialize(self):
        counters = DailyCounters(date_key=TODAY, shown_new=3, shown_review=9)

        assert counters.to_dict() == {
            "dateKey": "2024-03-10",
            "shownNew": 3,
            "shownReview": 9,
        }
        assert DailyCounters.from_json(counters.to_json()) == counters

    def test_invalid_date_key(self):
        with pytest.raises(ValueError):
            DailyCounters.from_dict(
                {"dateKey": "someday", "shownNew": 0, "shownReview": 0}
            )

    def test_shown_kind(self):
        assert shown_kind(fresh_card("a")) == ShownKind.New
        assert shown_kind(review_card("b")) == ShownKind.Review


class TestGetCounts:
    def test_counts(self):
        cards = [
            review_card("1"),
            review_card("2", next_review=YESTERDAY),
            review_card("3", next_review=TODAY + timedelta(days=5)),
            fresh_card("4"),
            fresh_card("5"),
            review_card("6", modes=Modes(flashcard=False)),
        ]
        settings = Settings(new_cards_per_day=1, max_reviews_per_day=3)
        counters = DailyCounters(date_key=TODAY, shown_new=0, shown_review=2)

        counts = get_counts(cards, counters, settings, TODAY)

        assert counts.date_key == TODAY
        assert counts.total == 5
        assert counts.due_all == 4
        assert counts.new_all == 2
        assert counts.reviews_cap == 3
        assert counts.new_cap == 1
        assert counts.reviews_due_today == 1
        assert counts.review_backlog == 3
        assert counts.new_today == 1

    def test_counts_with_stale_counters(self):
        cards = [review_card("1"), review_card("2")]
        settings = Settings(max_reviews_per_day=1)
        stale = DailyCounters(date_key=YESTERDAY, shown_review=50)

        counts = get_counts(cards, stale, settings, TODAY)

        assert counts.reviews_due_today == 1
        assert counts.review_backlog == 1

    def test_caps_exhausted(self):
        cards = [fresh_card("1"), review_card("2")]
        settings = Settings(new_cards_per_day=2, max_reviews_per_day=5)
        counters = DailyCounters(date_key=TODAY, shown_new=4, shown_review=5)

        counts = get_counts(cards, counters, settings, TODAY)

        assert counts.new_today == 0
        assert counts.reviews_due_today == 0
        assert counts.review_backlog == 2

    def test_filters(self):
        cards = [review_card("1", category="verb"), review_card("2")]

        counts = get_counts(cards, None, Settings(), TODAY, Filters(category="verb"))

        assert counts.total == 1
        assert counts.due_all == 1


class TestApplyCaps:
    def test_apply_caps_keeps_order(self):
        cards = [
            fresh_card("1"),
            review_card("2"),
            fresh_card("3"),
            review_card("4"),
            review_card("5"),
        ]
        settings = Settings(new_cards_per_day=1, max_reviews_per_day=2)

        admitted = apply_caps(cards, None, settings, TODAY)

        assert [card.card_id for card in admitted] == ["1", "2", "4"]

    def test_apply_caps_counts_what_was_shown(self):
        cards = [fresh_card("1"), review_card("2"), review_card("3")]
        settings = Settings(new_cards_per_day=1, max_reviews_per_day=2)
        counters = DailyCounters(date_key=TODAY, shown_new=1, shown_review=1)

        admitted = apply_caps(cards, counters, settings, TODAY)

        assert [card.card_id for card in admitted] == ["2"]
