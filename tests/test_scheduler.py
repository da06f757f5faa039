from vocab_srs.card import Card, new_card
from vocab_srs.grade import Grade, passed
from vocab_srs.scheduler import (
    BinaryScheduler,
    FourGradeScheduler,
    Strategy,
    get_scheduler,
    MIN_EASE,
    MAX_EASE,
)

from datetime import date, timedelta
import random
import pytest

TODAY = date(2024, 3, 10)


class TestBinaryScheduler:
    def test_successful_reviews_interval_sequence(self):
        scheduler = BinaryScheduler()
        card = new_card("casa", "house", today=TODAY)

        ivl_history = []
        for _ in range(4):
            card = scheduler.advance(card, True, TODAY)
            ivl_history.append(card.interval)

        # third interval is round(3 * 2.54), fourth round(8 * 2.56)
        assert ivl_history == [1, 3, 8, 20]
        assert card.reps == 4
        assert card.ease == pytest.approx(2.58)

    def test_failed_review(self):
        scheduler = BinaryScheduler()
        card = Card(interval=20, ease=2.5, reps=5, lapses=1)

        card = scheduler.advance(card, False, TODAY)

        assert card.reps == 0
        assert card.interval == 1
        assert card.lapses == 2
        assert card.ease == pytest.approx(2.3)
        assert card.next_review == TODAY + timedelta(days=1)

    def test_ease_lower_bound(self):
        scheduler = BinaryScheduler()
        card = Card(ease=1.4)

        card = scheduler.advance(card, False, TODAY)
        assert card.ease == pytest.approx(MIN_EASE)

        card = scheduler.advance(card, False, TODAY)
        assert card.ease == pytest.approx(MIN_EASE)

    def test_ease_upper_bound(self):
        scheduler = BinaryScheduler()
        card = Card(ease=3.49, reps=3, interval=10)

        card = scheduler.advance(card, True, TODAY)
        assert card.ease == pytest.approx(MAX_EASE)

    def test_grade_outcomes_are_accepted(self):
        scheduler = BinaryScheduler()

        assert scheduler.advance(Card(), Grade.Hard, TODAY).reps == 1
        assert scheduler.advance(Card(), "again", TODAY).lapses == 1

    def test_input_card_is_not_modified(self):
        scheduler = BinaryScheduler()
        card = Card(word="sol")
        before = card.to_dict()

        scheduler.advance(card, True, TODAY)

        assert card.to_dict() == before

    def test_partial_record_is_normalized(self):
        scheduler = BinaryScheduler()

        card = scheduler.advance({"id": "x", "word": "mar"}, True, TODAY)

        assert card.card_id == "x"
        assert card.interval == 1
        assert card.ease == pytest.approx(2.52)

    def test_invalid_outcome(self):
        with pytest.raises(ValueError):
            BinaryScheduler().advance(Card(), "maybe", TODAY)

    def test_next_review_defaults_to_local_today(self):
        card = BinaryScheduler().advance(Card(), True)
        assert card.next_review == date.today() + timedelta(days=1)


class TestFourGradeScheduler:
    def test_good_three_times(self):
        scheduler = FourGradeScheduler()
        card = Card(interval=0, ease=2.5, reps=0)

        ivl_history = []
        for _ in range(3):
            card = scheduler.advance(card, Grade.Good, TODAY)
            ivl_history.append(card.interval)

        # round(3 * 2.5) rounds half up
        assert ivl_history == [1, 3, 8]
        assert card.ease == pytest.approx(2.5)

    def test_again_good_good(self):
        scheduler = FourGradeScheduler()
        card = new_card("árbol", "tree", today=TODAY)

        for grade in ("again", "good", "good"):
            card = scheduler.advance(card, grade, TODAY)

        assert card.reps == 2
        assert card.lapses == 1
        assert card.interval == 3
        assert card.ease == pytest.approx(2.2)
        assert card.next_review == TODAY + timedelta(days=3)

    def test_hard(self):
        scheduler = FourGradeScheduler()
        card = Card()

        card = scheduler.advance(card, Grade.Hard, TODAY)
        assert card.interval == 1
        assert card.ease == pytest.approx(2.35)

        card = scheduler.advance(card, Grade.Hard, TODAY)
        assert card.interval == 2
        assert card.ease == pytest.approx(2.2)

        # interval uses the ease before the review: round(2 * 2.2 * 0.85)
        card = scheduler.advance(card, Grade.Hard, TODAY)
        assert card.interval == 4
        assert card.ease == pytest.approx(2.05)

    def test_easy(self):
        scheduler = FourGradeScheduler()
        card = Card()

        card = scheduler.advance(card, Grade.Easy, TODAY)
        assert card.interval == 4
        assert card.ease == pytest.approx(2.65)

        card = scheduler.advance(card, Grade.Easy, TODAY)
        assert card.interval == 4

        # round(4 * 2.8 * 1.3)
        card = scheduler.advance(card, Grade.Easy, TODAY)
        assert card.interval == 15
        assert card.ease == pytest.approx(2.95)

    def test_again_after_successes(self):
        scheduler = FourGradeScheduler()
        card = Card(interval=30, ease=2.5, reps=6, lapses=0)

        card = scheduler.advance(card, 1, TODAY)

        assert card.reps == 0
        assert card.lapses == 1
        assert card.interval == 1
        assert card.ease == pytest.approx(2.2)

    def test_ease_stays_within_bounds(self):
        scheduler = FourGradeScheduler()
        rng = random.Random(42)
        card = Card()

        for _ in range(500):
            card = scheduler.advance(card, rng.choice(list(Grade)), TODAY)
            assert MIN_EASE <= card.ease <= MAX_EASE
            assert card.interval >= 1
            assert card.next_review >= TODAY + timedelta(days=1)

    def test_bool_outcome_uses_binary_rules(self):
        scheduler = FourGradeScheduler()

        card = scheduler.advance(Card(), True, TODAY)
        assert card.ease == pytest.approx(2.52)

        card = scheduler.advance(Card(), False, TODAY)
        assert card.ease == pytest.approx(2.3)

    def test_unknown_grade(self):
        scheduler = FourGradeScheduler()

        with pytest.raises(ValueError):
            scheduler.advance(Card(), "excellent", TODAY)

        with pytest.raises(ValueError):
            scheduler.advance(Card(), 5, TODAY)

        with pytest.raises(ValueError):
            scheduler.advance(Card(), None, TODAY)


class TestGrade:
    def test_parse(self):
        assert Grade.parse("good") == Grade.Good
        assert Grade.parse(" Easy ") == Grade.Easy
        assert Grade.parse(2) == Grade.Hard
        assert Grade.parse(Grade.Again) == Grade.Again

    def test_parse_rejects_bool(self):
        with pytest.raises(ValueError):
            Grade.parse(True)

    def test_passed(self):
        assert passed(True)
        assert not passed(False)
        assert not passed(Grade.Again)
        assert passed("hard")


class TestGetScheduler:
    def test_strategies(self):
        assert isinstance(get_scheduler("binary"), BinaryScheduler)
        assert isinstance(get_scheduler(Strategy.FourGrade), FourGradeScheduler)

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            get_scheduler("leitner")
