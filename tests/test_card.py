from vocab_srs.card import (
    Card,
    Mode,
    Modes,
    new_card,
    normalize_card,
    parse_date,
    format_date,
)

from datetime import date, datetime, timedelta, timezone
import json
import pytest

TODAY = date(2024, 3, 10)


class TestCard:
    def test_defaults(self):
        card = Card(word="casa", translation="house")

        assert card.interval == 0
        assert card.ease == 2.5
        assert card.reps == 0
        assert card.lapses == 0
        assert card.category == "noun"
        assert card.difficulty == "medium"
        assert card.modes == Modes(flashcard=True, spelling=True)
        assert card.next_review is None
        assert card.is_new
        assert len(card.card_id) == 32

    def test_card_ids_are_unique(self):
        assert Card().card_id != Card().card_id

    def test_serialize(self):
        card = new_card("perro", "dog", today=TODAY, ipa="ˈpero")

        card_dict = card.to_dict()
        assert card_dict["nextReview"] == "2024-03-10"
        assert card_dict["createdAt"] == "2024-03-10"
        assert card_dict["modes"] == {"flashcard": True, "spelling": True}
        assert card_dict["ipa"] == "ˈpero"

        # the dictionary is JSON serializable
        json.dumps(card_dict)

        assert Card.from_dict(card_dict) == card
        assert Card.from_json(card.to_json(indent=2)) == card

    def test_from_dict_without_content_fields(self):
        card_dict = new_card("perro", "dog", today=TODAY).to_dict()
        for key in ("ipa", "mnemonic", "imageUrl", "example"):
            del card_dict[key]

        card = Card.from_dict(card_dict)

        assert card.word == "perro"
        assert card.ipa == ""
        assert card.image_url == ""

    def test_new_card(self):
        card = new_card("gato", "cat", today=TODAY, category="animal")

        assert card.word == "gato"
        assert card.translation == "cat"
        assert card.category == "animal"
        assert card.next_review == TODAY
        assert card.created_at == TODAY
        assert card.is_new


class TestNormalizeCard:
    def test_partial_record_gets_fresh_card_values(self):
        card = normalize_card({"id": "abc", "word": "sol"})

        assert card.card_id == "abc"
        assert card.word == "sol"
        assert card.interval == 0
        assert card.ease == 2.5
        assert card.reps == 0
        assert card.lapses == 0
        assert card.category == "noun"
        assert card.difficulty == "medium"
        assert card.modes == Modes()
        assert card.next_review is None

    def test_zero_ease_falls_back_to_default(self):
        assert normalize_card({"ease": 0}).ease == 2.5
        assert normalize_card({"ease": None}).ease == 2.5
        assert normalize_card({"ease": "1.9"}).ease == pytest.approx(1.9)

    def test_negative_counts_are_clamped(self):
        card = normalize_card({"interval": -4, "reps": -1, "lapses": -2})

        assert card.interval == 0
        assert card.reps == 0
        assert card.lapses == 0

    def test_bad_numbers_are_ignored(self, caplog):
        card = normalize_card({"interval": "soon", "ease": "high"})

        assert card.interval == 0
        assert card.ease == 2.5
        assert "non-numeric" in caplog.text

    def test_non_finite_numbers_are_ignored(self, caplog):
        card = normalize_card(
            json.loads('{"id": "x", "interval": 1e400, "reps": -1e400, "ease": "nan"}')
        )

        assert card.interval == 0
        assert card.reps == 0
        assert card.ease == 2.5
        assert "non-finite" in caplog.text

        assert normalize_card({"lapses": 10**400}).lapses == 0
        assert normalize_card({"ease": "inf"}).ease == 2.5

    def test_malformed_modes_enable_both_pools(self, caplog):
        card = normalize_card({"id": "x", "modes": ["flashcard"]})

        assert card.modes == Modes()
        assert "unsupported type" in caplog.text

    def test_camel_and_snake_case_keys(self):
        camel = normalize_card(
            {"id": "a", "nextReview": "2024-03-11", "imageUrl": "x.png"}
        )
        snake = normalize_card(
            {"card_id": "a", "next_review": "2024-03-11", "image_url": "x.png"}
        )

        assert camel == snake
        assert camel.next_review == date(2024, 3, 11)
        assert camel.image_url == "x.png"

    def test_partial_modes(self):
        card = normalize_card({"modes": {"flashcard": False}})

        assert card.modes == Modes(flashcard=False, spelling=True)
        assert not card.modes.enabled(Mode.Flashcard)
        assert card.modes.enabled("spelling")

    def test_card_is_returned_unchanged(self):
        card = Card(word="luna")
        assert normalize_card(card) is card


class TestDates:
    def test_parse_date(self):
        assert parse_date("2024-03-10") == TODAY
        assert parse_date("2024-03-10T23:59:00") == TODAY
        assert parse_date(TODAY) == TODAY
        assert parse_date(datetime(2024, 3, 10, 8, 0)) == TODAY
        assert parse_date(None) is None
        assert parse_date("") is None

    def test_parse_aware_datetime_uses_local_date(self):
        moment = datetime(2024, 3, 10, 12, 0, tzinfo=timezone(timedelta(hours=3)))
        assert parse_date(moment) == moment.astimezone().date()

    def test_unparseable_date(self, caplog):
        assert parse_date("next tuesday") is None
        assert "unparseable" in caplog.text

    def test_format_date(self):
        assert format_date(TODAY) == "2024-03-10"
        assert format_date(None) is None

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            Modes().enabled("listening")
