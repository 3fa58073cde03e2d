"""Test service response parsing."""

import json

import pytest

from bgg_library.enrichment.parser import clean_response_text, parse_enriched_fields, parse_games
from bgg_library.models import EnrichedFields

FULL_RESPONSE = {
    "title": "  Catan ",
    "publisher": "KOSMOS",
    "year": 1995,
    "minPlayers": 3,
    "maxPlayers": 4,
    "playTimeMin": 60,
    "playTimeMax": 120,
    "description": " Trade and build on the island of Catan. ",
    "categories": ["strategy", " trading ", ""],
    "bggRating": 7.14,
    "bggRank": 500.0,
    "suggestedAge": 10,
    "confidence": "high",
}


def test_full_response_normalized():
    fields = parse_enriched_fields(json.dumps(FULL_RESPONSE))
    assert fields.title == "Catan"
    assert fields.publisher == "KOSMOS"
    assert fields.year == 1995
    assert (fields.min_players, fields.max_players) == (3, 4)
    assert (fields.play_time_min, fields.play_time_max) == (60, 120)
    assert fields.description == "Trade and build on the island of Catan."
    assert fields.categories == ["strategy", "trading"]
    assert fields.bgg_rating == 7.1
    assert fields.bgg_rank == 500
    assert fields.suggested_age == 10
    assert fields.confidence == "high"


def test_empty_string_is_all_unknown():
    fields = parse_enriched_fields("")
    assert fields == EnrichedFields()
    assert fields.is_empty()


@pytest.mark.parametrize("text", ["not json", "{\"suggestedAge\": ", "[1, 2, 3]", "42", "null"])
def test_malformed_or_non_object_is_all_unknown(text):
    assert parse_enriched_fields(text) == EnrichedFields()


def test_json_fence_stripped():
    fields = parse_enriched_fields('```json\n{"suggestedAge": 8.9}\n```')
    assert fields.suggested_age == 8


def test_bare_fence_stripped():
    fields = parse_enriched_fields('```\n{"suggestedAge": 12, "confidence": "medium"}\n```')
    assert fields.suggested_age == 12
    assert fields.confidence == "medium"


@pytest.mark.parametrize("payload", [
    FULL_RESPONSE,
    {"suggestedAge": 10, "confidence": "high"},
    {"suggestedAge": None, "confidence": "low"},
    {"categories": []},
    {},
])
def test_fence_stripping_is_transparent(payload):
    text = json.dumps(payload)
    assert parse_enriched_fields(text) == parse_enriched_fields("```json\n" + text + "\n```")


def test_numeric_strings_are_not_numbers():
    fields = parse_enriched_fields('{"suggestedAge": "10", "bggRating": "7.5", "bggRank": "12", "year": "1995"}')
    assert fields.suggested_age is None
    assert fields.bgg_rating is None
    assert fields.bgg_rank is None
    assert fields.year is None


@pytest.mark.parametrize("age", [0, -5, 22, "ten", None])
def test_invalid_age_unknown(age):
    assert parse_enriched_fields(json.dumps({"suggestedAge": age})).suggested_age is None


def test_missing_age_unknown():
    assert parse_enriched_fields('{"confidence": "high"}').suggested_age is None


def test_rating_boundaries():
    assert parse_enriched_fields('{"bggRating": 10.5}').bgg_rating is None
    assert parse_enriched_fields('{"bggRating": 0}').bgg_rating == 0


def test_unrecognized_confidence_defaults_low():
    assert parse_enriched_fields('{"confidence": "certain"}').confidence == "low"


def test_unknown_keys_ignored():
    fields = parse_enriched_fields('{"designer": "Klaus Teuber", "suggestedAge": 10}')
    assert fields.suggested_age == 10


def test_no_ordering_enforced_between_player_counts():
    fields = parse_enriched_fields('{"minPlayers": 5, "maxPlayers": 2}')
    assert (fields.min_players, fields.max_players) == (5, 2)


def test_clean_response_text():
    assert clean_response_text('  ```json\n{"a": 1}\n```  ') == '{"a": 1}'
    assert clean_response_text('{"a": 1}') == '{"a": 1}'
    assert clean_response_text("") == ""


def test_deeply_nested_response_is_unknown():
    nested = "[" * 100000 + "]" * 100000
    assert parse_enriched_fields(nested) == EnrichedFields()
    assert parse_games(nested) == []


class TestParseGames:
    def test_games_array(self):
        text = json.dumps({"games": [
            {"title": "Catan", "confidence": "high"},
            "not a game",
            {"title": "Azul", "minPlayers": 2, "confidence": "medium"},
        ]})
        games = parse_games(text)
        assert [g.title for g in games] == ["Catan", "Azul"]
        assert games[1].min_players == 2

    def test_legacy_single_object(self):
        games = parse_games('{"title": "Ticket to Ride", "confidence": "high"}')
        assert len(games) == 1
        assert games[0].title == "Ticket to Ride"

    def test_bare_array(self):
        games = parse_games('```json\n[{"title": "Wingspan"}]\n```')
        assert [g.title for g in games] == ["Wingspan"]

    def test_no_games(self):
        assert parse_games('{"games": []}') == []
        assert parse_games('{"note": "no boxes here"}') == []

    def test_malformed_is_empty(self):
        assert parse_games("Sorry, I cannot help with that.") == []
