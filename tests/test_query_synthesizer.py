import random

from moodtrip.keyword_tables import GENERIC_QUERY, PREMIUM_ADJECTIVES
from moodtrip.query_synthesizer import (
    detect_season,
    detect_social_context,
    matches_keyword,
    synthesize,
    synthesize_premium,
)


def test_location_with_season_and_social_context():
    query = synthesize("Ski week in Switzerland with the kids this winter")
    assert query == "family enjoying switzerland alps winter snow"


def test_location_without_context_uses_default_people_phrase():
    assert synthesize("Exploring Lisbon") == "people enjoying lisbon portugal"


def test_specific_place_beats_country():
    assert "amalfi coast" in synthesize("Driving the Amalfi coast in Italy")


def test_activity_match_is_season_adjusted():
    assert synthesize("Hiking trip in the autumn") == "hiking mountain trail autumn colors"


def test_fallback_to_meaningful_words():
    assert synthesize("Quiet cabin weekend somewhere remote") == "quiet cabin weekend travel destination"


def test_stopwords_and_short_words_are_skipped():
    assert synthesize("the and for an xyzzy") == "xyzzy travel destination"


def test_generic_fallback():
    assert synthesize("a b c") == GENERIC_QUERY
    assert synthesize("") == GENERIC_QUERY


def test_deterministic():
    prompt = "Romantic honeymoon in Santorini in summer"
    assert synthesize(prompt) == synthesize(prompt)
    assert synthesize(prompt) == "couple enjoying santorini greece summer sunshine"


def test_premium_appends_one_adjective():
    query = synthesize_premium("Hiking in Patagonia", random.Random(3))
    base = synthesize("Hiking in Patagonia")
    assert query.startswith(base + " ")
    assert query[len(base) + 1:] in PREMIUM_ADJECTIVES


def test_keyword_matching_respects_word_boundaries():
    assert not matches_keyword("a nicer trip", "nice")
    assert matches_keyword("mountains everywhere", "mountain", inflected=True)
    assert not matches_keyword("mountains everywhere", "mountain")


def test_context_detection():
    assert detect_season("Christmas markets") == "winter"
    assert detect_season("a trip") is None
    assert detect_social_context("bachelorette weekend") == "friends"
    assert detect_social_context("Solo trip") == "solo"


def test_inflected_matching_is_bounded():
    assert matches_keyword("sandy beaches", "beach", inflected=True)
    assert matches_keyword("two days skiing", "ski", inflected=True)
    assert not matches_keyword("blue skies", "ski", inflected=True)
    assert not matches_keyword("a long article", "art", inflected=True)


def test_lookalike_words_do_not_imply_a_season():
    prompt = "Lazy week under blue skies on Santorini beaches"
    assert detect_season(prompt) is None
    assert synthesize(prompt) == "people enjoying santorini greece"

    falls = "Road trip with my partner to see the Niagara Falls"
    assert detect_season(falls) is None
    assert synthesize(falls) == "road trip scenic drive"
    assert detect_season("Marching band festival") is None
