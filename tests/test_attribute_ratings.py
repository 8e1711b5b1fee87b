import pytest

from app.models.questionnaire import ATTRIBUTES_TO_RATE, RatedAttribute, default_rated_attributes
from app.services.attribute_ratings import (
    RatingSource,
    apply_ratings,
    derive_strengths,
    derive_weaknesses,
    parse_attribute_ratings,
    rating_source,
    resolve_ratings,
    serialize_attribute_ratings,
    split_name_list,
)

from conftest import make_profile


def attrs(**ratings):
    return [RatedAttribute(name=n.replace("_", " "), rating=r) for n, r in ratings.items()]


# -------------------- serialize --------------------

def test_serialize_keeps_catalog_order():
    text = serialize_attribute_ratings(default_rated_attributes())
    assert text.startswith("Crimp Strength: 3, Pinch Strength: 3, Pocket Strength: 3")
    assert text.endswith("Flexibility: 3, Mental Strength: 3")
    assert text.count(", ") == len(ATTRIBUTES_TO_RATE) - 1


def test_strengths_and_weaknesses_from_ratings():
    rated = attrs(Power=5, Endurance=1, Flexibility=4, Strength=2, Core_Strength=3)
    assert derive_strengths(rated) == "Power, Flexibility"
    assert derive_weaknesses(rated) == "Endurance, Strength"


def test_no_strengths_is_empty_string():
    assert derive_strengths(default_rated_attributes()) == ""
    assert derive_weaknesses(default_rated_attributes()) == ""


# -------------------- parse --------------------

def test_parse_basic():
    assert parse_attribute_ratings("Crimp Strength: 4, Power: 5") == {"Crimp Strength": 4, "Power": 5}


def test_parse_skips_malformed_entries():
    assert parse_attribute_ratings("Power 5, : 3, Technique: 4") == {"Technique": 4}


@pytest.mark.parametrize("text", ["", ",", "Power", "Power: high", "Power: 4.5", ":::"])
def test_parse_never_raises(text):
    result = parse_attribute_ratings(text)
    assert "Power" not in result


def test_parse_clamps_out_of_range_values():
    assert parse_attribute_ratings("Power: 9, Endurance: 0, Flexibility: -3") == {
        "Power": 5,
        "Endurance": 1,
        "Flexibility": 1,
    }


def test_parse_tolerates_missing_spaces():
    assert parse_attribute_ratings("Power:4,Endurance:2") == {"Power": 4, "Endurance": 2}


def test_split_name_list_trims_and_drops_blanks():
    assert split_name_list(" Power ,  Core Strength,, ") == ["Power", "Core Strength"]
    assert split_name_list("") == []


# -------------------- precedence --------------------

def test_numeric_ratings_win_over_legacy():
    profile = make_profile(attribute_ratings="Power: 5, Endurance: 1", perceived_strengths="Technique")
    assert rating_source(profile) is RatingSource.NUMERIC
    assert resolve_ratings(profile) == {"Power": 5, "Endurance": 1}


def test_numeric_ratings_ignore_unknown_attributes():
    profile = make_profile(attribute_ratings="Power: 5, Technique: 4")
    assert resolve_ratings(profile) == {"Power": 5}


def test_legacy_fallback_rates_every_attribute():
    profile = make_profile(
        attribute_ratings="",
        perceived_strengths="Power, Core Strength",
        perceived_weaknesses="Endurance",
    )
    assert rating_source(profile) is RatingSource.LEGACY
    ratings = resolve_ratings(profile)
    assert set(ratings) == set(ATTRIBUTES_TO_RATE)
    assert ratings["Power"] == 4
    assert ratings["Core Strength"] == 4
    assert ratings["Endurance"] == 2
    others = [r for name, r in ratings.items() if name not in ("Power", "Core Strength", "Endurance")]
    assert others and all(r == 3 for r in others)


def test_legacy_name_in_both_lists_counts_as_strength():
    profile = make_profile(perceived_strengths="Power", perceived_weaknesses="Power, Endurance")
    ratings = resolve_ratings(profile)
    assert ratings["Power"] == 4
    assert ratings["Endurance"] == 2


def test_nothing_stored_resolves_to_empty_mapping():
    profile = make_profile()
    assert rating_source(profile) is RatingSource.NONE
    assert resolve_ratings(profile) == {}
    assert resolve_ratings(None) == {}


def test_apply_ratings_keeps_unmapped_values():
    current = apply_ratings(default_rated_attributes(), {"Flexibility": 5})
    updated = apply_ratings(current, {"Power": 1})
    by_name = {a.name: a.rating for a in updated}
    assert by_name["Flexibility"] == 5
    assert by_name["Power"] == 1
    assert by_name["Endurance"] == 3


def test_rating_is_clamped_on_write():
    attr = RatedAttribute(name="Power", rating=3)
    attr.rating = 12
    assert attr.rating == 5
    attr.rating = -1
    assert attr.rating == 1
    assert RatedAttribute(name="Power", rating=0).rating == 1


def test_unknown_attribute_name_is_rejected():
    with pytest.raises(ValueError):
        RatedAttribute(name="Technique", rating=3)
