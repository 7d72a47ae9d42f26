"""Tests for the curated table matcher."""

from macro_tracker.domain.nutrition import MacroProfile
from macro_tracker.services.curated import CURATED_FOODS, CuratedMatcher
from macro_tracker.services.normalize import normalize_name


def test_fuzzy_match_reports_edit_distance() -> None:
    matcher = CuratedMatcher()

    one_edit = matcher.find_match("brocoli")
    two_edits = matcher.find_match("chckn breast")

    assert one_edit is not None
    assert one_edit.distance == 1
    assert two_edits is not None
    assert two_edits.key == "chicken breast"
    assert two_edits.distance == 2


def test_every_curated_key_matches_itself_exactly() -> None:
    matcher = CuratedMatcher()
    for key in CURATED_FOODS:
        match = matcher.find_match(normalize_name(key))
        assert match is not None
        assert match.key == key
        assert match.exact


def test_misspelling_matches_curated_key() -> None:
    match = CuratedMatcher().find_match("chiken")

    assert match is not None
    assert match.key == "chicken"
    assert not match.exact
    assert match.distance == 1
    assert match.per_100g == MacroProfile(calories=165, protein=31, carbs=0, fat=3.6)


def test_single_edit_on_longer_keys_matches() -> None:
    matcher = CuratedMatcher()
    for typo, key in [
        ("salmn", "salmon"),
        ("brocoli", "broccoli"),
        ("bananna", "banana"),
        ("avocadoo", "avocado"),
    ]:
        match = matcher.find_match(typo)
        assert match is not None, typo
        assert match.key == key


def test_equidistant_candidates_are_ambiguous() -> None:
    # "pean" is one edit from both "pear" and "peas".
    assert CuratedMatcher().find_match("pean") is None


def test_short_words_need_high_similarity() -> None:
    # Two edits on a four-letter word is only 50% similar.
    assert CuratedMatcher().find_match("tufo") is None
    assert CuratedMatcher().find_match("xyz") is None


def test_distance_above_limit_does_not_match() -> None:
    assert CuratedMatcher().find_match("chcknbrst") is None


def test_empty_name_has_no_match() -> None:
    assert CuratedMatcher().find_match("") is None


def test_custom_table_and_thresholds() -> None:
    matcher = CuratedMatcher(
        table={"kale": MacroProfile(49, 4.3, 8.8, 0.9)},
        max_distance=1,
        min_similarity=0.5,
    )

    assert matcher.find_match("kal") is not None
    assert matcher.find_match("kl") is None
