"""Tests for exact and near-miss benchmark matching."""

import pytest

from wod_parser_api.catalogue import CatalogueNotLoadedError
from wod_parser_api.parsers.benchmark_matcher import (
    CUSTOM_WORKOUT_CONFIDENCE,
    EXACT_MATCH_CONFIDENCE,
    BenchmarkMatcher,
    MatchOutcome,
    is_token_substitution,
    jaccard,
    max_edits_for,
    movement_vocabulary,
)


@pytest.fixture
def matcher(catalogue):
    return BenchmarkMatcher(catalogue)


class TestMatch:
    """Match outcomes."""

    def test_exact(self, matcher):
        outcome = matcher.match("Fran")
        assert outcome.kind == "exact"
        assert outcome.benchmark.name == "Fran"
        assert outcome.benchmark.category == "girls"

    @pytest.mark.parametrize("name", ["FRAN", "fran (Rx)", "  Fran!! "])
    def test_exact_ignores_case_and_annotations(self, matcher, name):
        assert matcher.match(name).benchmark.name == "Fran"

    def test_multi_word_exact(self, matcher):
        outcome = matcher.match("filthy-fifty")
        assert outcome.is_exact
        assert outcome.benchmark.category == "notables"

    def test_one_letter_typo(self, matcher):
        outcome = matcher.match("Fren")
        assert outcome.kind == "suggestion"
        assert outcome.suggestions[0] == "Fran"
        assert outcome.benchmark is None

    def test_extra_letter(self, matcher):
        outcome = matcher.match("Murphy")
        assert outcome.is_near_miss
        assert "Murph" in outcome.suggestions

    def test_token_substitution(self, matcher):
        outcome = matcher.match("Fight Gone Good")
        assert outcome.suggestions == ("Fight Gone Bad",)

    def test_ties_follow_catalogue_order(self, matcher):
        # Angie and Annie are both one edit away; Angie is listed first
        assert matcher.match("Anie").suggestions == ("Angie", "Annie")

    def test_suggestion_limit(self, catalogue):
        limited = BenchmarkMatcher(catalogue, suggestion_limit=1)
        assert limited.match("Anie").suggestions == ("Angie",)

    @pytest.mark.parametrize("name", ["Summer Sweat", "The Eight", "Just some words"])
    def test_no_match(self, matcher, name):
        assert matcher.match(name) == MatchOutcome()

    @pytest.mark.parametrize("name", [None, "", "!!!"])
    def test_empty_names(self, matcher, name):
        assert matcher.match(name).kind == "none"

    def test_requires_catalogue(self):
        with pytest.raises(CatalogueNotLoadedError):
            BenchmarkMatcher(None)


class TestThresholds:
    """Edit distance and token rules."""

    def test_max_edits(self):
        assert max_edits_for("fran") == 1
        assert max_edits_for("murph") == 1
        assert max_edits_for("elizabeth") == 2

    def test_token_substitution(self):
        assert is_token_substitution("fight gone good", "fight gone bad")
        assert not is_token_substitution("the eight", "the seven")
        assert not is_token_substitution("fran", "fren")
        assert not is_token_substitution("filthy forty five", "filthy fifty")


class TestRelatedBenchmark:
    """Resemblance for custom workouts."""

    def test_name_in_title(self, matcher):
        assert matcher.related_benchmark("Murph prep", "1 mile run\n100 pull-ups") == "Murph"

    def test_hyphenated_style(self, matcher):
        assert matcher.related_benchmark("Fran-style couplet", "15-12-9\nThrusters\nChest to bar") == "Fran"

    def test_movement_overlap(self, matcher):
        body = "For time:\n100 Pull-ups\n100 Push-ups\n100 Sit-ups\n100 Air squats"
        assert matcher.related_benchmark("Century Club", body) == "Angie"

    def test_unrelated(self, matcher):
        body = "AMRAP 20 minutes:\n10 Burpees\n15 KB Swings"
        assert matcher.related_benchmark("Summer Sweat", body) is None

    def test_vocabulary(self):
        vocab = movement_vocabulary("21-15-9 reps for time:\nThrusters (95/65 lb)\nPull-ups")
        assert vocab == frozenset({"thruster", "pull", "ups"})

    def test_jaccard(self):
        assert jaccard(frozenset({"a", "b"}), frozenset({"a", "b"})) == 1.0
        assert jaccard(frozenset(), frozenset({"a"})) == 0.0


class TestConfidence:
    """Fixed confidence scores."""

    def test_exact(self):
        outcome = MatchOutcome(kind="exact")
        assert BenchmarkMatcher.confidence(outcome, False, False, False) == EXACT_MATCH_CONFIDENCE

    def test_well_formed_custom(self):
        assert BenchmarkMatcher.confidence(MatchOutcome(), True, True, True) == CUSTOM_WORKOUT_CONFIDENCE

    @pytest.mark.parametrize("flags,expected", [
        ((True, False, True), 50),
        ((False, True, True), 50),
        ((False, False, True), 25),
        ((False, False, False), 0),
    ])
    def test_partial_structure(self, flags, expected):
        assert BenchmarkMatcher.confidence(MatchOutcome(), *flags) == expected
