"""
Tests for feedback scoring, mask parsing and candidate filtering.
"""

import pytest

from nerdle_solver.mask import (
    Mask,
    MaskParseError,
    filter_candidates,
    matches,
    normalize_guess,
    parse_mask,
    score,
)


class TestScore:
    def test_basic(self):
        m = score("abc", "cbd")
        assert m == Mask(
            correct=frozenset({(1, "b")}),
            present=frozenset({(2, "c")}),
            absent=frozenset({(0, "a")}),
        )

    def test_repeated_guess_letter_single_in_truth(self):
        # two a's guessed, one a in the answer: one purple, one black
        m = score("aab", "bca")
        assert m.present == frozenset({(0, "a"), (2, "b")})
        assert m.absent == frozenset({(1, "a")})
        assert m.correct == frozenset()

    def test_green_consumes_before_purple(self):
        m = score("aa", "ba")
        assert m.correct == frozenset({(1, "a")})
        assert m.absent == frozenset({(0, "a")})

    def test_pattern_and_guess(self):
        m = score("12+3=15", "12+3=15")
        assert m.pattern == (2,) * 7
        assert m.guess == "12+3=15"
        assert m.is_solved

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            score("1+2=3", "12+3=15")

    def test_truth_always_matches_its_own_mask(self, micro_corpus):
        for guess in micro_corpus[::9]:
            for truth in micro_corpus:
                assert matches(truth, score(guess, truth)), (guess, truth)


class TestMatches:
    def test_correct_must_hold(self):
        m = score("abc", "cbd")
        assert matches("cbd", m)
        assert not matches("cxd", m)

    def test_purple_not_at_its_position(self):
        m = score("abc", "cbd")
        assert not matches("dbc", m)

    def test_counts_duplicates(self):
        m = score("aabxy", "bcazz")
        assert matches("bcazz", m)
        # a second 'a' is ruled out by the black 'a'
        assert not matches("bcaaz", m)

    def test_purple_needs_an_occurrence(self):
        m = score("aab", "bca")
        assert matches("cba", m)
        assert not matches("cca", m)

    def test_black_letter_elsewhere_is_fine_when_claimed(self):
        # the absent 'a' doesn't forbid the 'a' that a purple accounts for
        m = score("aab", "bca")
        assert matches("bca", m)

    def test_wrong_length(self):
        assert not matches("abcd", score("abc", "cbd"))


class TestParseMask:
    def test_codes(self):
        m = parse_mask("1+2=3", "2P0 g")
        assert m.correct == frozenset({(0, "1"), (4, "3")})
        assert m.present == frozenset({(1, "+")})
        assert m.absent == frozenset({(2, "2"), (3, "=")})
        assert m.pattern == (2, 1, 0, 0, 2)

    @pytest.mark.parametrize("text", ["22222", "CcGgG", "ccccc"])
    def test_all_correct_spellings(self, text):
        assert parse_mask("1+2=3", text).is_solved

    @pytest.mark.parametrize("text", ["11111", "IiPpI"])
    def test_all_present_spellings(self, text):
        assert parse_mask("1+2=3", text).pattern == (1,) * 5

    @pytest.mark.parametrize("text", ["00000", "NnBbR", "r    "])
    def test_all_absent_spellings(self, text):
        assert parse_mask("1+2=3", text).pattern == (0,) * 5

    def test_normalizes_power_aliases(self):
        m = parse_mask("4s=16", "22222")
        assert (1, "²") in m.correct
        assert m.guess == "4²=16"

    def test_length_mismatch(self):
        with pytest.raises(MaskParseError):
            parse_mask("1+2=3", "2222")

    def test_unknown_code(self):
        with pytest.raises(MaskParseError):
            parse_mask("1+2=3", "2222x")

    def test_matches_score(self):
        assert parse_mask("1+2=3", "GGBGB") == Mask.from_pattern("1+2=3", (2, 2, 0, 2, 0))


def test_normalize_guess():
    assert normalize_guess(" 12s-4c=80 ") == "12²-4³=80"


class TestFilter:
    def test_monotone_and_idempotent(self, micro_corpus):
        mask = score("1+2=3", "2+1=3")
        once = filter_candidates(micro_corpus, mask)
        twice = filter_candidates(once, mask)
        assert once == twice
        assert len(once) <= len(micro_corpus)
        assert "2+1=3" in once
        assert "1+2=3" not in once

    def test_keeps_order(self, micro_corpus):
        mask = score("9-8=1", "1+2=3")
        kept = filter_candidates(micro_corpus, mask)
        assert kept == [eq for eq in micro_corpus if eq in set(kept)]
