"""Tests for clausediff.similarity module."""
from clausediff.models import Clause
from clausediff.similarity import (
    jaccard,
    section_match,
    similarity,
    text_similarity,
    word_set,
)


def _clause(title: str, content: str, section: str | None = "1") -> Clause:
    return Clause(
        id="clause-0",
        title=title,
        content=content,
        start_index=0,
        end_index=len(content),
        section_number=section,
    )


class TestWordSet:
    def test_lowercases_and_drops_short_words(self) -> None:
        assert word_set("The Rate of 5% is OK now") == frozenset({"the", "rate", "now"})

    def test_whitespace_tokenization_keeps_punctuation(self) -> None:
        assert word_set("rate: fixed.") == frozenset({"rate:", "fixed."})

    def test_empty(self) -> None:
        assert word_set("") == frozenset()


class TestJaccard:
    def test_identical(self) -> None:
        s = frozenset({"interest", "rate"})
        assert jaccard(s, s) == 1.0

    def test_partial_overlap(self) -> None:
        a = frozenset({"one", "two", "three"})
        b = frozenset({"two", "three", "four"})
        assert abs(jaccard(a, b) - 0.5) < 1e-9

    def test_both_empty_is_zero(self) -> None:
        assert jaccard(frozenset(), frozenset()) == 0.0

    def test_one_empty_is_zero(self) -> None:
        assert jaccard(frozenset({"rate"}), frozenset()) == 0.0

    def test_text_similarity(self) -> None:
        assert text_similarity("Interest Rate", "interest rate") == 1.0


class TestSectionMatch:
    def test_equal_labels(self) -> None:
        assert section_match(_clause("a", "b", "4.2"), _clause("c", "d", "4.2")) == 1.0

    def test_different_labels(self) -> None:
        assert section_match(_clause("a", "b", "4.2"), _clause("c", "d", "4.3")) == 0.0

    def test_one_label_absent(self) -> None:
        assert section_match(_clause("a", "b", "4.2"), _clause("c", "d", None)) == 0.0

    def test_both_unnumbered(self) -> None:
        assert section_match(_clause("a", "b", None), _clause("c", "d", None)) == 1.0


class TestSimilarity:
    def test_self_similarity_is_one(self) -> None:
        c = _clause("Interest Rate", "The interest rate shall be five percent.", "4.1")
        assert abs(similarity(c, c) - 1.0) < 1e-9

    def test_unnumbered_self_similarity_is_one(self) -> None:
        c = _clause("Full Document", "Plain prose without headings.", None)
        assert abs(similarity(c, c) - 1.0) < 1e-9

    def test_weights(self) -> None:
        a = _clause("Interest Rate", "alpha beta gamma delta", "4.1")
        b = _clause("Interest Rate", "alpha beta gamma omega", "7.1")
        # title 1.0 * 0.4 + section 0 + content 3/5 * 0.4
        assert abs(similarity(a, b) - (0.4 + 0.4 * 0.6)) < 1e-9

    def test_renumbered_clause_still_similar(self) -> None:
        a = _clause("Governing Law", "This Agreement is governed by New York law.", "9")
        b = _clause("Governing Law", "This Agreement is governed by New York law.", "10")
        assert abs(similarity(a, b) - 0.8) < 1e-9

    def test_same_heading_disjoint_body_is_exactly_point_six(self) -> None:
        a = _clause("Interest Rate", "five percent fixed", "2")
        b = _clause("Interest Rate", "seven percent floating", "2")
        # content {five, percent, fixed} vs {seven, percent, floating}: 1/5
        assert similarity(a, b) == 0.68
        c = _clause("Interest Rate", "floating margin above base", "2")
        assert similarity(a, c) == 0.6

    def test_disjoint_is_zero(self) -> None:
        a = _clause("Fees", "arrangement fee payable", "1")
        b = _clause("Notices", "delivered by courier", "2")
        assert similarity(a, b) == 0.0

    def test_bounds(self) -> None:
        clauses = [
            _clause("Interest Rate", "five percent fixed", "1"),
            _clause("Interest", "seven percent floating", None),
            _clause("", "", None),
            _clause("Default", "failure to pay", "1"),
        ]
        for a in clauses:
            for b in clauses:
                score = similarity(a, b)
                assert 0.0 <= score <= 1.0

    def test_symmetric(self) -> None:
        a = _clause("Interest Rate", "five percent fixed per annum", "4.1")
        b = _clause("Interest Rates", "seven percent fixed per annum", "4.2")
        assert similarity(a, b) == similarity(b, a)
