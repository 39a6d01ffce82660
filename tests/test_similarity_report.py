"""Tests for similarity breakdowns used in debugging."""
from __future__ import annotations

import pytest

from services.similarity_report import (
    REGRESSION_CASES,
    explain_similarity,
    format_breakdown,
    run_regression_cases,
)
from utils.dedupe import name_similarity


@pytest.mark.parametrize(
    "name_1,name_2",
    REGRESSION_CASES + [("jo jon", "Jonathan Smith"), ("", ""), ("!!!", "Bob")],
)
def test_breakdown_score_matches_similarity(name_1, name_2):
    """The breakdown never disagrees with the plain score."""
    assert explain_similarity(name_1, name_2).score == name_similarity(name_1, name_2)


def test_breakdown_exact_shortcut():
    breakdown = explain_similarity("Eben Woodall", "eben  woodall")

    assert breakdown.shortcut == "exact"
    assert breakdown.score == 1.0
    assert breakdown.best_char_pair is None


def test_breakdown_containment_shortcut():
    breakdown = explain_similarity("Brandon L.", "Brandon LaDue")

    assert breakdown.shortcut == "containment"
    assert breakdown.normalized_1 == "brandon l"
    assert breakdown.score == 0.9
    assert breakdown.is_duplicate


def test_breakdown_blended():
    breakdown = explain_similarity("Michell Ladue", "Michell LaDie")

    assert breakdown.shortcut is None
    assert breakdown.tokens_1 == ["michell", "ladue"]
    assert breakdown.tokens_2 == ["michell", "ladie"]
    assert breakdown.common_words == 1
    assert breakdown.word_similarity == 0.5
    assert breakdown.best_char_pair == ("michell", "michell")
    assert breakdown.max_char_similarity == 1.0
    assert breakdown.is_duplicate


def test_breakdown_threshold_override():
    breakdown = explain_similarity("Michell Ladue", "Michell LaDie", threshold=0.8)

    assert breakdown.threshold == 0.8
    assert not breakdown.is_duplicate


def test_regression_cases_all_duplicates():
    """Every known pair is flagged at the default threshold."""
    results = run_regression_cases()

    assert len(results) == len(REGRESSION_CASES)
    assert all(r.is_duplicate for r in results)


def test_format_breakdown():
    text = format_breakdown(explain_similarity("Eben Woodall", "Eben Woodbell"))

    assert '"Eben Woodall" vs "Eben Woodbell"' in text
    assert "Words 1: [eben, woodall]" in text
    assert "Word similarity: 1/2 = 0.500" in text
    assert 'Character similarity: "eben" vs "eben" = 1.000' in text
    assert "Similarity: 0.700" in text
    assert "DUPLICATE" in text


def test_format_breakdown_without_character_pair():
    text = format_breakdown(explain_similarity("Al Bo", "Cy Di"))

    assert "no tokens long enough" in text
    assert "NOT DUPLICATE" in text
