"""Step-by-step breakdown of name similarity scores for debugging."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from core.config import get_settings
from utils.dedupe import (
    best_character_pair,
    blend_scores,
    common_word_count,
    normalize_name,
    shortcut_score,
    tokenize_name,
    word_similarity,
)

# Pairs seen in production rosters that the heuristic has to keep handling
REGRESSION_CASES: List[Tuple[str, str]] = [
    ("Eben Woodall", "Eben Woodbell"),
    ("Mathew Stevenson", "Matthew Stevenson"),
    ("Michell Ladue", "Michell LaDie"),
    ("Dan Howard", "Daniel Howard"),
    ("Brandon L.", "Brandon LaDue"),
    ("Eben W", "Eben Woodbell"),
]


@dataclass
class SimilarityBreakdown:
    """Intermediate values behind a single name comparison."""

    name_1: str
    name_2: str
    normalized_1: str
    normalized_2: str
    tokens_1: List[str]
    tokens_2: List[str]
    threshold: float
    shortcut: Optional[str] = None
    common_words: int = 0
    word_similarity: float = 0.0
    best_char_pair: Optional[Tuple[str, str]] = None
    max_char_similarity: float = 0.0
    score: float = 0.0

    @property
    def is_duplicate(self) -> bool:
        return self.score >= self.threshold


def explain_similarity(
    name_1: str,
    name_2: str,
    threshold: Optional[float] = None,
) -> SimilarityBreakdown:
    """
    Compute a name similarity score and keep every intermediate value.

    The resulting score is identical to ``name_similarity(name_1, name_2)``.
    """
    if threshold is None:
        threshold = get_settings().duplicate_threshold

    normalized_1 = normalize_name(name_1)
    normalized_2 = normalize_name(name_2)
    breakdown = SimilarityBreakdown(
        name_1=name_1,
        name_2=name_2,
        normalized_1=normalized_1,
        normalized_2=normalized_2,
        tokens_1=tokenize_name(normalized_1),
        tokens_2=tokenize_name(normalized_2),
        threshold=threshold,
    )

    shortcut = shortcut_score(normalized_1, normalized_2)
    if shortcut is not None:
        breakdown.shortcut = "exact" if normalized_1 == normalized_2 else "containment"
        breakdown.score = shortcut
        return breakdown

    breakdown.common_words = common_word_count(breakdown.tokens_1, breakdown.tokens_2)
    breakdown.word_similarity = word_similarity(breakdown.tokens_1, breakdown.tokens_2)
    breakdown.max_char_similarity, breakdown.best_char_pair = best_character_pair(
        breakdown.tokens_1, breakdown.tokens_2
    )
    breakdown.score = blend_scores(breakdown.word_similarity, breakdown.max_char_similarity)
    return breakdown


def run_regression_cases(threshold: Optional[float] = None) -> List[SimilarityBreakdown]:
    """Explain every pair in REGRESSION_CASES."""
    return [explain_similarity(a, b, threshold=threshold) for a, b in REGRESSION_CASES]


def verdict_label(breakdown: SimilarityBreakdown) -> str:
    return "DUPLICATE" if breakdown.is_duplicate else "NOT DUPLICATE"


def format_breakdown(breakdown: SimilarityBreakdown) -> str:
    """Render a breakdown as a multi-line text report."""
    lines = [
        f'"{breakdown.name_1}" vs "{breakdown.name_2}"',
        f'  Normalized: "{breakdown.normalized_1}" vs "{breakdown.normalized_2}"',
    ]
    if breakdown.shortcut:
        lines.append(f"  Shortcut: {breakdown.shortcut}")
    else:
        lines.append(f"  Words 1: [{', '.join(breakdown.tokens_1)}]")
        lines.append(f"  Words 2: [{', '.join(breakdown.tokens_2)}]")
        total = max(len(breakdown.tokens_1), len(breakdown.tokens_2))
        lines.append(
            f"  Word similarity: {breakdown.common_words}/{total} = "
            f"{breakdown.word_similarity:.3f}"
        )
        if breakdown.best_char_pair:
            word_1, word_2 = breakdown.best_char_pair
            lines.append(
                f'  Character similarity: "{word_1}" vs "{word_2}" = '
                f"{breakdown.max_char_similarity:.3f}"
            )
        else:
            lines.append("  Character similarity: no tokens long enough (0.000)")
    lines.append(f"  Similarity: {breakdown.score:.3f}")
    lines.append(
        f"  Duplicate (>= {breakdown.threshold:.2f}): {verdict_label(breakdown)}"
    )
    return "\n".join(lines)


__all__ = [
    "REGRESSION_CASES",
    "SimilarityBreakdown",
    "explain_similarity",
    "run_regression_cases",
    "verdict_label",
    "format_breakdown",
]
