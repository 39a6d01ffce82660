"""Heuristic similarity for freeform person names.

Used to decide whether two roster names ("Eben Woodall" / "Eben Woodbell",
"Dan Howard" / "Daniel Howard") most likely belong to the same person.
The score blends whole-name containment, token overlap and a cheap
per-token character comparison. It is intentionally simple: no nickname
tables, no optimal token pairing.
"""
from __future__ import annotations

import re
import unicodedata
from typing import Optional, Sequence

from rapidfuzz.distance import Hamming, Levenshtein

from core.config import get_settings
from core.exceptions import InvalidNameError

# \s stays Unicode-aware so non-breaking spaces still split words
NON_WORD = re.compile(r"[^A-Za-z0-9_\s]")
WHITESPACE = re.compile(r"\s+")
NON_ASCII_ALNUM = re.compile(r"[^a-z0-9\s]")

EXACT_MATCH_SCORE = 1.0
CONTAINMENT_SCORE = 0.9
WORD_WEIGHT = 0.6
CHARACTER_WEIGHT = 0.4
EDIT_WEIGHT = 0.6
TOKEN_SET_WEIGHT = 0.4


def _require_str(value: object, label: str) -> str:
    if not isinstance(value, str):
        raise InvalidNameError(
            f"{label} must be a string, got {type(value).__name__}"
        )
    return value


def normalize_name(name: str) -> str:
    """
    Return a lowercased, punctuation-free, whitespace-collapsed name.

    Args:
        name: Raw display name.

    Returns:
        Normalized name ("" for names with no word characters).

    Raises:
        InvalidNameError: If name is not a string.
    """
    name = _require_str(name, "name")
    cleaned = NON_WORD.sub("", name.lower())
    return WHITESPACE.sub(" ", cleaned).strip()


def tokenize_name(normalized: str) -> list[str]:
    """Split an already-normalized name into its word tokens."""
    return normalized.split(" ")


def _tokens_overlap(word_1: str, word_2: str) -> bool:
    # Equal tokens are a prefix of each other
    return word_1.startswith(word_2) or word_2.startswith(word_1)


def _count_common_words(tokens_1: Sequence[str], tokens_2: Sequence[str]) -> int:
    common = 0
    for word_1 in tokens_1:
        for word_2 in tokens_2:
            if _tokens_overlap(word_1, word_2):
                common += 1
                break
    return common


def common_word_count(tokens_1: Sequence[str], tokens_2: Sequence[str]) -> int:
    """
    Count tokens that find an equal or prefix partner in the other name.

    Each token takes the first qualifying partner; partners are not consumed,
    so two tokens may both pair with the same one. The scan runs in both
    directions and the smaller count wins, which keeps the result symmetric.
    """
    return min(
        _count_common_words(tokens_1, tokens_2),
        _count_common_words(tokens_2, tokens_1),
    )


def word_similarity(tokens_1: Sequence[str], tokens_2: Sequence[str]) -> float:
    """Share of tokens found in the other name, over the larger token count."""
    total = max(len(tokens_1), len(tokens_2))
    if not total:
        return 0.0
    return common_word_count(tokens_1, tokens_2) / total


def character_similarity(word_1: str, word_2: str) -> float:
    """
    Position-wise similarity of two tokens.

    Mismatches over the length of the shorter token plus the length
    difference, divided by the longer length, subtracted from one.
    "woodall" vs "woodbell" scores 1 - 3/8.
    """
    return Hamming.normalized_similarity(word_1, word_2, pad=True)


def best_character_pair(
    tokens_1: Sequence[str],
    tokens_2: Sequence[str],
    min_length: Optional[int] = None,
) -> tuple[float, Optional[tuple[str, str]]]:
    """
    Find the most similar token pair among tokens of at least min_length.

    Returns:
        (score, (token_1, token_2)), or (0.0, None) when no pair qualifies.
    """
    if min_length is None:
        min_length = get_settings().min_char_token_length

    best_score = 0.0
    best_pair: Optional[tuple[str, str]] = None
    for word_1 in tokens_1:
        if len(word_1) < min_length:
            continue
        for word_2 in tokens_2:
            if len(word_2) < min_length:
                continue
            score = character_similarity(word_1, word_2)
            if score > best_score:
                best_score = score
                best_pair = (word_1, word_2)
    return best_score, best_pair


def blend_scores(word_score: float, char_score: float) -> float:
    """Weighted blend of word and character similarity, clamped to [0, 1]."""
    combined = word_score * WORD_WEIGHT + char_score * CHARACTER_WEIGHT
    return max(0.0, min(1.0, combined))


def shortcut_score(normalized_1: str, normalized_2: str) -> Optional[float]:
    """
    Score for identical or contained names, None when neither applies.

    Containment is plain substring search, so a short name can match a run
    of characters inside a longer one ("an" inside "dan howard").
    """
    if normalized_1 == normalized_2:
        return EXACT_MATCH_SCORE
    if normalized_1 in normalized_2 or normalized_2 in normalized_1:
        return CONTAINMENT_SCORE
    return None


def name_similarity(name_1: str, name_2: str) -> float:
    """
    Return a similarity score between two raw names (0.0-1.0).

    Args:
        name_1: First name, not pre-normalized.
        name_2: Second name, not pre-normalized.

    Returns:
        1.0 for identical normalized names, 0.9 when one contains the other,
        otherwise 0.6 * word similarity + 0.4 * best character similarity.

    Raises:
        InvalidNameError: If either name is not a string.
    """
    normalized_1 = normalize_name(_require_str(name_1, "name_1"))
    normalized_2 = normalize_name(_require_str(name_2, "name_2"))

    shortcut = shortcut_score(normalized_1, normalized_2)
    if shortcut is not None:
        return shortcut

    tokens_1 = tokenize_name(normalized_1)
    tokens_2 = tokenize_name(normalized_2)
    char_score, _ = best_character_pair(tokens_1, tokens_2)
    return blend_scores(word_similarity(tokens_1, tokens_2), char_score)


def is_duplicate_name(
    name_1: str,
    name_2: str,
    threshold: Optional[float] = None,
) -> bool:
    """
    Decide whether two names likely refer to the same person.

    Args:
        name_1: First name.
        name_2: Second name.
        threshold: Minimum score for a duplicate; defaults to the
            NAME_MATCH_THRESHOLD setting (0.7). Lower values flag more pairs.

    Returns:
        True when the similarity score is at or above threshold.
    """
    if threshold is None:
        threshold = get_settings().duplicate_threshold
    return name_similarity(name_1, name_2) >= threshold


# =============================================================================
# Edit-distance scoring
# =============================================================================


def fold_name(name: str) -> str:
    """
    Normalize a name for edit-distance scoring.

    Unlike normalize_name, accents are folded onto their base letter
    ("José" -> "jose") and underscores are dropped.

    Raises:
        InvalidNameError: If name is not a string.
    """
    name = _require_str(name, "name")
    decomposed = unicodedata.normalize("NFD", name.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    cleaned = NON_ASCII_ALNUM.sub("", stripped)
    return WHITESPACE.sub(" ", cleaned).strip()


def token_set_similarity(folded_1: str, folded_2: str) -> float:
    """Jaccard similarity of the distinct tokens of two folded names."""
    set_1 = set(folded_1.split(" "))
    set_2 = set(folded_2.split(" "))
    union = set_1 | set_2
    if not union:
        return 0.0
    return len(set_1 & set_2) / len(union)


def levenshtein_similarity(name_1: str, name_2: str) -> float:
    """
    Edit-distance based similarity between two raw names (0.0-1.0).

    0.6 * (1 - levenshtein / longer length) + 0.4 * token-set Jaccard,
    both computed on folded names. Token order only affects the edit part,
    so "Smith John" still earns the full token-set share against
    "John Smith".

    Raises:
        InvalidNameError: If either name is not a string.
    """
    folded_1 = fold_name(_require_str(name_1, "name_1"))
    folded_2 = fold_name(_require_str(name_2, "name_2"))

    max_len = max(len(folded_1), len(folded_2)) or 1
    edit_score = 1 - Levenshtein.distance(folded_1, folded_2) / max_len
    token_score = token_set_similarity(folded_1, folded_2)
    return edit_score * EDIT_WEIGHT + token_score * TOKEN_SET_WEIGHT


__all__ = [
    "normalize_name",
    "tokenize_name",
    "common_word_count",
    "word_similarity",
    "character_similarity",
    "best_character_pair",
    "blend_scores",
    "shortcut_score",
    "name_similarity",
    "is_duplicate_name",
    "fold_name",
    "token_set_similarity",
    "levenshtein_similarity",
    "EXACT_MATCH_SCORE",
    "CONTAINMENT_SCORE",
]
