"""Utility helpers for name normalization and deduplication."""
from .dedupe import (
    normalize_name,
    tokenize_name,
    word_similarity,
    character_similarity,
    name_similarity,
    is_duplicate_name,
)

__all__ = [
    "normalize_name",
    "tokenize_name",
    "word_similarity",
    "character_similarity",
    "name_similarity",
    "is_duplicate_name",
]
