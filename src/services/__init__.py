"""Roster services built on the name matcher.

This module provides:
- Duplicate grouping over a salesperson roster
- Keeper selection and merge planning (report only, nothing is written)
- Best-match lookup of a name in a roster
- Similarity breakdowns for debugging scores
"""
from __future__ import annotations

from .salesperson_dedupe import (
    RosterEntry,
    DuplicateGroup,
    MergePlan,
    RosterMatch,
    RosterLoadStats,
    MatchMethod,
    group_duplicates,
    group_duplicates_transitive,
    choose_keeper,
    choose_keeper_by_activity,
    plan_merges,
    find_inactive_candidates,
    find_best_match,
    load_roster,
)
from .similarity_report import (
    REGRESSION_CASES,
    SimilarityBreakdown,
    explain_similarity,
    run_regression_cases,
    format_breakdown,
)

__all__ = [
    # Roster dedupe
    "RosterEntry",
    "DuplicateGroup",
    "MergePlan",
    "RosterMatch",
    "RosterLoadStats",
    "MatchMethod",
    "group_duplicates",
    "group_duplicates_transitive",
    "choose_keeper",
    "choose_keeper_by_activity",
    "plan_merges",
    "find_inactive_candidates",
    "find_best_match",
    "load_roster",
    # Diagnostics
    "REGRESSION_CASES",
    "SimilarityBreakdown",
    "explain_similarity",
    "run_regression_cases",
    "format_breakdown",
]
