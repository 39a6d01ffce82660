"""Duplicate detection and merge planning for salesperson rosters.

Everything here works on in-memory roster entries and only produces
reports; applying a merge plan is left to whoever owns the records.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from core.config import get_settings
from core.exceptions import RosterLoadError
from core.logging_config import ContextLogger, get_context_logger, get_logger, log_comparison
from utils.dedupe import levenshtein_similarity, name_similarity, normalize_name

LOGGER = get_logger(__name__)

NAME_COL = "name"
ID_COL = "id"


@dataclass
class RosterEntry:
    """A salesperson record as far as deduplication is concerned."""

    id: int
    name: str
    telegram_id: Optional[str] = None
    active_estimates: int = 0
    warning_count: int = 0
    is_active: bool = True

    @property
    def has_telegram(self) -> bool:
        return bool(self.telegram_id and self.telegram_id.strip())


@dataclass
class DuplicateGroup:
    """Entries judged to be the same person. The first entry is the anchor."""

    entries: List[RosterEntry]
    score: float

    @property
    def names(self) -> List[str]:
        return [entry.name for entry in self.entries]


@dataclass
class MergePlan:
    """Suggested keeper for a duplicate group and the entries to fold into it."""

    keeper: RosterEntry
    duplicates: List[RosterEntry] = field(default_factory=list)
    score: float = 0.0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "keeper_id": self.keeper.id,
            "keeper_name": self.keeper.name,
            "duplicate_ids": [d.id for d in self.duplicates],
            "score": round(self.score, 3),
        }


@dataclass
class RosterMatch:
    entry: RosterEntry
    score: float


@dataclass
class RosterLoadStats:
    rows_processed: int = 0
    rows_loaded: int = 0
    rows_skipped: int = 0
    ids_assigned: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "rows_processed": self.rows_processed,
            "rows_loaded": self.rows_loaded,
            "rows_skipped": self.rows_skipped,
            "ids_assigned": self.ids_assigned,
        }


class MatchMethod(str, Enum):
    """How duplicate groups are formed."""

    BLENDED = "blended"
    LEVENSHTEIN = "levenshtein"


def _roster_logger(roster: Optional[str]) -> logging.Logger | ContextLogger:
    if roster is None:
        return LOGGER
    return get_context_logger(__name__, roster=roster)


def _name_order(entries: Sequence[RosterEntry]) -> List[RosterEntry]:
    # Case-insensitive, like ORDER BY name on the roster table
    return sorted(entries, key=lambda e: (e.name.casefold(), e.name))


def group_duplicates(
    entries: Sequence[RosterEntry],
    threshold: Optional[float] = None,
    near_miss: Optional[float] = None,
    roster: Optional[str] = None,
) -> List[DuplicateGroup]:
    """
    Group roster entries whose names look like the same person.

    Entries are visited in case-insensitive name order. Each entry not yet
    grouped becomes an anchor and collects every later ungrouped entry
    scoring at or above threshold against the anchor itself (not against
    other members). Grouped entries are tracked by position, so duplicate
    ids in the input do not hide anyone.

    Args:
        entries: Roster entries to examine.
        threshold: Duplicate threshold; defaults to NAME_MATCH_THRESHOLD.
        near_miss: Lower bound for logging almost-duplicates; defaults to
            NAME_MATCH_NEAR_MISS.
        roster: Roster label attached to log records.

    Returns:
        Groups with at least two entries, in discovery order.
    """
    settings = get_settings()
    if threshold is None:
        threshold = settings.duplicate_threshold
    if near_miss is None:
        near_miss = settings.near_miss_threshold

    logger = _roster_logger(roster)
    ordered = _name_order(entries)
    grouped = [False] * len(ordered)
    groups: List[DuplicateGroup] = []

    for i, anchor in enumerate(ordered):
        if grouped[i]:
            continue

        positions = [i]
        for j in range(i + 1, len(ordered)):
            if grouped[j]:
                continue

            other = ordered[j]
            score = name_similarity(anchor.name, other.name)
            if score >= threshold:
                positions.append(j)
            elif score >= near_miss:
                log_comparison(logger, anchor.name, other.name, score, threshold)

        if len(positions) > 1:
            for position in positions:
                grouped[position] = True
            members = [ordered[p] for p in positions]
            group_score = name_similarity(members[0].name, members[1].name)
            groups.append(DuplicateGroup(entries=members, score=group_score))
            logger.info(
                f"Found duplicate group: {', '.join(m.name for m in members)} "
                f"(similarity: {group_score:.2f})",
                extra={"entry_id": anchor.id},
            )

    logger.info(f"Found {len(groups)} duplicate groups among {len(entries)} entries")
    return groups


def group_duplicates_transitive(
    entries: Sequence[RosterEntry],
    threshold: Optional[float] = None,
    roster: Optional[str] = None,
) -> List[DuplicateGroup]:
    """
    Group entries by edit-distance similarity, following chains of matches.

    An entry joins a group when it scores at or above threshold against any
    member already in it, and the roster is rescanned until no more entries
    join. "A ~ B" and "B ~ C" therefore put A, B and C together even when
    A and C alone would not match.

    Args:
        entries: Roster entries to examine.
        threshold: Minimum levenshtein_similarity; defaults to
            NAME_MATCH_LEVENSHTEIN_THRESHOLD (0.86).
        roster: Roster label attached to log records.

    Returns:
        Groups with at least two entries, in discovery order. The first
        entry of each group is the one the group started from.
    """
    if threshold is None:
        threshold = get_settings().levenshtein_threshold

    logger = _roster_logger(roster)
    ordered = _name_order(entries)
    visited = [False] * len(ordered)
    groups: List[DuplicateGroup] = []

    for i, anchor in enumerate(ordered):
        if visited[i]:
            continue
        visited[i] = True
        members = [anchor]

        expanded = True
        while expanded:
            expanded = False
            for j, candidate in enumerate(ordered):
                if visited[j]:
                    continue
                if any(
                    levenshtein_similarity(member.name, candidate.name) >= threshold
                    for member in members
                ):
                    members.append(candidate)
                    visited[j] = True
                    expanded = True

        if len(members) > 1:
            group_score = levenshtein_similarity(members[0].name, members[1].name)
            groups.append(DuplicateGroup(entries=members, score=group_score))
            logger.info(
                f"Found duplicate group: {', '.join(m.name for m in members)} "
                f"(edit similarity: {group_score:.2f})",
                extra={"entry_id": anchor.id},
            )

    logger.info(f"Found {len(groups)} transitive duplicate groups among {len(entries)} entries")
    return groups


def _keeper_sort_key(entry: RosterEntry) -> tuple:
    return (
        not entry.has_telegram,
        -entry.active_estimates,
        -entry.warning_count,
        entry.id,
    )


def choose_keeper(entries: Sequence[RosterEntry]) -> RosterEntry:
    """
    Pick the record to keep from a duplicate group.

    Priority: has a Telegram id, then more active estimates, then more
    warnings (a sign of real activity), then the lowest id.
    """
    if not entries:
        raise ValueError("Cannot choose a keeper from an empty group")
    return sorted(entries, key=_keeper_sort_key)[0]


def _activity_score(entry: RosterEntry) -> int:
    return (1000 if entry.has_telegram else 0) + entry.active_estimates


def choose_keeper_by_activity(entries: Sequence[RosterEntry]) -> RosterEntry:
    """
    Pick the keeper by a single activity score.

    A Telegram id is worth 1000 points and each active estimate one point.
    Warnings and ids are ignored; ties go to the earliest group member.
    """
    if not entries:
        raise ValueError("Cannot choose a keeper from an empty group")
    return max(entries, key=_activity_score)


def plan_merges(
    entries: Sequence[RosterEntry],
    threshold: Optional[float] = None,
    near_miss: Optional[float] = None,
    method: MatchMethod | str = MatchMethod.BLENDED,
    roster: Optional[str] = None,
) -> List[MergePlan]:
    """
    Group duplicates and suggest a keeper for each group.

    ``blended`` groups through the anchor with name_similarity and picks the
    keeper with choose_keeper. ``levenshtein`` uses
    group_duplicates_transitive and choose_keeper_by_activity; near_miss
    does not apply to it.

    Raises:
        ValueError: For an unknown method.
    """
    method = MatchMethod(method)
    plans = []

    if method is MatchMethod.LEVENSHTEIN:
        for group in group_duplicates_transitive(entries, threshold=threshold, roster=roster):
            keeper = choose_keeper_by_activity(group.entries)
            duplicates = [e for e in group.entries if e is not keeper]
            plans.append(MergePlan(keeper=keeper, duplicates=duplicates, score=group.score))
        return plans

    groups = group_duplicates(entries, threshold=threshold, near_miss=near_miss, roster=roster)
    for group in groups:
        keeper = choose_keeper(group.entries)
        duplicates = [e for e in sorted(group.entries, key=_keeper_sort_key) if e is not keeper]
        plans.append(MergePlan(keeper=keeper, duplicates=duplicates, score=group.score))
    return plans


def find_inactive_candidates(
    entries: Sequence[RosterEntry],
    branch_counts: Optional[Mapping[int, int]] = None,
) -> List[RosterEntry]:
    """
    Active entries with no active estimates and nothing worth protecting.

    An entry is protected when it has a Telegram id, any warnings, or at
    least one branch assignment.
    """
    branch_counts = branch_counts or {}
    candidates = []
    for entry in entries:
        if not entry.is_active or entry.active_estimates > 0:
            continue
        protected = (
            entry.has_telegram
            or entry.warning_count > 0
            or branch_counts.get(entry.id, 0) > 0
        )
        if protected:
            LOGGER.debug(f"Keeping {entry.name} (id={entry.id}) active: has important data")
            continue
        candidates.append(entry)
    return candidates


def find_best_match(
    candidate: str,
    entries: Sequence[RosterEntry],
    threshold: Optional[float] = None,
) -> Optional[RosterMatch]:
    """
    Return the roster entry whose name best matches candidate.

    An empty candidate never matches. name_similarity would give it 0.9
    against every name (the empty string is contained in all of them), so
    it is rejected before scoring.

    Args:
        candidate: Name to look up.
        entries: Roster to search.
        threshold: Minimum score; defaults to NAME_MATCH_THRESHOLD.

    Returns:
        RosterMatch, or None if nothing reaches threshold. Ties keep the
        first entry with the top score.
    """
    if not candidate or not entries:
        return None
    if threshold is None:
        threshold = get_settings().duplicate_threshold

    best: Optional[RosterMatch] = None
    for entry in entries:
        score = name_similarity(candidate, entry.name)
        if score >= threshold and (best is None or score > best.score):
            best = RosterMatch(entry=entry, score=score)
    return best


def _optional_str(value: Any) -> Optional[str]:
    if pd.isna(value):
        return None
    # Numeric ids come back as floats when the column has gaps
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def _optional_int(value: Any) -> Optional[int]:
    if pd.isna(value):
        return None
    try:
        return int(float(value))
    except (ValueError, TypeError):
        return None


def _int_or_default(value: Any, default: int = 0) -> int:
    parsed = _optional_int(value)
    return default if parsed is None else parsed


def _bool_or_default(value: Any, default: bool = True) -> bool:
    if pd.isna(value):
        return default
    if isinstance(value, str):
        return value.strip().lower() not in {"false", "0", "no", "n", ""}
    return bool(value)


def load_roster(file_path: str | Path) -> List[RosterEntry]:
    """
    Read roster entries from a CSV file.

    Required column: ``name``. Optional: ``id``, ``telegram_id``,
    ``active_estimates``, ``warning_count``, ``is_active``.
    Rows without a usable name are skipped. Rows without an id get one
    above the largest id in the file, in row order.

    Raises:
        RosterLoadError: If the file is missing, unreadable or has no name column.
    """
    path = Path(file_path)
    stats = RosterLoadStats()
    logger = get_context_logger(__name__, roster=str(path))

    if not path.exists():
        raise RosterLoadError(f"Roster file not found: {path}")

    logger.info(f"Reading roster file: {path}")
    try:
        df = pd.read_csv(path)
    except Exception as e:
        raise RosterLoadError(f"Failed to read roster CSV {path}: {e}") from e

    if NAME_COL not in df.columns:
        raise RosterLoadError(f"Roster file {path} has no '{NAME_COL}' column")

    rows: List[tuple[Optional[int], Dict[str, Any]]] = []
    for idx, row in df.iterrows():
        stats.rows_processed += 1

        raw_name = row.get(NAME_COL)
        if pd.isna(raw_name) or not normalize_name(str(raw_name)):
            stats.rows_skipped += 1
            logger.debug(
                f"Skipping roster row {idx}: no usable name",
                extra={"entry_id": _optional_str(row.get(ID_COL))},
            )
            continue

        rows.append((
            _optional_int(row.get(ID_COL)),
            {
                "name": str(raw_name).strip(),
                "telegram_id": _optional_str(row.get("telegram_id")),
                "active_estimates": _int_or_default(row.get("active_estimates")),
                "warning_count": _int_or_default(row.get("warning_count")),
                "is_active": _bool_or_default(row.get("is_active")),
            },
        ))

    next_id = max((entry_id for entry_id, _ in rows if entry_id is not None), default=0) + 1
    entries: List[RosterEntry] = []
    for entry_id, fields in rows:
        if entry_id is None:
            entry_id = next_id
            next_id += 1
            stats.ids_assigned += 1
            logger.debug(
                f"Assigned id {entry_id} to {fields['name']!r}",
                extra={"entry_id": entry_id},
            )
        entries.append(RosterEntry(id=entry_id, **fields))
        stats.rows_loaded += 1

    logger.info(f"Roster load complete. Stats: {stats.as_dict()}")
    return entries


__all__ = [
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
]
