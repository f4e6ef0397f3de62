"""
group_fit.py — How well a proposed travel month fits a group's availability.

For target month M the scorer looks at M-1, M and M+1 (wrapping around the
year) with weights 0.5 / 1.0 / 0.5. Each month that has samples contributes
its mean score times its weight; the result is the weighted mean, rounded.
No month hint or no samples → None (no signal). update_availability() is
the validated write path for the samples.

Example:
    month 6, samples {5: [80], 6: [60, 80], 7: [40]}
    (80*0.5 + 70*1.0 + 40*0.5) / 2.0 = 65
"""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .models import AvailabilitySample, Idea
from .store import InMemoryRecordStore, RecordStore
from .validate import AvailabilityInput, validate_input

NEIGHBOR_WEIGHT = 0.5
TARGET_WEIGHT = 1.0


def fit_window(month: int) -> List[Tuple[int, float]]:
    """[(previous month, 0.5), (month, 1.0), (next month, 0.5)], wrapping Dec↔Jan."""
    previous = 12 if month == 1 else month - 1
    following = 1 if month == 12 else month + 1
    return [(previous, NEIGHBOR_WEIGHT), (month, TARGET_WEIGHT), (following, NEIGHBOR_WEIGHT)]


def score(month_hint: Optional[int], samples: Iterable[AvailabilitySample]) -> Optional[int]:
    """Weighted fit percentage, or None when there is no data to score."""
    samples = list(samples or [])
    if not month_hint or not samples:
        return None

    by_month: Dict[int, List[int]] = defaultdict(list)
    for sample in samples:
        by_month[sample.month].append(sample.score)

    weighted_sum = 0.0
    weight_total = 0.0
    for month, weight in fit_window(month_hint):
        scores = by_month.get(month)
        if scores:
            weighted_sum += (sum(scores) / len(scores)) * weight
            weight_total += weight

    if weight_total <= 0:
        return None
    # half-up rounding, not banker's rounding
    return int(math.floor(weighted_sum / weight_total + 0.5))


def calculate_group_fit(store: RecordStore, idea_id: str) -> Optional[int]:
    idea = store.get_idea(idea_id)
    if idea is None or not idea.month_hint:
        return None
    return score(idea.month_hint, store.list_availability(idea.group_id))


def list_ideas_with_fit(store: InMemoryRecordStore, group_id: str) -> List[Tuple[Idea, Optional[int]]]:
    """Read path for a group board: every idea with its fit score."""
    samples = store.list_availability(group_id)
    return [(idea, score(idea.month_hint, samples)) for idea in store.list_ideas(group_id)]


def update_availability(store: InMemoryRecordStore, user_id: str, data: Any) -> AvailabilitySample:
    """
    Record one member's availability score for a month.

    A member has at most one entry per (group, month); a new score replaces
    the old one.

    Raises:
        ValidationError: bad group id, month or score
    """
    payload = validate_input(AvailabilityInput, data)
    return store.upsert_availability(AvailabilitySample(
        group_id=payload.group_id,
        user_id=user_id,
        month=payload.month,
        score=payload.score,
    ))
