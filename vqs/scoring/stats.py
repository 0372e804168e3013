"""
Descriptive statistics over a scored batch.

Computed over the full batch before truncation, so the numbers describe
the whole candidate pool for a keyword.
"""
from typing import Dict, Iterable, List

import numpy as np

from .composer import round_half_up
from .models import SCORE_BUCKETS, BatchStats, ScoredVideo

# Lower bound (inclusive) of each bucket, checked top-down
BUCKET_FLOORS = [
    ("excellent", 80),
    ("good", 60),
    ("average", 40),
    ("poor", 0),
]


def bucket_for(score: int) -> str:
    for name, floor in BUCKET_FLOORS:
        if score >= floor:
            return name
    return "poor"


def score_distribution(scores: Iterable[int]) -> Dict[str, int]:
    distribution = {name: 0 for name in SCORE_BUCKETS}
    for score in scores:
        distribution[bucket_for(score)] += 1
    return distribution


def median_score(scores: List[int]) -> int:
    """Median; even-length batches round the mean of the two central values."""
    return round_half_up(float(np.median(scores)))


def empty_stats() -> BatchStats:
    return BatchStats(
        count=0,
        average_score=0,
        highest_score=0,
        lowest_score=0,
        median_score=0,
        distribution=score_distribution([]),
    )


def compute_stats(scored: List[ScoredVideo]) -> BatchStats:
    """Summarize a scored batch. An empty batch yields zeroed stats."""
    if not scored:
        return empty_stats()

    scores = np.array([v.score for v in scored], dtype=float)
    return BatchStats(
        count=len(scored),
        average_score=round_half_up(float(scores.mean())),
        highest_score=int(scores.max()),
        lowest_score=int(scores.min()),
        median_score=median_score([v.score for v in scored]),
        distribution=score_distribution(v.score for v in scored),
    )
