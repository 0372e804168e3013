"""
Rank selection: sort by score, assign dense 1-based ranks, truncate.
"""
import dataclasses
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from .models import ScoredVideo

DEFAULT_LIMIT = 100

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _published_ts(video: ScoredVideo) -> float:
    published = video.video.published_at
    return (published - _EPOCH).total_seconds() if published else float("-inf")


# Secondary keys for tied scores, higher first. Full ties keep batch order.
TIE_BREAKERS: Dict[str, Optional[Callable[[ScoredVideo], float]]] = {
    "batch_order": None,
    "views": lambda v: v.video.views,
    "recency": _published_ts,
}


def sort_by_score(
    scored: List[ScoredVideo], tie_break: str = "batch_order"
) -> List[ScoredVideo]:
    """Stable descending sort by score, with an optional secondary key."""
    if tie_break not in TIE_BREAKERS:
        raise ValueError(f"Unknown tie_break: {tie_break}")

    secondary = TIE_BREAKERS[tie_break]
    if secondary is None:
        return sorted(scored, key=lambda v: v.score, reverse=True)
    # reverse=True keeps sorted() stable for equal keys
    return sorted(scored, key=lambda v: (v.score, secondary(v)), reverse=True)


def assign_ranks(
    scored: List[ScoredVideo], tie_break: str = "batch_order"
) -> List[ScoredVideo]:
    """Return the full batch in rank order with rank = position + 1."""
    return [
        dataclasses.replace(video, rank=i + 1)
        for i, video in enumerate(sort_by_score(scored, tie_break))
    ]


def select_top(
    scored: List[ScoredVideo],
    limit: Optional[int] = DEFAULT_LIMIT,
    tie_break: str = "batch_order",
) -> List[ScoredVideo]:
    """Rank the full batch, then return at most `limit` videos.

    A limit that is None, <= 0 or larger than the batch returns every
    ranked video.
    """
    ranked = assign_ranks(scored, tie_break)
    if limit is None or limit <= 0:
        return ranked
    return ranked[:limit]
