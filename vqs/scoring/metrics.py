"""
Raw metric extraction.

Derives four unbounded signals per video:
  engagement: like/comment rates on a log scale, boosted for small channels
  velocity:   views per hour on a log scale, weighted by recency
  authority:  log subscriber count against a 100M ceiling, verified bonus
  quality:    fit to the short-form length window + classification confidence

Every function here is pure and never raises; missing inputs fall back to
safe defaults (views and subscribers floor at 1).
"""
import math
from datetime import datetime, timezone
from typing import Optional, Sequence, Tuple

from .config import ScoringConfig
from .models import CandidateVideo, RawMetrics, parse_timestamp

# log10 ceilings used to squash each rate into roughly [0, 1]
RATE_SCALE = 10_000
RATE_LOG_CEILING = 4.0
VELOCITY_LOG_CEILING = 6.0
AUTHORITY_LOG_CEILING = 8.0  # 100M subscribers

LIKE_SHARE = 0.75
COMMENT_SHARE = 0.25
VERIFIED_BONUS = 1.2

LENGTH_SHARE = 0.6
CONFIDENCE_SHARE = 0.4
CONFIDENCE_BONUS = 0.2

_DEFAULT_CONFIG = ScoringConfig()


def _lookup_below(value: float, table: Sequence[Tuple[float, float]], fallback: float) -> float:
    for threshold, multiplier in table:
        if value < threshold:
            return multiplier
    return fallback


def _lookup_at_most(value: float, table: Sequence[Tuple[float, float]], fallback: float) -> float:
    for threshold, multiplier in table:
        if value <= threshold:
            return multiplier
    return fallback


def channel_size_multiplier(subscribers: int, config: ScoringConfig = _DEFAULT_CONFIG) -> float:
    """Engagement correction: smaller channels get a boost."""
    return _lookup_below(
        subscribers, config.channel_size_multipliers, config.channel_size_fallback
    )


def recency_weight(hours_old: float, config: ScoringConfig = _DEFAULT_CONFIG) -> float:
    """Velocity correction: new uploads are boosted, old ones penalized."""
    return _lookup_at_most(hours_old, config.recency_weights, config.recency_fallback)


def _log_rate(count: int, views: int) -> float:
    return math.log10(1 + count / views * RATE_SCALE) / RATE_LOG_CEILING


def engagement_score(video: CandidateVideo, config: ScoringConfig = _DEFAULT_CONFIG) -> float:
    views = max(video.views, 1)
    like_rate = _log_rate(video.likes, views)
    comment_rate = _log_rate(video.comment_count, views)
    base = LIKE_SHARE * like_rate + COMMENT_SHARE * comment_rate

    multiplier = channel_size_multiplier(max(video.subscriber_count, 1), config)
    return min(1.0, base * multiplier)


def hours_since(published_at: Optional[datetime], now: datetime) -> Optional[float]:
    """Age in hours, floored at 1. None when the publish time is unknown.

    Naive datetimes on either side are taken to be UTC.
    """
    published_at = parse_timestamp(published_at)
    if published_at is None:
        return None
    now = parse_timestamp(now)
    return max(1.0, (now - published_at).total_seconds() / 3600)


def velocity_score(
    video: CandidateVideo,
    now: Optional[datetime] = None,
    config: ScoringConfig = _DEFAULT_CONFIG,
) -> float:
    """Views-per-hour growth signal.

    A video without a publish time has no measurable growth rate and
    scores 0.
    """
    now = now or datetime.now(timezone.utc)
    hours_old = hours_since(video.published_at, now)
    if hours_old is None:
        return 0.0

    views_per_hour = video.views / hours_old
    weight = recency_weight(hours_old, config)
    return min(1.0, math.log10(1 + views_per_hour) / VELOCITY_LOG_CEILING * weight)


def authority_score(video: CandidateVideo) -> float:
    subscribers = max(video.subscriber_count, 1)
    score = min(1.0, math.log10(subscribers) / AUTHORITY_LOG_CEILING)
    if video.channel_verified:
        score *= VERIFIED_BONUS
    return min(1.0, score)


def length_score(duration_seconds: float) -> float:
    """Fit of a video's length to the short-form sweet spot.

    15-45s is the golden window; lengths past 60s decay linearly to 0.2.
    """
    length = duration_seconds
    if 15 <= length <= 45:
        return 1.0
    if 10 <= length <= 60:
        return 0.8
    if 5 <= length <= 10:
        return 0.6
    if length > 60:
        return max(0.2, 0.8 - (length - 60) * 0.01)
    return 0.3


def quality_score(video: CandidateVideo) -> float:
    confidence = min(1.0, video.classification_confidence + CONFIDENCE_BONUS)
    return LENGTH_SHARE * length_score(video.duration_seconds) + CONFIDENCE_SHARE * confidence


def extract_metrics(
    video: CandidateVideo,
    now: Optional[datetime] = None,
    config: ScoringConfig = _DEFAULT_CONFIG,
) -> RawMetrics:
    """Compute the four raw metrics for a single video."""
    return RawMetrics(
        engagement=engagement_score(video, config),
        velocity=velocity_score(video, now, config),
        authority=authority_score(video),
        quality=quality_score(video),
    )
