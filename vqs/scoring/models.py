"""
Data models for the VQS scoring engine.

CandidateVideo is the immutable input record. Scoring derives RawMetrics,
NormalizedMetrics and a 0-100 score, wrapped together in a ScoredVideo.
"""
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

METRIC_NAMES = ["engagement", "velocity", "authority", "quality"]

DEFAULT_CONFIDENCE = 0.5

# Candidate field -> accepted record keys (camelCase first, storage columns second)
FIELD_ALIASES = {
    "video_id": ("videoId", "video_id"),
    "views": ("views",),
    "likes": ("likes",),
    "comment_count": ("commentCount", "num_comments", "comment_count"),
    "subscriber_count": ("subscriberCount", "subscribers", "subscriber_count"),
    "channel_verified": ("channelVerified", "verified", "channel_verified"),
    "published_at": ("publishedAt", "date_posted", "published_at"),
    "duration_seconds": ("durationSeconds", "video_length", "duration_seconds"),
    "classification_confidence": (
        "classificationConfidence", "classification_confidence",
    ),
    "collection_keyword": ("collectionKeyword", "collection_keyword"),
}

_KNOWN_KEYS = {key for keys in FIELD_ALIASES.values() for key in keys}


class MalformedRecordError(ValueError):
    """A candidate record is missing its identity and cannot be scored."""


def _lookup(record: Mapping[str, Any], name: str) -> Any:
    for key in FIELD_ALIASES[name]:
        if record.get(key) is not None:
            return record[key]
    return None


def _to_int(value: Any) -> int:
    """Coerce a count to a non-negative int, 0 when missing or unparseable."""
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(int(number), 0)


def _to_float(value: Any, default: float = 0.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(number):
        return default
    return number


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp (or datetime) into an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except (ValueError, TypeError):
            logger.debug("Unparseable timestamp %r, treating as missing", value)
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass(frozen=True)
class CandidateVideo:
    """A short-form video retrieved for a search keyword.

    ``published_at`` is always stored as an aware UTC datetime (or None);
    naive datetimes are taken to be UTC. ``classification_confidence``
    falls back to 0.5 only when the field is absent, so an explicit 0 from
    the classifier is kept as 0 rather than treated as missing.
    """
    video_id: str
    views: int = 0
    likes: int = 0
    comment_count: int = 0
    subscriber_count: int = 0
    channel_verified: bool = False
    published_at: Optional[datetime] = None
    duration_seconds: float = 0.0
    classification_confidence: float = DEFAULT_CONFIDENCE
    collection_keyword: str = ""
    # Descriptive fields carried through untouched (title, handle_name, ...)
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "published_at", parse_timestamp(self.published_at))

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "CandidateVideo":
        """Build a candidate from a retrieval record.

        Accepts both camelCase names (videoId, commentCount, ...) and the
        storage column names (video_id, num_comments, subscribers, ...).
        Missing or unparseable numbers default to 0.

        Raises:
            MalformedRecordError: If the record has no video id.
        """
        if not isinstance(record, Mapping):
            raise MalformedRecordError(
                f"Expected a mapping, got {type(record).__name__}"
            )

        video_id = _lookup(record, "video_id")
        if video_id is None or not str(video_id).strip():
            raise MalformedRecordError("Record is missing videoId")

        confidence = _lookup(record, "classification_confidence")
        keyword = _lookup(record, "collection_keyword")

        return cls(
            video_id=str(video_id).strip(),
            views=_to_int(_lookup(record, "views")),
            likes=_to_int(_lookup(record, "likes")),
            comment_count=_to_int(_lookup(record, "comment_count")),
            subscriber_count=_to_int(_lookup(record, "subscriber_count")),
            channel_verified=_to_bool(_lookup(record, "channel_verified")),
            published_at=parse_timestamp(_lookup(record, "published_at")),
            duration_seconds=max(_to_float(_lookup(record, "duration_seconds")), 0.0),
            classification_confidence=_to_float(confidence, DEFAULT_CONFIDENCE),
            collection_keyword=str(keyword) if keyword is not None else "",
            extra={k: v for k, v in record.items() if k not in _KNOWN_KEYS},
        )

    def to_dict(self) -> dict:
        data = dict(self.extra)
        data.update({
            "videoId": self.video_id,
            "views": self.views,
            "likes": self.likes,
            "commentCount": self.comment_count,
            "subscriberCount": self.subscriber_count,
            "channelVerified": self.channel_verified,
            "publishedAt": self.published_at.isoformat() if self.published_at else None,
            "durationSeconds": self.duration_seconds,
            "classificationConfidence": self.classification_confidence,
            "collectionKeyword": self.collection_keyword,
        })
        return data


@dataclass(frozen=True)
class RawMetrics:
    """Unbounded per-video signals before batch normalization."""
    engagement: float
    velocity: float
    authority: float
    quality: float

    def as_list(self) -> list:
        return [getattr(self, name) for name in METRIC_NAMES]

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in self.as_list())


@dataclass(frozen=True)
class NormalizedMetrics:
    """Raw metrics rescaled to [0, 1] relative to the current batch."""
    engagement: float
    velocity: float
    authority: float
    quality: float

    def as_list(self) -> list:
        return [getattr(self, name) for name in METRIC_NAMES]


@dataclass(frozen=True)
class ScoredVideo:
    """A candidate with its derived metrics, score and (after ranking) rank."""
    video: CandidateVideo
    raw: RawMetrics
    normalized: NormalizedMetrics
    score: int
    rank: Optional[int] = None

    @property
    def video_id(self) -> str:
        return self.video.video_id

    def to_dict(self) -> dict:
        data = self.video.to_dict()
        for name in METRIC_NAMES:
            data[f"raw_{name}"] = round(getattr(self.raw, name), 6)
            data[f"norm_{name}"] = round(getattr(self.normalized, name), 6)
        data["score"] = self.score
        data["rank"] = self.rank
        return data


SCORE_BUCKETS = ("excellent", "good", "average", "poor")


@dataclass
class BatchStats:
    """Descriptive statistics over a full scored batch."""
    count: int
    average_score: int
    highest_score: int
    lowest_score: int
    median_score: int
    distribution: Dict[str, int]

    def summary(self) -> str:
        lines = [
            f"Videos:  {self.count}",
            f"Average: {self.average_score}",
            f"Median:  {self.median_score}",
            f"Range:   {self.lowest_score}-{self.highest_score}",
        ]
        for bucket in SCORE_BUCKETS:
            lines.append(f"  {bucket:10s} {self.distribution.get(bucket, 0)}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "averageScore": self.average_score,
            "highestScore": self.highest_score,
            "lowestScore": self.lowest_score,
            "medianScore": self.median_score,
            "distribution": dict(self.distribution),
        }
