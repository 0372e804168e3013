"""
Result containers for keyword searches.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..scoring.models import BatchStats, ScoredVideo


@dataclass
class SearchResult:
    """Outcome of searching and scoring a single keyword."""
    success: bool
    keyword: str
    message: str
    videos: List[ScoredVideo] = field(default_factory=list)
    stats: Optional[BatchStats] = None
    total_candidates: int = 0
    skipped: int = 0
    error: Optional[str] = None
    duration_seconds: float = 0.0
    processed_at: Optional[datetime] = None

    @property
    def video_count(self) -> int:
        return len(self.videos)

    def to_dict(self) -> dict:
        stats = None
        if self.stats is not None:
            stats = self.stats.to_dict()
            stats["searchKeyword"] = self.keyword
            stats["processedAt"] = (
                self.processed_at.isoformat() if self.processed_at else None
            )
        data = {
            "success": self.success,
            "keyword": self.keyword,
            "message": self.message,
            "videoCount": self.video_count,
            "totalCandidates": self.total_candidates,
            "skipped": self.skipped,
            "duration": round(self.duration_seconds, 3),
            "videos": [v.to_dict() for v in self.videos],
            "stats": stats,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class BatchSearchReport:
    """Per-keyword results of a multi-keyword search."""
    results: List[SearchResult]
    duration_seconds: float = 0.0

    def summary(self) -> dict:
        total = len(self.results)
        successful = sum(1 for r in self.results if r.success)
        return {
            "totalKeywords": total,
            "successful": successful,
            "failed": total - successful,
            "totalVideos": sum(r.video_count for r in self.results),
            "durationSeconds": round(self.duration_seconds, 3),
            "averageDurationSeconds": (
                round(self.duration_seconds / total, 3) if total else 0.0
            ),
        }

    def to_dict(self) -> dict:
        return {
            "results": [r.to_dict() for r in self.results],
            "summary": self.summary(),
        }
