"""
Keyword search engine.

Fetches a keyword's candidates from a source, scores them with the VQS
calculator and returns the top-N with batch statistics. Multi-keyword
searches run one isolated pipeline per keyword concurrently; a failing
keyword becomes a failed result instead of aborting the batch.
"""
import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..scoring.calculator import VQSCalculator
from ..scoring.config import ScoringConfig
from .models import BatchSearchReport, SearchResult
from .sources import CandidateSource

logger = logging.getLogger(__name__)


class VideoSearchEngine:
    """Search-and-score orchestrator over a candidate source."""

    def __init__(
        self,
        source: CandidateSource,
        config: Optional[ScoringConfig] = None,
    ):
        self.source = source
        self.calculator = VQSCalculator(config)

    @property
    def config(self) -> ScoringConfig:
        return self.calculator.config

    async def search(
        self,
        keyword: str,
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> SearchResult:
        """Search one keyword and return its ranked top-N.

        Never raises: empty candidate sets and internal failures come back
        as a SearchResult with success=False.
        """
        start = time.monotonic()
        now = now or datetime.now(timezone.utc)
        logger.info("Search start: '%s' (limit=%s)", keyword, limit)

        try:
            records = list(await self.source.fetch(keyword) or [])
            total = len(records)

            if not records:
                logger.warning("No candidates for keyword: %s", keyword)
                return SearchResult(
                    success=False,
                    keyword=keyword,
                    message=f"No candidates found for '{keyword}'",
                    duration_seconds=time.monotonic() - start,
                    processed_at=now,
                )

            batch = self.calculator.score_batch(records, keyword=keyword, now=now)

            if not batch.videos:
                return SearchResult(
                    success=False,
                    keyword=keyword,
                    message=f"No valid candidates found for '{keyword}'",
                    total_candidates=total,
                    skipped=batch.skipped,
                    duration_seconds=time.monotonic() - start,
                    processed_at=now,
                )

            top = self.calculator.top_videos(batch.videos, limit)
            stats = self.calculator.stats(batch.videos)

        except Exception as e:
            logger.error("Search failed for '%s': %s", keyword, e)
            return SearchResult(
                success=False,
                keyword=keyword,
                message=f"Internal error while searching '{keyword}'",
                error=str(e),
                duration_seconds=time.monotonic() - start,
                processed_at=now,
            )

        logger.info(
            "Search complete: '%s' returned %d/%d (highest=%d)",
            keyword, len(top), len(batch.videos), stats.highest_score,
        )
        return SearchResult(
            success=True,
            keyword=keyword,
            message=f"Search for '{keyword}' complete",
            videos=top,
            stats=stats,
            total_candidates=total,
            skipped=batch.skipped,
            duration_seconds=time.monotonic() - start,
            processed_at=now,
        )

    async def batch_search(
        self,
        keywords: List[str],
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> BatchSearchReport:
        """Search several keywords concurrently, one isolated pipeline each."""
        start = time.monotonic()
        now = now or datetime.now(timezone.utc)
        logger.info("Batch search: %d keywords", len(keywords))

        results = await asyncio.gather(
            *(self.search(keyword, limit, now) for keyword in keywords)
        )

        report = BatchSearchReport(
            results=list(results), duration_seconds=time.monotonic() - start
        )
        summary = report.summary()
        logger.info(
            "Batch search complete: %d successful, %d failed, %d videos",
            summary["successful"], summary["failed"], summary["totalVideos"],
        )
        return report

    async def keyword_counts(self, keywords: List[str]) -> Dict[str, int]:
        """Number of stored candidates per keyword (0 when retrieval fails)."""
        counts = {}
        for keyword in keywords:
            try:
                counts[keyword] = len(await self.source.fetch(keyword))
            except Exception as e:
                logger.error("Count failed for '%s': %s", keyword, e)
                counts[keyword] = 0
        return counts
