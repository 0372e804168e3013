"""
VQS calculator: the configured scorer invoked once per keyword batch.

Pipeline per batch:
    1. Parse records into CandidateVideo (malformed records are skipped)
    2. Extract raw metrics per video (non-finite results are excluded)
    3. Normalize each metric across the batch
    4. Compose the 0-100 score
Ranking and statistics both consume the full scored batch.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Tuple

from .composer import compose_score
from .config import ScoringConfig
from .metrics import extract_metrics
from .models import BatchStats, CandidateVideo, MalformedRecordError, ScoredVideo
from .normalizer import normalize_batch
from .ranker import select_top
from .stats import compute_stats

logger = logging.getLogger(__name__)


@dataclass
class ScoredBatch:
    """Output of scoring one batch, before ranking."""
    videos: List[ScoredVideo]
    skipped: int = 0


class VQSCalculator:
    """Stateless Video Quality Score calculator.

    Holds only its configuration; every call works on its own batch, so a
    single instance can be shared across concurrent keyword pipelines.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def _prepare(
        self, records: Iterable[Any], now: datetime
    ) -> Tuple[List[CandidateVideo], list, int]:
        """Parse records and extract raw metrics, dropping what can't be scored.

        A record that fails to parse, or whose metrics raise or come out
        non-finite, is excluded and counted in ``skipped``. The rest of the
        batch is still scored.
        """
        videos = []
        raw_metrics = []
        skipped = 0

        for record in records:
            if isinstance(record, CandidateVideo):
                video = record
            else:
                try:
                    video = CandidateVideo.from_record(record)
                except MalformedRecordError as e:
                    logger.debug("Skipping malformed record: %s", e)
                    skipped += 1
                    continue
                except (ArithmeticError, ValueError, TypeError) as e:
                    logger.warning("Skipping unparseable record: %s", e)
                    skipped += 1
                    continue

            try:
                raw = extract_metrics(video, now, self.config)
            except (ArithmeticError, ValueError, TypeError) as e:
                logger.warning("Excluding %s: metric extraction failed: %s", video.video_id, e)
                skipped += 1
                continue
            if not raw.is_finite():
                logger.warning("Excluding %s: non-finite raw metrics %s", video.video_id, raw)
                skipped += 1
                continue

            videos.append(video)
            raw_metrics.append(raw)

        return videos, raw_metrics, skipped

    def score_batch(
        self,
        records: Iterable[Any],
        keyword: str = "",
        now: Optional[datetime] = None,
    ) -> ScoredBatch:
        """Score every valid record in a keyword batch.

        Args:
            records: CandidateVideo instances or raw record mappings.
            keyword: Label used for logging only.
            now: Reference time for video age (default: current UTC).

        Returns:
            ScoredBatch in input order (rank not yet assigned).
        """
        now = now or datetime.now(timezone.utc)
        videos, raw_metrics, skipped = self._prepare(records, now)

        if skipped:
            logger.warning("'%s': skipped %d malformed record(s)", keyword, skipped)

        if not videos:
            logger.warning("'%s': no scorable videos", keyword)
            return ScoredBatch(videos=[], skipped=skipped)

        logger.info("Scoring '%s' (%d videos)", keyword, len(videos))

        normalized = normalize_batch(raw_metrics)
        scored = [
            ScoredVideo(
                video=video,
                raw=raw,
                normalized=norm,
                score=compose_score(norm, self.config),
            )
            for video, raw, norm in zip(videos, raw_metrics, normalized)
        ]

        logger.info(
            "Scored '%s': top score %d", keyword, max(v.score for v in scored)
        )
        return ScoredBatch(videos=scored, skipped=skipped)

    def top_videos(
        self, scored: List[ScoredVideo], limit: Optional[int] = None
    ) -> List[ScoredVideo]:
        """Rank the full batch and keep the top `limit` (config default)."""
        if limit is None:
            limit = self.config.default_limit
        return select_top(scored, limit, self.config.tie_break)

    def stats(self, scored: List[ScoredVideo]) -> BatchStats:
        return compute_stats(scored)
