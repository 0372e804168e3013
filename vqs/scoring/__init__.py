"""
Video Quality Score (VQS) scoring engine.

Turns a keyword's candidate batch into normalized sub-scores, a 0-100
composite score, a ranking and summary statistics.
"""
from .models import (
    CandidateVideo,
    RawMetrics,
    NormalizedMetrics,
    ScoredVideo,
    BatchStats,
    MalformedRecordError,
    METRIC_NAMES,
)
from .config import ScoringConfig, load_config
from .metrics import extract_metrics
from .normalizer import normalize_batch
from .composer import compose_score
from .ranker import select_top, assign_ranks
from .stats import compute_stats
from .calculator import VQSCalculator, ScoredBatch

__all__ = [
    "CandidateVideo",
    "RawMetrics",
    "NormalizedMetrics",
    "ScoredVideo",
    "BatchStats",
    "MalformedRecordError",
    "METRIC_NAMES",
    "ScoringConfig",
    "load_config",
    "extract_metrics",
    "normalize_batch",
    "compose_score",
    "select_top",
    "assign_ranks",
    "compute_stats",
    "VQSCalculator",
    "ScoredBatch",
]
