"""
Composite score.

Weighted sum of normalized metrics, reshaped through a logistic curve to
spread the mid-range apart, then scaled to an integer 0-100. The curve is
monotonic, so reshaping never changes relative order.
"""
import math

from .config import ScoringConfig
from .models import METRIC_NAMES, NormalizedMetrics

_DEFAULT_CONFIG = ScoringConfig()


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def weighted_sum(metrics: NormalizedMetrics, config: ScoringConfig = _DEFAULT_CONFIG) -> float:
    weights = config.weights
    return sum(getattr(metrics, name) * weights[name] for name in METRIC_NAMES)


def logistic(x: float, steepness: float = 12.0, center: float = 0.5) -> float:
    z = -steepness * (x - center)
    # exp overflows past ~709; the curve is already 0 there
    if z > 700:
        return 0.0
    return 1.0 / (1.0 + math.exp(z))


def compose_score(metrics: NormalizedMetrics, config: ScoringConfig = _DEFAULT_CONFIG) -> int:
    """Combine normalized metrics into a 0-100 integer score."""
    raw = weighted_sum(metrics, config)
    curved = logistic(raw, config.sigmoid_steepness, config.sigmoid_center)
    return min(100, max(0, round_half_up(curved * 100)))
