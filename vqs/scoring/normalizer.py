"""
Batch-relative min-max normalization.

Each metric is rescaled against the current keyword batch only, so the
same raw value can normalize differently across keywords.
"""
from typing import List, Sequence

import numpy as np

from .models import METRIC_NAMES, NormalizedMetrics, RawMetrics

# Value assigned when a metric carries no discriminating information
DEGENERATE_VALUE = 0.5


def normalize_matrix(values: np.ndarray) -> np.ndarray:
    """Min-max normalize each column of an (n_videos, n_metrics) array.

    Columns where every value is equal map to DEGENERATE_VALUE.
    """
    if values.shape[0] == 0:
        return values.astype(float)

    col_min = values.min(axis=0)
    col_max = values.max(axis=0)
    span = col_max - col_min
    flat = span == 0

    # Avoid dividing by zero; flat columns are overwritten below
    safe_span = np.where(flat, 1.0, span)
    normalized = (values - col_min) / safe_span
    normalized[:, flat] = DEGENERATE_VALUE
    return np.clip(normalized, 0.0, 1.0)


def normalize_batch(batch: Sequence[RawMetrics]) -> List[NormalizedMetrics]:
    """Normalize a batch of RawMetrics, metric by metric."""
    if not batch:
        return []

    values = np.array([m.as_list() for m in batch], dtype=float)
    normalized = normalize_matrix(values)
    return [
        NormalizedMetrics(**{name: float(row[i]) for i, name in enumerate(METRIC_NAMES)})
        for row in normalized
    ]
