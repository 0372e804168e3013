"""
Scoring configuration.

The composite weights, the two breakpoint tables and the logistic reshape
constants are tunable heuristics. They live in one frozen pydantic model
so a scorer can be configured once at startup and swapped in tests.
"""
import logging
import math
import os
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "VQS_CONFIG"

# (subscriber threshold, multiplier); matches when subscribers < threshold
DEFAULT_CHANNEL_SIZE_MULTIPLIERS = [
    (1_000, 1.5),
    (10_000, 1.3),
    (100_000, 1.1),
    (1_000_000, 1.0),
    (10_000_000, 0.9),
]

# (max age in hours, weight); matches when age <= max age
DEFAULT_RECENCY_WEIGHTS = [
    (24, 2.0),      # 1 day
    (168, 1.5),     # 1 week
    (720, 1.2),     # 1 month
    (8760, 0.8),    # 1 year
]

TieBreak = Literal["batch_order", "views", "recency"]


class ScoringConfig(BaseModel):
    """Weights, breakpoint tables and curve constants for VQS scoring."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    engagement_weight: float = Field(0.35, ge=0.0, le=1.0)
    velocity_weight: float = Field(0.25, ge=0.0, le=1.0)
    authority_weight: float = Field(0.25, ge=0.0, le=1.0)
    quality_weight: float = Field(0.15, ge=0.0, le=1.0)

    channel_size_multipliers: List[Tuple[float, float]] = Field(
        default_factory=lambda: list(DEFAULT_CHANNEL_SIZE_MULTIPLIERS),
        description="Ordered (subscriber threshold, multiplier) pairs, strict <.",
    )
    channel_size_fallback: float = Field(
        0.8, ge=0.0, description="Multiplier for channels past the last threshold."
    )
    recency_weights: List[Tuple[float, float]] = Field(
        default_factory=lambda: list(DEFAULT_RECENCY_WEIGHTS),
        description="Ordered (max age hours, weight) pairs, inclusive <=.",
    )
    recency_fallback: float = Field(
        0.5, ge=0.0, description="Weight for videos older than the last threshold."
    )

    sigmoid_steepness: float = Field(12.0, gt=0.0)
    sigmoid_center: float = Field(0.5, ge=0.0, le=1.0)

    default_limit: int = Field(100, ge=1)
    tie_break: TieBreak = "batch_order"

    @field_validator("channel_size_multipliers", "recency_weights")
    @classmethod
    def check_thresholds(cls, table: List[Tuple[float, float]]):
        thresholds = [t for t, _ in table]
        if any(b <= a for a, b in zip(thresholds, thresholds[1:])):
            raise ValueError(f"thresholds must be strictly increasing: {thresholds}")
        if any(m < 0 for _, m in table):
            raise ValueError("multipliers must be non-negative")
        return table

    @model_validator(mode="after")
    def check_weights(self):
        total = sum(self.weights.values())
        if not math.isclose(total, 1.0, abs_tol=1e-6):
            raise ValueError(f"composite weights must sum to 1.0, got {total:.6f}")
        return self

    @property
    def weights(self) -> dict:
        return {
            "engagement": self.engagement_weight,
            "velocity": self.velocity_weight,
            "authority": self.authority_weight,
            "quality": self.quality_weight,
        }


def load_config(path: Optional[str] = None) -> ScoringConfig:
    """Load a ScoringConfig from a JSON file.

    Falls back to the file named by $VQS_CONFIG, then to the defaults.

    Raises:
        FileNotFoundError: If an explicit or env-provided path doesn't exist.
        pydantic.ValidationError: If the file content is invalid.
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return ScoringConfig()

    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        config = ScoringConfig.model_validate_json(f.read())
    logger.info("Loaded scoring config from %s", path)
    return config
