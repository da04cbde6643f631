"""
Spatial co-occurrence of vibe categories.

Reports are snapped to a fine grid; each grid cell with at least two
reports is one observation. For every pair of vibe categories we count
in how many observations both appear and derive a phi coefficient.

Two marginal estimates are supported:

- ``legacy``: p(A) = p(B) = p(A and B). This is not a real marginal, and
  it makes every pair that co-occurs in some (but not all) cells score
  exactly 1.0. It is the default because it reproduces the historical
  output of the app.
- ``observed``: p(A) = cells containing A / observed cells, which yields a
  proper phi coefficient.
"""

import logging
import math
from collections import Counter

from api.analytics_models import Report, VibeCorrelation, VibeType
from config import AnalyticsConfig
from .grid import bucket_reports

logger = logging.getLogger(__name__)

MARGINALS_LEGACY = "legacy"
MARGINALS_OBSERVED = "observed"


def vibe_pairs() -> list[tuple[str, str]]:
    """Every unordered pair of vibe values with a < b, in enum order."""
    values = [v.value for v in VibeType]
    return [(a, b) for a in values for b in values if a < b]


class VibeCorrelationAnalyzer:
    """Estimates pairwise correlation between vibe categories."""

    def __init__(
        self,
        grid_size: float = AnalyticsConfig.CORRELATION_GRID_SIZE,
        min_cluster_size: int = AnalyticsConfig.CORRELATION_MIN_CLUSTER_SIZE,
        min_sample: int = AnalyticsConfig.CORRELATION_MIN_SAMPLE,
        min_correlation: float = AnalyticsConfig.CORRELATION_MIN_ABS,
        marginals: str = AnalyticsConfig.CORRELATION_MARGINALS,
    ):
        if marginals not in (MARGINALS_LEGACY, MARGINALS_OBSERVED):
            raise ValueError(f"Unknown marginal estimate: {marginals!r}")
        self.grid_size = grid_size
        self.min_cluster_size = min_cluster_size
        self.min_sample = min_sample
        self.min_correlation = min_correlation
        self.marginals = marginals

    def analyze(self, reports: list[Report]) -> list[VibeCorrelation]:
        """Return correlated vibe pairs, strongest (by absolute value) first."""
        if not reports:
            return []

        cells = bucket_reports(reports, self.grid_size)
        observations = [
            cell.vibes()
            for cell in cells.values()
            if len(cell.reports) >= self.min_cluster_size
        ]

        # Every pair sees every observation, so all pairs share one total
        total = len(observations)
        if total < self.min_sample:
            logger.debug("Vibe correlation skipped: %d observed cells", total)
            return []

        presence: Counter[str] = Counter()
        for vibes in observations:
            presence.update(vibes)

        correlations: list[VibeCorrelation] = []
        for vibe_a, vibe_b in vibe_pairs():
            together = sum(1 for vibes in observations if vibe_a in vibes and vibe_b in vibes)
            p_ab = together / total

            if self.marginals == MARGINALS_OBSERVED:
                p_a = presence[vibe_a] / total
                p_b = presence[vibe_b] / total
            else:
                p_a = p_b = p_ab

            correlation = phi_coefficient(p_ab, p_a, p_b)
            if abs(correlation) < self.min_correlation:
                continue

            correlations.append(
                VibeCorrelation(
                    vibe_a=vibe_a,
                    vibe_b=vibe_b,
                    correlation=correlation,
                    confidence=min(total / 10, 1.0),
                    sample_size=total,
                    description=describe_correlation(vibe_a, vibe_b, correlation),
                )
            )

        logger.debug(
            "Vibe correlation: %d observed cells, %d correlated pairs (%s marginals)",
            total, len(correlations), self.marginals,
        )

        return sorted(correlations, key=lambda c: abs(c.correlation), reverse=True)


def phi_coefficient(p_ab: float, p_a: float, p_b: float) -> float:
    """Phi coefficient from joint and marginal probabilities; 0 when undefined."""
    denominator = math.sqrt(p_a * (1 - p_a) * p_b * (1 - p_b))
    if denominator == 0:
        return 0.0
    correlation = (p_ab - p_a * p_b) / denominator
    return max(-1.0, min(1.0, correlation))


def describe_correlation(vibe_a: str, vibe_b: str, correlation: float) -> str:
    """Human-readable description such as "safe and calm strongly tend to appear together"."""
    strength = abs(correlation)
    direction = "tend to appear together" if correlation > 0 else "rarely appear together"

    if strength >= 0.7:
        strength_text = "strongly"
    elif strength >= 0.4:
        strength_text = "moderately"
    else:
        strength_text = "weakly"

    return f"{vibe_a} and {vibe_b} {strength_text} {direction}"


def calculate_vibe_correlations(reports: list[Report]) -> list[VibeCorrelation]:
    """Estimate which vibe categories co-occur spatially."""
    return VibeCorrelationAnalyzer().analyze(reports)
