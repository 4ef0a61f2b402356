"""Neighbor aggregation and top-N selection."""

from .aggregator import ScoredCandidate, weighted_average
from .selection import select_top

__all__ = ["ScoredCandidate", "select_top", "weighted_average"]
