"""Entity-agnostic similarity metrics (Euclidean-derived, Pearson)."""

from .engine import SimilarityScore, positive_neighbors, score_against_all
from .metrics import EntityKind, SimilarityMetric, compute_similarity

__all__ = [
    "EntityKind",
    "SimilarityMetric",
    "SimilarityScore",
    "compute_similarity",
    "positive_neighbors",
    "score_against_all",
]
