"""Errors raised by the recommendation pipeline.

Each error also subclasses the builtin the HTTP layer maps to a status code:
KeyError -> 404, ValueError -> 400. `DatasetError` maps to 503.
"""

from __future__ import annotations


class RecommenderError(Exception):
    """Base class for compute-layer failures that are recoverable per request."""


class NoRatingsForTargetError(RecommenderError, KeyError):
    """The target user/movie has zero ratings, so no similarity can be computed."""

    def __init__(self, kind: str, entity_id: int) -> None:
        self.kind = str(kind)
        self.entity_id = int(entity_id)
        super().__init__(f"{self.kind} {self.entity_id} has no ratings")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return str(self.args[0])


class UnsupportedMetricError(RecommenderError, ValueError):
    """Similarity identifier outside the known set."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"The similarity of type {value} is not supported.")


class DatasetError(RecommenderError):
    """The ratings dataset could not be read or failed validation."""

    def __init__(self, source: object, reason: str) -> None:
        self.source = source
        self.reason = str(reason)
        super().__init__(f"Dataset at {source} could not be loaded: {self.reason}")
