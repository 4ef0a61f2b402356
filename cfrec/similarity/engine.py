from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from ..errors import NoRatingsForTargetError
from ..store.ratings import Rating
from .metrics import EntityKind, SimilarityMetric, common_pairs, similarity_from_pairs


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimilarityScore:
    """Similarity of one entity to the request's target.

    Owned by a single request; nothing stores it back on a User/Movie.
    """

    entityId: int
    similarity: float
    common: int = 0


def score_against_all(
    target_id: int,
    groups: Mapping[int, Sequence[Rating]],
    candidate_ids: Iterable[int],
    metric: SimilarityMetric | str,
    kind: EntityKind = EntityKind.USER,
) -> list[SimilarityScore]:
    """Score every candidate (except the target itself) against the target.

    `groups` maps entity id -> that entity's ratings, grouped by the same kind as
    `kind`. Candidates without ratings score 0. Output follows `candidate_ids`.
    """
    metric = SimilarityMetric.parse(metric)
    target_id = int(target_id)
    target_ratings = groups.get(target_id, ())
    if not target_ratings:
        raise NoRatingsForTargetError(kind.value, target_id)

    out: list[SimilarityScore] = []
    for cid in candidate_ids:
        cid = int(cid)
        if cid == target_id:
            continue
        a, b = common_pairs(target_ratings, groups.get(cid, ()), kind)
        sim = similarity_from_pairs(metric, a, b)
        out.append(SimilarityScore(entityId=cid, similarity=float(sim), common=int(a.size)))

    logger.debug(
        "Scored %d %ss against %s=%d metric=%s",
        len(out),
        kind.value,
        kind.value,
        target_id,
        metric.value,
    )
    return out


def positive_neighbors(scores: Iterable[SimilarityScore]) -> list[SimilarityScore]:
    """Entities with strictly positive similarity; the rest carry no signal."""
    return [s for s in scores if s.similarity > 0.0]
