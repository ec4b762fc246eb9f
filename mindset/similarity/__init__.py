"""Similarity ranking service: pairwise scores and ranked candidate lists."""

from .scoring import similarity, similarity_batch, coerce_vector, stack_vectors
from .ranking import (
    MatchCandidate,
    RankedMatch,
    RankingConfig,
    ConnectionState,
    DEFAULT_EXCLUDE_STATES,
    rank,
    filter_by_community,
    build_exclusions,
    ranking_to_frame,
)

__all__ = [
    "similarity",
    "similarity_batch",
    "coerce_vector",
    "stack_vectors",
    "MatchCandidate",
    "RankedMatch",
    "RankingConfig",
    "ConnectionState",
    "DEFAULT_EXCLUDE_STATES",
    "rank",
    "filter_by_community",
    "build_exclusions",
    "ranking_to_frame",
]
