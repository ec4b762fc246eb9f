"""
Mindset similarity scoring.

Similarity between two trait vectors is based on their mean absolute
difference across the six dimensions:

    distance = round(sum(|A_d - B_d|) / 6)      (halves round up)
    similarity = 100 - distance

The score is symmetric. Identical vectors score 100 and vectors a full
range apart on every dimension score 0, but rounding also lifts any
difference sum below 3 to 100 and drops any sum of 597 or more to 0.

Missing or malformed vectors score as the neutral default vector, so one
broken profile never fails a whole ranking.
"""

import logging
from typing import Any, Optional, Sequence

import numpy as np

from ..errors import MalformedStoredVector
from ..traits.schema import TraitVector, TRAIT_DIMENSIONS
from ..traits.derivation import default_vector

logger = logging.getLogger(__name__)

N_DIMENSIONS = len(TRAIT_DIMENSIONS)


def coerce_vector(value: Any, owner: Optional[str] = None) -> TraitVector:
    """
    Turn a possibly missing or malformed stored vector into a usable one.

    Args:
        value: TraitVector, stored mapping, or None
        owner: Identifier used in the warning when falling back

    Returns:
        The parsed vector, or default_vector() if value is absent or malformed
    """
    if value is None:
        return default_vector()
    try:
        return TraitVector.from_stored(value)
    except MalformedStoredVector as e:
        logger.warning(f"Using default traits for {owner or 'vector'}: {e}")
        return default_vector()


def distance_to_similarity(abs_diff_sums: np.ndarray) -> np.ndarray:
    """Map summed absolute differences to integer similarity scores."""
    # floor(sum / 6 + 0.5) in integer arithmetic: round half up, no float error
    rounded_mean = (abs_diff_sums + N_DIMENSIONS // 2) // N_DIMENSIONS
    return 100 - rounded_mean


def similarity(a: Optional[Any], b: Optional[Any]) -> int:
    """
    Compute the similarity score between two trait vectors.

    Args:
        a: First vector (TraitVector, stored mapping, or None)
        b: Second vector (TraitVector, stored mapping, or None)

    Returns:
        Integer similarity in [0, 100]
    """
    vec_a = coerce_vector(a).to_array()
    vec_b = coerce_vector(b).to_array()
    abs_diff_sum = np.abs(vec_a - vec_b).sum()
    return int(distance_to_similarity(abs_diff_sum))


def similarity_batch(requester: TraitVector, candidates: np.ndarray) -> np.ndarray:
    """
    Compute similarity between one vector and many candidate vectors.

    Args:
        requester: Requesting user's trait vector
        candidates: Candidate vectors as an int matrix (N x 6) in
            TRAIT_DIMENSIONS order

    Returns:
        int64 array of similarity scores (N,)
    """
    candidates = np.asarray(candidates, dtype=np.int64)
    if candidates.size == 0:
        return np.zeros(0, dtype=np.int64)
    if candidates.ndim != 2 or candidates.shape[1] != N_DIMENSIONS:
        raise ValueError(
            f"Candidate matrix must have shape (N, {N_DIMENSIONS}), got {candidates.shape}"
        )

    abs_diff_sums = np.abs(candidates - requester.to_array()).sum(axis=1)
    return distance_to_similarity(abs_diff_sums)


def stack_vectors(vectors: Sequence[TraitVector]) -> np.ndarray:
    """
    Stack trait vectors into an int matrix (N x 6).

    Args:
        vectors: Trait vectors

    Returns:
        int64 matrix in TRAIT_DIMENSIONS order
    """
    if not vectors:
        return np.zeros((0, N_DIMENSIONS), dtype=np.int64)
    return np.vstack([v.to_array() for v in vectors])
