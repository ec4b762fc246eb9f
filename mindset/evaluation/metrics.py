"""
Evaluation metrics for mindset similarity over a user population.

There are no ground-truth "good match" labels, so evaluation focuses on:
1. Score distribution analysis across all user pairs
2. Per-dimension trait summaries for the population
3. Data quality: how many profiles fell back to the neutral vector
4. A scoring audit that re-scores sampled pairs through similarity() and
   checks them against the vectorized population scores

This module DOES NOT claim real-world match quality.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Sequence, Tuple
import json

import numpy as np
import pandas as pd
from scipy.spatial.distance import pdist

from ..errors import MalformedStoredVector
from ..traits.schema import TraitVector, TRAIT_DIMENSIONS, TRAIT_MIN, TRAIT_MAX
from ..similarity.ranking import MatchCandidate
from ..similarity.scoring import coerce_vector, distance_to_similarity, similarity, stack_vectors

logger = logging.getLogger(__name__)

DEFAULT_QUANTILES = (0.1, 0.25, 0.5, 0.75, 0.9)
DEFAULT_AUDIT_PAIRS = 1000


@dataclass
class ScoreDistributionStats:
    """Statistics about score distribution."""
    mean: float
    std: float
    min: float
    max: float
    quantiles: Dict[str, float]  # e.g., {"p10": 62.0, "p50": 78.0, "p90": 90.0}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": float(self.mean),
            "std": float(self.std),
            "min": float(self.min),
            "max": float(self.max),
            "quantiles": {k: float(v) for k, v in self.quantiles.items()}
        }


@dataclass
class ScoringAudit:
    """
    Cross-check of population scores against the pairwise scorer.

    Attributes:
        n_pairs_checked: Sampled pairs re-scored through similarity()
        n_batch_mismatches: Pairs whose population score differs from similarity(a, b)
        n_asymmetric: Pairs where similarity(a, b) != similarity(b, a)
        n_self_mismatches: Sampled profiles where similarity(v, v) != 100
        n_out_of_range: Population scores outside [0, 100]
    """
    n_pairs_checked: int
    n_batch_mismatches: int = 0
    n_asymmetric: int = 0
    n_self_mismatches: int = 0
    n_out_of_range: int = 0

    @property
    def passed(self) -> bool:
        return (self.n_batch_mismatches + self.n_asymmetric
                + self.n_self_mismatches + self.n_out_of_range) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_pairs_checked": self.n_pairs_checked,
            "n_batch_mismatches": self.n_batch_mismatches,
            "n_asymmetric": self.n_asymmetric,
            "n_self_mismatches": self.n_self_mismatches,
            "n_out_of_range": self.n_out_of_range,
            "passed": self.passed
        }


@dataclass
class EvaluationReport:
    """
    Evaluation report for a population of trait vectors.

    Contains pairwise score statistics, per-dimension trait summaries,
    fallback counts and the scoring audit.
    """
    name: str
    n_profiles: int
    n_pairs: int
    distribution_stats: Optional[ScoreDistributionStats]
    trait_summary: Dict[str, Dict[str, float]] = field(default_factory=dict)
    scoring_audit: Optional[ScoringAudit] = None
    additional_metrics: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "name": self.name,
            "n_profiles": self.n_profiles,
            "n_pairs": self.n_pairs,
            "trait_summary": self.trait_summary,
            "additional_metrics": self.additional_metrics
        }
        if self.distribution_stats:
            result["distribution_stats"] = self.distribution_stats.to_dict()
        if self.scoring_audit:
            result["scoring_audit"] = self.scoring_audit.to_dict()
        return result

    def save(self, filepath: str) -> None:
        """Save report to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved evaluation report to {filepath}")

    def summary(self) -> str:
        """Generate text summary of the report."""
        lines = [
            f"Evaluation Report: {self.name}",
            "=" * 50,
            f"Profiles: {self.n_profiles}  Pairs: {self.n_pairs}",
        ]
        for key, value in self.additional_metrics.items():
            lines.append(f"  {key}: {value}")

        if self.distribution_stats:
            lines.extend([
                "",
                "Similarity Distribution:",
                f"  Mean: {self.distribution_stats.mean:.2f}",
                f"  Std:  {self.distribution_stats.std:.2f}",
                f"  Min:  {self.distribution_stats.min:.0f}",
                f"  Max:  {self.distribution_stats.max:.0f}",
            ])
            for q_name, q_value in self.distribution_stats.quantiles.items():
                lines.append(f"  {q_name}: {q_value:.1f}")

        if self.trait_summary:
            lines.extend(["", "Trait Means:"])
            for dim, stats in self.trait_summary.items():
                lines.append(f"  {dim}: {stats['mean']:.1f} (std {stats['std']:.1f})")

        if self.scoring_audit:
            audit = self.scoring_audit
            lines.extend([
                "",
                f"Scoring Audit ({audit.n_pairs_checked} pairs): "
                f"{'PASSED' if audit.passed else 'FAILED'}",
                f"  Batch mismatches: {audit.n_batch_mismatches}",
                f"  Asymmetric pairs: {audit.n_asymmetric}",
                f"  Self-similarity misses: {audit.n_self_mismatches}",
                f"  Out of range: {audit.n_out_of_range}",
            ])

        return "\n".join(lines)


def compute_score_distribution_stats(
    scores: np.ndarray,
    quantiles: Sequence[float] = DEFAULT_QUANTILES
) -> ScoreDistributionStats:
    """
    Compute distribution statistics for scores.

    Args:
        scores: Array of similarity scores
        quantiles: Quantile values to compute (default: p10, p25, p50, p75, p90)

    Returns:
        ScoreDistributionStats instance
    """
    quantile_dict = {
        f"p{int(round(q * 100))}": float(np.percentile(scores, q * 100))
        for q in quantiles
    }

    return ScoreDistributionStats(
        mean=float(np.mean(scores)),
        std=float(np.std(scores)),
        min=float(np.min(scores)),
        max=float(np.max(scores)),
        quantiles=quantile_dict
    )


def compute_pairwise_scores(vectors: Sequence[TraitVector]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Score every unordered pair of distinct profiles.

    Pairs are ordered like np.triu_indices(n, k=1): (0, 1), (0, 2), ...,
    (1, 2), ...

    Args:
        vectors: Trait vectors, one per profile

    Returns:
        Tuple of (similarity_scores, mean_abs_differences), one entry per pair
    """
    if len(vectors) < 2:
        return np.zeros(0, dtype=np.int64), np.zeros(0, dtype=np.float64)

    # cityblock distance is the summed absolute difference; exact for int scores
    abs_diff_sums = np.rint(pdist(stack_vectors(vectors), metric="cityblock")).astype(np.int64)
    scores = distance_to_similarity(abs_diff_sums)
    return scores, abs_diff_sums / len(TRAIT_DIMENSIONS)


def summarize_traits(vectors: Sequence[TraitVector]) -> Dict[str, Dict[str, float]]:
    """
    Summarize each trait dimension across a population.

    Args:
        vectors: Trait vectors, one per profile

    Returns:
        Dict of dimension -> {"mean", "std", "min", "max"}
    """
    if not vectors:
        return {}
    df = pd.DataFrame([v.to_dict() for v in vectors], columns=list(TRAIT_DIMENSIONS))
    described = df.agg(["mean", "std", "min", "max"]).fillna(0.0)
    return {
        dim: {stat: float(described.loc[stat, dim]) for stat in described.index}
        for dim in TRAIT_DIMENSIONS
    }


def count_fallbacks(candidates: Sequence[MatchCandidate]) -> Dict[str, int]:
    """
    Count profiles that score as the neutral vector instead of their own.

    Args:
        candidates: Profiles to inspect

    Returns:
        Dict with "profiles_without_traits" and "profiles_with_malformed_traits"
    """
    missing = 0
    malformed = 0
    for candidate in candidates:
        if candidate.traits is None:
            missing += 1
            continue
        try:
            TraitVector.from_stored(candidate.traits)
        except MalformedStoredVector:
            malformed += 1
    return {
        "profiles_without_traits": missing,
        "profiles_with_malformed_traits": malformed
    }


def audit_scoring(
    vectors: Sequence[TraitVector],
    scores: np.ndarray,
    max_pairs: int = DEFAULT_AUDIT_PAIRS,
    seed: int = 42
) -> ScoringAudit:
    """
    Re-score sampled pairs through similarity() and compare.

    Every population score is range-checked. Up to max_pairs pairs are
    re-scored both ways round and compared with the population score, and
    every profile in a sampled pair is scored against itself.

    Args:
        vectors: Trait vectors the scores were computed from
        scores: Output of compute_pairwise_scores() for vectors
        max_pairs: Largest number of pairs to re-score
        seed: Random seed for pair sampling

    Returns:
        ScoringAudit instance
    """
    idx_a, idx_b = np.triu_indices(len(vectors), k=1)
    if len(scores) != len(idx_a):
        raise ValueError(f"Expected {len(idx_a)} pair scores for {len(vectors)} profiles, got {len(scores)}")

    n_out_of_range = int(np.sum((scores < TRAIT_MIN) | (scores > TRAIT_MAX)))

    if len(idx_a) > max_pairs:
        rng = np.random.RandomState(seed)
        sample = rng.choice(len(idx_a), size=max_pairs, replace=False)
    else:
        sample = np.arange(len(idx_a))

    audit = ScoringAudit(n_pairs_checked=len(sample), n_out_of_range=n_out_of_range)
    for k in sample:
        a, b = vectors[idx_a[k]], vectors[idx_b[k]]
        forward = similarity(a, b)
        if forward != similarity(b, a):
            audit.n_asymmetric += 1
        if forward != int(scores[k]):
            audit.n_batch_mismatches += 1

    sampled_profiles = set(idx_a[sample].tolist()) | set(idx_b[sample].tolist())
    audit.n_self_mismatches = sum(
        1 for i in sampled_profiles if similarity(vectors[i], vectors[i]) != TRAIT_MAX
    )

    if not audit.passed:
        logger.warning(f"Scoring audit failed: {audit.to_dict()}")
    return audit


def create_evaluation_report(
    name: str,
    candidates: Sequence[MatchCandidate],
    quantiles: Sequence[float] = DEFAULT_QUANTILES,
    audit_pairs: int = DEFAULT_AUDIT_PAIRS
) -> EvaluationReport:
    """
    Create a complete evaluation report for a profile population.

    Args:
        name: Report name
        candidates: Profiles to evaluate; missing or malformed traits count
            as the neutral vector, as they do in ranking
        quantiles: Quantiles to compute
        audit_pairs: Largest number of pairs the scoring audit re-scores

    Returns:
        EvaluationReport instance
    """
    vectors = [coerce_vector(c.traits, owner=f"candidate {c.id}") for c in candidates]
    fallbacks = count_fallbacks(candidates)

    scores, mean_abs_diff = compute_pairwise_scores(vectors)
    logger.info(f"Scored {len(scores)} pairs across {len(vectors)} profiles")

    dist_stats = None
    audit = None
    additional_metrics: Dict[str, Any] = dict(fallbacks)
    if len(scores) > 0:
        dist_stats = compute_score_distribution_stats(scores, quantiles)
        audit = audit_scoring(vectors, scores, max_pairs=audit_pairs)
        additional_metrics["mean_trait_distance"] = round(float(np.mean(mean_abs_diff)), 2)
    else:
        logger.warning("Need at least 2 profiles for pairwise statistics")

    return EvaluationReport(
        name=name,
        n_profiles=len(vectors),
        n_pairs=int(len(scores)),
        distribution_stats=dist_stats,
        trait_summary=summarize_traits(vectors),
        scoring_audit=audit,
        additional_metrics=additional_metrics
    )
