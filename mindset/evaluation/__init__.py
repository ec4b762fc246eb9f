"""Evaluation module for similarity score analysis."""

from .metrics import (
    compute_score_distribution_stats,
    compute_pairwise_scores,
    summarize_traits,
    count_fallbacks,
    audit_scoring,
    ScoringAudit,
    EvaluationReport,
    create_evaluation_report
)

__all__ = [
    "compute_score_distribution_stats",
    "compute_pairwise_scores",
    "summarize_traits",
    "count_fallbacks",
    "audit_scoring",
    "ScoringAudit",
    "EvaluationReport",
    "create_evaluation_report"
]
