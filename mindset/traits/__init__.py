"""Trait vector model: schema, question bank and questionnaire derivation."""

from .schema import (
    TraitVector,
    Question,
    QuestionOption,
    TRAIT_DIMENSIONS,
    TRAIT_MIN,
    TRAIT_MAX,
    NEUTRAL_SCORE,
)
from .questions import MINDSET_QUESTIONS
from .derivation import default_vector, derive_from_answers

__all__ = [
    "TraitVector",
    "Question",
    "QuestionOption",
    "TRAIT_DIMENSIONS",
    "TRAIT_MIN",
    "TRAIT_MAX",
    "NEUTRAL_SCORE",
    "MINDSET_QUESTIONS",
    "default_vector",
    "derive_from_answers",
]
