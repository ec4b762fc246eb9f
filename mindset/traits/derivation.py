"""
Questionnaire-to-vector derivation.

Folds the selected option deltas of each answered question into a
neutral vector:

    traits = default_vector()
    for i, answer in enumerate(answers):
        traits += question_bank[i].options[answer].traits
    traits = clip(traits, 0, 100)

Clipping happens once, after all answers are folded in, so the raw sum
may pass a bound midway.
"""

import logging
from typing import Dict, Optional, Sequence

from ..errors import InvalidAnswerIndex, IncompleteAnswerSequence
from .questions import MINDSET_QUESTIONS
from .schema import TraitVector, Question, TRAIT_DIMENSIONS, NEUTRAL_SCORE, _is_int

logger = logging.getLogger(__name__)


def default_vector() -> TraitVector:
    """Return the neutral vector (all dimensions = 50)."""
    return TraitVector(**{dim: NEUTRAL_SCORE for dim in TRAIT_DIMENSIONS})


def derive_from_answers(
    answers: Sequence[int],
    question_bank: Optional[Sequence[Question]] = None,
    allow_partial: bool = False
) -> TraitVector:
    """
    Derive an initial trait vector from onboarding answers.

    Args:
        answers: Option index per question, in question order
        question_bank: Ordered questions (default: MINDSET_QUESTIONS)
        allow_partial: Accept fewer answers than questions; unanswered
            questions then contribute nothing

    Returns:
        TraitVector with every dimension clamped to [0, 100]

    Raises:
        InvalidAnswerIndex: If an answer is not a valid option index for its
            question, or there are more answers than questions
        IncompleteAnswerSequence: If fewer answers than questions were given
            and allow_partial is False
    """
    if question_bank is None:
        question_bank = MINDSET_QUESTIONS

    answers = list(answers)
    if len(answers) < len(question_bank) and not allow_partial:
        raise IncompleteAnswerSequence(len(answers), len(question_bank))

    # Validate everything before folding so a bad index never half-applies
    for position, answer in enumerate(answers):
        if position >= len(question_bank):
            raise InvalidAnswerIndex(position, answer, None)
        option_count = len(question_bank[position].options)
        if not _is_int(answer) or not 0 <= answer < option_count:
            raise InvalidAnswerIndex(position, answer, option_count)

    scores: Dict[str, int] = default_vector().to_dict()
    for position, answer in enumerate(answers):
        option = question_bank[position].options[answer]
        for dim, delta in option.traits.items():
            scores[dim] += delta

    traits = TraitVector.clamped(scores)
    logger.debug(f"Derived traits from {len(answers)} answers: {traits.to_dict()}")
    return traits
