"""
Trait schema for mindset profiles.

Defines the six trait dimensions, the TraitVector that stores one score
per dimension, and the question bank structures used during onboarding.

Trait Dimensions (each scored 0-100, neutral = 50):
- analytical: breaking problems down, working from data
- creative: generating new ideas, improvising
- emotional: attending to feelings and people
- logical: structure, process, reasoning
- risk_taking: comfort with uncertainty and bold moves
- collaborative: working with and through others
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Any, List, Mapping, Optional, Tuple, Type

import numpy as np

from ..errors import MalformedStoredVector, InvalidQuestionBank, MindsetError

TRAIT_DIMENSIONS: Tuple[str, ...] = (
    "analytical",
    "creative",
    "emotional",
    "logical",
    "risk_taking",
    "collaborative",
)

TRAIT_MIN = 0
TRAIT_MAX = 100
NEUTRAL_SCORE = 50


def _is_int(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


def clamp_score(value: int) -> int:
    """Clamp a single score to [TRAIT_MIN, TRAIT_MAX]."""
    return max(TRAIT_MIN, min(TRAIT_MAX, int(value)))


@dataclass(frozen=True)
class TraitVector:
    """
    Mindset trait scores for one user.

    Every dimension is always present and holds an integer in [0, 100].
    Instances are immutable; adjustments produce new vectors.

    Attributes:
        analytical: Analytical score
        creative: Creative score
        emotional: Emotional score
        logical: Logical score
        risk_taking: Risk-taking score
        collaborative: Collaborative score
    """
    analytical: int = NEUTRAL_SCORE
    creative: int = NEUTRAL_SCORE
    emotional: int = NEUTRAL_SCORE
    logical: int = NEUTRAL_SCORE
    risk_taking: int = NEUTRAL_SCORE
    collaborative: int = NEUTRAL_SCORE

    def __post_init__(self):
        """Validate score types and bounds."""
        problems = []
        for dim in TRAIT_DIMENSIONS:
            val = getattr(self, dim)
            if not _is_int(val):
                problems.append(f"{dim} must be an integer, got {val!r}")
            elif not TRAIT_MIN <= val <= TRAIT_MAX:
                problems.append(f"{dim} must be between {TRAIT_MIN} and {TRAIT_MAX}, got {val}")
            else:
                # Normalize numpy integers so equality and JSON output stay plain
                object.__setattr__(self, dim, int(val))
        if problems:
            raise MalformedStoredVector(problems)

    def to_dict(self) -> Dict[str, int]:
        """Convert to the stored six-key mapping."""
        return {dim: getattr(self, dim) for dim in TRAIT_DIMENSIONS}

    def to_array(self) -> np.ndarray:
        """
        Convert to a numpy vector in TRAIT_DIMENSIONS order.

        Returns:
            int64 array of shape (6,)
        """
        return np.array([getattr(self, dim) for dim in TRAIT_DIMENSIONS], dtype=np.int64)

    def dominant_traits(self, n: int = 2) -> List[str]:
        """
        Return the n highest-scoring dimensions.

        Ties keep TRAIT_DIMENSIONS order.
        """
        ranked = sorted(TRAIT_DIMENSIONS, key=lambda dim: -getattr(self, dim))
        return ranked[:n]

    @classmethod
    def from_stored(cls, data: Any) -> "TraitVector":
        """
        Parse a stored trait mapping strictly.

        Args:
            data: Mapping with exactly the six dimension keys and integer values

        Returns:
            TraitVector instance

        Raises:
            MalformedStoredVector: If keys are missing or unknown, or values
                are not integers in [0, 100]
        """
        if isinstance(data, TraitVector):
            return data
        if not isinstance(data, Mapping):
            raise MalformedStoredVector([f"expected a mapping, got {type(data).__name__}"])

        problems = []
        missing = [dim for dim in TRAIT_DIMENSIONS if dim not in data]
        if missing:
            problems.append(f"missing dimensions: {missing}")
        unknown = sorted(str(k) for k in data if k not in TRAIT_DIMENSIONS)
        if unknown:
            problems.append(f"unknown dimensions: {unknown}")
        if problems:
            raise MalformedStoredVector(problems)

        return cls(**{dim: data[dim] for dim in TRAIT_DIMENSIONS})

    @classmethod
    def clamped(cls, scores: Mapping[str, int]) -> "TraitVector":
        """Build a vector from raw accumulated scores, clamping each to [0, 100]."""
        return cls(**{dim: clamp_score(scores[dim]) for dim in TRAIT_DIMENSIONS})


def validate_delta_mapping(
    deltas: Any,
    context: str,
    error_cls: Type[MindsetError],
    max_magnitude: Optional[int] = None
) -> Dict[str, int]:
    """
    Validate a partial trait-delta mapping.

    Args:
        deltas: Mapping of dimension -> signed integer contribution
        context: Description of the owner, used in error messages
        error_cls: Error type to raise
        max_magnitude: If given, the largest allowed absolute delta

    Returns:
        Plain dict copy of the deltas

    Raises:
        error_cls: If a key is not a trait dimension or a value is invalid
    """
    if not isinstance(deltas, Mapping):
        raise error_cls(f"{context}: deltas must be a mapping, got {type(deltas).__name__}")

    result = {}
    for dim, value in deltas.items():
        if dim not in TRAIT_DIMENSIONS:
            raise error_cls(f"{context}: unknown trait dimension {dim!r}")
        if not _is_int(value):
            raise error_cls(f"{context}: delta for {dim} must be an integer, got {value!r}")
        if max_magnitude is not None and abs(value) > max_magnitude:
            raise error_cls(
                f"{context}: delta for {dim} exceeds the allowed magnitude "
                f"{max_magnitude}, got {value}"
            )
        result[dim] = int(value)
    return result


@dataclass(frozen=True)
class QuestionOption:
    """
    One answer option of a questionnaire item.

    Attributes:
        text: Option label shown to the user
        traits: Partial mapping of dimension -> score contribution
    """
    text: str
    traits: Mapping[str, int] = field(hash=False)

    def __post_init__(self):
        """Validate the delta mapping."""
        checked = validate_delta_mapping(
            self.traits, f"option {self.text!r}", InvalidQuestionBank
        )
        object.__setattr__(self, "traits", MappingProxyType(checked))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"text": self.text, "traits": dict(self.traits)}


@dataclass(frozen=True)
class Question:
    """
    Questionnaire item with ordered answer options.

    Attributes:
        id: Question identifier (1-based in the shipped bank)
        question: Prompt text
        options: Ordered answer options; answers index into this tuple
    """
    id: int
    question: str
    options: Tuple[QuestionOption, ...]

    def __post_init__(self):
        """Convert option dicts and validate."""
        options = tuple(
            opt if isinstance(opt, QuestionOption) else QuestionOption(**opt)
            for opt in self.options
        )
        if not options:
            raise InvalidQuestionBank(f"Question {self.id} has no options")
        object.__setattr__(self, "options", options)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "question": self.question,
            "options": [opt.to_dict() for opt in self.options]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Question":
        """Create from dictionary."""
        missing = [key for key in ("id", "question", "options") if key not in data]
        if missing:
            raise InvalidQuestionBank(f"Question entry missing fields: {missing}")
        return cls(
            id=data["id"],
            question=data["question"],
            options=tuple(data["options"])
        )


