"""
Error types for the mindset engine.

All errors derive from ValueError so callers validating user input can
catch them alongside other bad-value failures.
"""

from typing import List, Optional


class MindsetError(ValueError):
    """Base class for all mindset engine errors."""


class InvalidAnswerIndex(MindsetError):
    """An onboarding answer does not point at an option of its question."""

    def __init__(self, position: int, answer, option_count: Optional[int]):
        self.position = position
        self.answer = answer
        self.option_count = option_count
        if option_count is None:
            message = f"Answer at position {position} has no matching question"
        else:
            message = (
                f"Answer at position {position} must be an option index in "
                f"[0, {option_count - 1}], got {answer!r}"
            )
        super().__init__(message)


class IncompleteAnswerSequence(MindsetError):
    """Onboarding submitted fewer answers than there are questions."""

    def __init__(self, answered: int, expected: int):
        self.answered = answered
        self.expected = expected
        super().__init__(f"Expected {expected} answers, got {answered}")


class MalformedStoredVector(MindsetError):
    """A stored trait vector is missing keys or holds invalid values."""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("Malformed trait vector: " + "; ".join(self.problems))


class InvalidSignalRule(MindsetError):
    """A keyword signal rule has a bad pattern or delta mapping."""


class InvalidQuestionBank(MindsetError):
    """A question bank entry is structurally invalid."""
