"""Data loading module for profile exports, question banks and signal rules."""

from .loaders import (
    load_profiles,
    candidates_from_frame,
    validate_profile_columns,
    load_question_bank,
    load_signal_rules,
)

__all__ = [
    "load_profiles",
    "candidates_from_frame",
    "validate_profile_columns",
    "load_question_bank",
    "load_signal_rules",
]
