"""Trait evolution engine: keyword signal rules and chat-driven adjustment."""

from .signal_rules import (
    KeywordSignalRule,
    SignalRuleConfig,
    DEFAULT_SIGNAL_RULES,
    DEFAULT_MAX_RULE_DELTA,
)
from .engine import apply_signals, detect_signals, evolve, EvolutionResult

__all__ = [
    "KeywordSignalRule",
    "SignalRuleConfig",
    "DEFAULT_SIGNAL_RULES",
    "DEFAULT_MAX_RULE_DELTA",
    "apply_signals",
    "detect_signals",
    "evolve",
    "EvolutionResult",
]
