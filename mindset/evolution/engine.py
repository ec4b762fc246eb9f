"""
Trait evolution from chat messages.

A message is scanned against every keyword signal rule. Each rule that
matches fires exactly once, however many times its keywords occur, and
its delta is added to a working copy of the current vector. The result
is clamped to [0, 100] after all fired rules are applied.

The engine never reads or writes storage. Callers fetch the stored
vector, call apply_signals() or evolve(), and persist the result when it
changed.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Any, Iterable, List, Optional, Union, Mapping

from ..traits.schema import TraitVector
from .signal_rules import KeywordSignalRule, DEFAULT_SIGNAL_RULES

logger = logging.getLogger(__name__)

VectorInput = Union[TraitVector, Mapping[str, int]]


@dataclass
class EvolutionResult:
    """
    Outcome of applying one message to a trait vector.

    Attributes:
        traits: Adjusted trait vector
        fired_rules: Names of the rules that matched, in rule order
        changed: Whether traits differ from the input vector
    """
    traits: TraitVector
    fired_rules: List[str] = field(default_factory=list)
    changed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "traits": self.traits.to_dict(),
            "fired_rules": list(self.fired_rules),
            "changed": self.changed
        }


def detect_signals(
    message: str,
    rules: Optional[Iterable[KeywordSignalRule]] = None
) -> List[KeywordSignalRule]:
    """
    Find the rules whose pattern occurs in the message.

    Args:
        message: Free-text chat message
        rules: Rule table or set of rules (default: DEFAULT_SIGNAL_RULES)

    Returns:
        Matching rules, in the iteration order of rules
    """
    if rules is None:
        rules = DEFAULT_SIGNAL_RULES
    if not message:
        return []
    return [rule for rule in rules if rule.matches(message)]


def apply_signals(
    current: VectorInput,
    message: str,
    rules: Optional[Iterable[KeywordSignalRule]] = None
) -> TraitVector:
    """
    Nudge a trait vector by the signal rules a message triggers.

    Args:
        current: Current trait vector, or its stored mapping
        message: Free-text chat message
        rules: Rule table or set of rules (default: DEFAULT_SIGNAL_RULES)

    Returns:
        Adjusted TraitVector; equal to current if no rule fired

    Raises:
        MalformedStoredVector: If current is a mapping with missing keys or
            invalid values
    """
    return evolve(current, message, rules).traits


def evolve(
    current: VectorInput,
    message: str,
    rules: Optional[Iterable[KeywordSignalRule]] = None
) -> EvolutionResult:
    """
    Apply a message to a trait vector and report what fired.

    Same semantics as apply_signals(), with the fired rule names and a
    changed flag so the caller can skip a write when nothing moved.

    Args:
        current: Current trait vector, or its stored mapping
        message: Free-text chat message
        rules: Rule table or set of rules (default: DEFAULT_SIGNAL_RULES)

    Returns:
        EvolutionResult instance
    """
    # Corrupt stored records fail here instead of being silently repaired
    traits = TraitVector.from_stored(current)

    fired = detect_signals(message, rules)
    if not fired:
        return EvolutionResult(traits=traits)

    scores = traits.to_dict()
    for rule in fired:
        for dim, delta in rule.traits.items():
            scores[dim] += delta

    evolved = TraitVector.clamped(scores)
    fired_names = [rule.name for rule in fired]
    changed = evolved != traits
    logger.debug(f"Signals fired: {fired_names} (changed={changed})")

    return EvolutionResult(traits=evolved, fired_rules=fired_names, changed=changed)
