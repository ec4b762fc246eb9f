"""
Keyword signal rules for chat-driven trait adjustment.

Each rule pairs a case-insensitive regular expression with a small
partial trait delta. The shipped table is heuristic data: the patterns and
magnitudes can be replaced through the evolution.rules config section, as
long as every delta stays within evolution.max_rule_delta.

Default Rules:
    analytical_signals:    data|analyze|research|...   -> analytical +2, logical +1
    creative_signals:      imagine|create|idea|...     -> creative +2
    emotional_signals:     feel|people|care|...        -> emotional +2, collaborative +1
    logical_signals:       logic|reason|systematic|... -> logical +2, analytical +1
    risk_signals:          risk|try|chance|...         -> risk_taking +2
    collaborative_signals: team|together|...           -> collaborative +2
"""

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Any, List, Mapping, Optional, Tuple

from ..errors import InvalidSignalRule
from ..traits.schema import validate_delta_mapping

logger = logging.getLogger(__name__)

DEFAULT_MAX_RULE_DELTA = 5


@dataclass(frozen=True)
class KeywordSignalRule:
    """
    Regex pattern mapped to a bounded trait delta.

    Attributes:
        name: Rule identifier, reported when the rule fires
        pattern: Regular expression, matched case-insensitively anywhere in a message
        traits: Partial mapping of dimension -> delta applied once per message,
            held read-only; rules hash on name and pattern
    """
    name: str
    pattern: str
    traits: Mapping[str, int] = field(hash=False)
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        """Compile the pattern and validate the deltas."""
        if not self.pattern:
            raise InvalidSignalRule(f"Rule {self.name!r} has an empty pattern")
        try:
            compiled = re.compile(self.pattern, re.IGNORECASE)
        except re.error as e:
            raise InvalidSignalRule(f"Rule {self.name!r} has an invalid pattern: {e}") from e
        traits = validate_delta_mapping(self.traits, f"rule {self.name!r}", InvalidSignalRule)
        if not traits:
            raise InvalidSignalRule(f"Rule {self.name!r} has no trait deltas")
        object.__setattr__(self, "regex", compiled)
        object.__setattr__(self, "traits", MappingProxyType(traits))

    def matches(self, message: str) -> bool:
        """Check whether the pattern occurs anywhere in the message."""
        return self.regex.search(message) is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"name": self.name, "pattern": self.pattern, "traits": dict(self.traits)}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "KeywordSignalRule":
        """Create from dictionary."""
        missing = [key for key in ("name", "pattern", "traits") if key not in d]
        if missing:
            raise InvalidSignalRule(f"Signal rule entry missing fields: {missing}")
        return cls(name=d["name"], pattern=d["pattern"], traits=d["traits"])


DEFAULT_SIGNAL_RULES: Tuple[KeywordSignalRule, ...] = (
    KeywordSignalRule(
        name="analytical_signals",
        pattern=r"data|analyze|research|evidence|facts|statistics",
        traits={"analytical": 2, "logical": 1},
    ),
    KeywordSignalRule(
        name="creative_signals",
        pattern=r"imagine|create|idea|innovative|different|design|art",
        traits={"creative": 2},
    ),
    KeywordSignalRule(
        name="emotional_signals",
        pattern=r"feel|people|care|empathy|help|support|heart",
        traits={"emotional": 2, "collaborative": 1},
    ),
    KeywordSignalRule(
        name="logical_signals",
        pattern=r"logic|reason|systematic|process|step|plan|strategy",
        traits={"logical": 2, "analytical": 1},
    ),
    KeywordSignalRule(
        name="risk_signals",
        pattern=r"risk|try|chance|bold|adventure|experiment|dare",
        traits={"risk_taking": 2},
    ),
    KeywordSignalRule(
        name="collaborative_signals",
        pattern=r"team|together|collaborate|share|discuss|group|we",
        traits={"collaborative": 2},
    ),
)


@dataclass
class SignalRuleConfig:
    """
    Configuration for chat-driven trait evolution.

    Attributes:
        max_rule_delta: Largest absolute delta a single rule may apply per dimension
        rules: Rule entries as dicts; None means the shipped DEFAULT_SIGNAL_RULES
    """
    max_rule_delta: int = DEFAULT_MAX_RULE_DELTA
    rules: Optional[List[Dict[str, Any]]] = None

    def validate(self) -> None:
        """Validate configuration values."""
        if not isinstance(self.max_rule_delta, int) or self.max_rule_delta < 1:
            raise InvalidSignalRule(
                f"max_rule_delta must be a positive integer, got {self.max_rule_delta!r}"
            )

    def build_rules(self) -> Tuple[KeywordSignalRule, ...]:
        """
        Build the rule table, enforcing the delta bound.

        Returns:
            Tuple of KeywordSignalRule in configured order

        Raises:
            InvalidSignalRule: If an entry is malformed or exceeds max_rule_delta
        """
        self.validate()
        if self.rules is None:
            rules = DEFAULT_SIGNAL_RULES
        else:
            rules = tuple(KeywordSignalRule.from_dict(entry) for entry in self.rules)

        for rule in rules:
            validate_delta_mapping(
                rule.traits, f"rule {rule.name!r}", InvalidSignalRule,
                max_magnitude=self.max_rule_delta
            )

        names = [rule.name for rule in rules]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise InvalidSignalRule(f"Duplicate signal rule names: {duplicates}")

        logger.info(f"Built {len(rules)} signal rules (max delta {self.max_rule_delta})")
        return rules

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "SignalRuleConfig":
        """Create from main config dictionary."""
        evolution_config = config.get("evolution", {}) or {}
        return cls(
            max_rule_delta=evolution_config.get("max_rule_delta", DEFAULT_MAX_RULE_DELTA),
            rules=evolution_config.get("rules")
        )
