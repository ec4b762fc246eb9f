"""
Configuration loading and validation.

This module handles loading of YAML configuration files and
validates that all sections hold usable values.
"""

import logging
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml

from ..traits.schema import TRAIT_DIMENSIONS

logger = logging.getLogger(__name__)

KNOWN_SECTIONS = ["global", "questionnaire", "evolution", "ranking", "evaluation"]
CONNECTION_STATES = ["none", "pending_sent", "pending_received", "connected"]


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Configuration file is empty: {filepath}")
    if not isinstance(config, dict):
        raise ValueError(f"Configuration file must hold a mapping: {filepath}")

    return config


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    for section in config:
        if section not in KNOWN_SECTIONS:
            issues.append(f"Unknown config section: {section}")

    # Evolution rule table
    evolution = _section(config, "evolution", issues)
    max_delta = evolution.get("max_rule_delta", 5)
    if not _is_int(max_delta) or max_delta < 1:
        issues.append(f"evolution.max_rule_delta must be a positive integer, got {max_delta!r}")
        max_delta = None

    rules = evolution.get("rules")
    if rules is not None:
        if not isinstance(rules, list) or not rules:
            issues.append("evolution.rules must be a non-empty list when set")
        else:
            for i, rule in enumerate(rules):
                issues.extend(_validate_rule(i, rule, max_delta))

    # Ranking
    ranking = _section(config, "ranking", issues)
    limit = ranking.get("default_limit")
    if limit is not None and (not _is_int(limit) or limit < 0):
        issues.append(f"ranking.default_limit must be a non-negative integer, got {limit!r}")
    states = ranking.get("exclude_states") or []
    if not isinstance(states, list):
        issues.append(f"ranking.exclude_states must be a list, got {states!r}")
        states = []
    for state in states:
        if state not in CONNECTION_STATES:
            issues.append(f"ranking.exclude_states has unknown state: {state!r}")

    # Questionnaire
    questionnaire = _section(config, "questionnaire", issues)
    bank_path = questionnaire.get("question_bank")
    if bank_path is not None and not Path(str(bank_path)).exists():
        issues.append(f"questionnaire.question_bank not found: {bank_path}")
    if not isinstance(questionnaire.get("allow_partial", False), bool):
        issues.append("questionnaire.allow_partial must be true or false")

    # Evaluation
    evaluation = _section(config, "evaluation", issues)
    quantiles = evaluation.get("quantiles", [])
    if not isinstance(quantiles, list):
        issues.append(f"evaluation.quantiles must be a list, got {quantiles!r}")
        quantiles = []
    for q in quantiles:
        if not _is_number(q) or not 0 <= q <= 1:
            issues.append(f"evaluation.quantiles must be numbers in [0, 1], got {q!r}")
    audit_pairs = evaluation.get("audit_pairs", 1000)
    if not _is_int(audit_pairs) or audit_pairs < 1:
        issues.append(f"evaluation.audit_pairs must be a positive integer, got {audit_pairs!r}")

    return issues


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _section(config: Dict[str, Any], name: str, issues: List[str]) -> Dict[str, Any]:
    """Return a config section, reporting it if it is not a mapping."""
    section = config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        issues.append(f"{name} section must be a mapping, got {type(section).__name__}")
        return {}
    return section


def _validate_rule(i: int, rule: Any, max_delta: Optional[int]) -> List[str]:
    """Check one evolution.rules entry."""
    if not isinstance(rule, dict):
        return [f"evolution.rules[{i}] must be a mapping"]

    issues = [f"evolution.rules[{i}] missing {key}"
              for key in ("name", "pattern", "traits") if key not in rule]

    traits = rule.get("traits")
    if traits is None:
        return issues
    if not isinstance(traits, dict):
        issues.append(f"evolution.rules[{i}].traits must be a mapping of dimension -> delta")
        return issues

    for dim, delta in traits.items():
        if dim not in TRAIT_DIMENSIONS:
            issues.append(f"evolution.rules[{i}] has unknown dimension {dim}")
        elif not _is_int(delta):
            issues.append(f"evolution.rules[{i}] delta for {dim} must be an integer, got {delta!r}")
        elif max_delta is not None and abs(delta) > max_delta:
            issues.append(f"evolution.rules[{i}] delta for {dim} exceeds max_rule_delta: {delta}")
    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "evolution.max_rule_delta")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value
