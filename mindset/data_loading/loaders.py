"""
Data loading functions for the mindset engine.

This module reads profile exports from CSV/JSON and question banks and
signal-rule tables from YAML. Trait values are passed through as stored;
deciding what counts as malformed is left to the trait schema.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple

import pandas as pd
import yaml

from ..errors import InvalidQuestionBank
from ..evolution.signal_rules import KeywordSignalRule, SignalRuleConfig, DEFAULT_MAX_RULE_DELTA
from ..similarity.ranking import MatchCandidate
from ..traits.schema import Question, TRAIT_DIMENSIONS

logger = logging.getLogger(__name__)

TRAITS_COLUMN = "mindset_traits"
COMMUNITIES_COLUMN = "joined_communities"
REQUIRED_PROFILE_COLUMNS = ["id"]


def load_profiles(filepath: str, delimiter: str = ",") -> pd.DataFrame:
    """
    Load a profile export from CSV or JSON.

    Each row is one user profile. Traits are read either from a
    `mindset_traits` column holding the stored JSON object, or from one
    column per trait dimension.

    Args:
        filepath: Path to a .csv or .json export
        delimiter: Field delimiter for CSV files

    Returns:
        DataFrame with raw profile data

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty or lacks required columns
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Profile file not found: {filepath}")

    logger.info(f"Loading profiles from {filepath}")
    if path.suffix.lower() == ".json":
        with open(filepath, "r") as f:
            records = json.load(f)
        df = pd.DataFrame(records)
    else:
        df = pd.read_csv(filepath, sep=delimiter, dtype={"id": str})

    if df.empty:
        raise ValueError(f"Profile file is empty: {filepath}")

    missing = validate_profile_columns(df)
    if missing:
        raise ValueError(f"Profile file missing columns: {missing}")

    df["id"] = df["id"].astype(str)
    logger.info(f"Loaded {len(df)} profiles with {len(df.columns)} columns")
    return df


def validate_profile_columns(df: pd.DataFrame) -> List[str]:
    """
    Validate that a profile DataFrame has the columns ranking needs.

    Args:
        df: Profile DataFrame

    Returns:
        List of missing column names (empty if all present)
    """
    missing = [c for c in REQUIRED_PROFILE_COLUMNS if c not in df.columns]
    has_traits_column = TRAITS_COLUMN in df.columns
    has_dimension_columns = all(dim in df.columns for dim in TRAIT_DIMENSIONS)
    if not has_traits_column and not has_dimension_columns:
        missing.append(TRAITS_COLUMN)
    return missing


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, dict)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _parse_traits(row: pd.Series) -> Optional[Any]:
    """Extract the stored trait mapping from a profile row."""
    if TRAITS_COLUMN in row.index:
        raw = row[TRAITS_COLUMN]
        if _is_missing(raw):
            return None
        if isinstance(raw, str):
            try:
                return json.loads(raw)
            except json.JSONDecodeError:
                logger.warning(f"Profile {row['id']} has unparseable traits: {raw!r}")
                return None
        return raw

    traits = {}
    for dim in TRAIT_DIMENSIONS:
        value = row[dim]
        if _is_missing(value):
            continue
        # CSV columns with gaps come back as floats
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        traits[dim] = value
    return traits or None


def _parse_communities(value: Any) -> List[str]:
    """Parse a joined-communities cell (JSON list or ';'-separated ids)."""
    if isinstance(value, list):
        return [str(v) for v in value]
    if _is_missing(value):
        return []
    text = str(value).strip()
    if text.startswith("["):
        try:
            return [str(v) for v in json.loads(text)]
        except json.JSONDecodeError:
            logger.warning(f"Unparseable communities list: {text!r}")
            return []
    return [part.strip() for part in text.split(";") if part.strip()]


def _optional_str(row: pd.Series, column: str) -> Optional[str]:
    if column not in row.index or _is_missing(row[column]):
        return None
    return str(row[column])


def candidates_from_frame(df: pd.DataFrame) -> List[MatchCandidate]:
    """
    Convert a profile DataFrame into ranking candidates.

    Args:
        df: Output of load_profiles()

    Returns:
        MatchCandidate list in row order
    """
    candidates = []
    for _, row in df.iterrows():
        communities = row[COMMUNITIES_COLUMN] if COMMUNITIES_COLUMN in row.index else None
        candidates.append(MatchCandidate(
            id=str(row["id"]),
            name=_optional_str(row, "name"),
            username=_optional_str(row, "username"),
            avatar_url=_optional_str(row, "avatar_url"),
            traits=_parse_traits(row),
            joined_communities=_parse_communities(communities)
        ))
    return candidates


def load_question_bank(filepath: str) -> Tuple[Question, ...]:
    """
    Load a question bank from YAML.

    The file holds a `questions` list; each entry has an id, a question
    prompt and a list of options with text and trait deltas:

        questions:
          - id: 1
            question: "When faced with a complex problem..."
            options:
              - text: "Break it down into smaller, logical steps"
                traits: {analytical: 20, logical: 15}

    Args:
        filepath: Path to the question bank YAML file

    Returns:
        Tuple of Question in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        InvalidQuestionBank: If the bank is empty or an entry is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Question bank not found: {filepath}")

    logger.info(f"Loading question bank from {filepath}")
    with open(filepath, "r") as f:
        data = yaml.safe_load(f) or {}

    entries = data.get("questions") if isinstance(data, dict) else None
    if not entries:
        raise InvalidQuestionBank(f"Question bank has no questions: {filepath}")

    questions = []
    for entry in entries:
        options = []
        for opt in entry.get("options", []):
            if "text" not in opt or "traits" not in opt:
                raise InvalidQuestionBank(
                    f"Question {entry.get('id')} has an option without text or traits"
                )
            options.append({"text": opt["text"], "traits": opt["traits"]})
        questions.append(Question.from_dict({**entry, "options": options}))

    ids = [q.id for q in questions]
    if len(set(ids)) != len(ids):
        raise InvalidQuestionBank(f"Question bank has duplicate ids: {filepath}")

    logger.info(f"Loaded {len(questions)} questions")
    return tuple(questions)


def load_signal_rules(
    filepath: str,
    max_rule_delta: int = DEFAULT_MAX_RULE_DELTA
) -> Tuple[KeywordSignalRule, ...]:
    """
    Load a keyword signal rule table from YAML.

    The file holds a `rules` list in the same shape as the
    evolution.rules config section.

    Args:
        filepath: Path to the rules YAML file
        max_rule_delta: Largest allowed absolute delta per dimension

    Returns:
        Tuple of KeywordSignalRule in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        InvalidSignalRule: If an entry is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Signal rules file not found: {filepath}")

    logger.info(f"Loading signal rules from {filepath}")
    with open(filepath, "r") as f:
        data: Dict[str, Any] = yaml.safe_load(f) or {}

    return SignalRuleConfig(max_rule_delta=max_rule_delta, rules=data.get("rules") or []).build_rules()
