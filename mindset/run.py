"""
Command-line entrypoint for the mindset engine.

Usage:
    python -m mindset.run derive --answers 0,3,1,0,1,2,0,3,1,0,2,1
    python -m mindset.run evolve --vector '{"analytical": 50, ...}' --message "Let's plan it step by step"
    python -m mindset.run rank --profiles profiles.csv --user-id u1 --limit 5
    python -m mindset.run report --profiles profiles.csv --output report.json

Every command reads configs/config.yaml (or --config) and prints JSON to
stdout, except `rank --format table` and `report`, which print text.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, Any, List, Optional, Sequence, Tuple

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr
)
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "configs/config.yaml"


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, str(log_level).upper(), logging.INFO)
    logging.getLogger().setLevel(level)


def load_runtime_config(config_path: Optional[str]) -> Dict[str, Any]:
    """
    Load and validate configuration for a CLI run.

    A missing default config file is not an error: the built-in question
    bank and signal rules are used instead. An explicitly given path must
    exist.

    Args:
        config_path: Path to the YAML config, or None for the default

    Returns:
        Configuration dictionary
    """
    from .configs import load_config, validate_config, get_config_value

    path = config_path or DEFAULT_CONFIG_PATH
    if config_path is None and not Path(path).exists():
        logger.info(f"No config at {path}, using built-in defaults")
        return {}

    config = load_config(path)
    for issue in validate_config(config):
        logger.warning(f"Config issue: {issue}")

    setup_logging(get_config_value(config, "global.log_level", "INFO"))
    return config


def build_question_bank(config: Dict[str, Any]):
    """Question bank from config, or the built-in bank."""
    from .configs import get_config_value
    from .data_loading import load_question_bank
    from .traits import MINDSET_QUESTIONS

    bank_path = get_config_value(config, "questionnaire.question_bank")
    if bank_path:
        return load_question_bank(bank_path)
    return MINDSET_QUESTIONS


def build_signal_rules(config: Dict[str, Any]):
    """Signal rule table from config, or the built-in rules."""
    from .evolution import SignalRuleConfig

    return SignalRuleConfig.from_config(config).build_rules()


def _parse_answers(text: str) -> List[int]:
    try:
        return [int(part) for part in text.split(",") if part.strip()]
    except ValueError as e:
        raise ValueError(f"Answers must be comma-separated integers: {text!r}") from e


def _parse_id_list(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


# =============================================================================
# Commands
# =============================================================================

def run_derive(args: argparse.Namespace, config: Dict[str, Any]) -> Dict[str, Any]:
    """Derive a trait vector from questionnaire answers."""
    from .configs import get_config_value
    from .traits import derive_from_answers

    question_bank = build_question_bank(config)
    allow_partial = args.allow_partial or get_config_value(
        config, "questionnaire.allow_partial", False
    )
    traits = derive_from_answers(
        _parse_answers(args.answers), question_bank, allow_partial=allow_partial
    )
    logger.info(f"Derived traits from {len(question_bank)}-question bank")

    return {
        "traits": traits.to_dict(),
        "dominant_traits": traits.dominant_traits(2)
    }


def run_evolve(args: argparse.Namespace, config: Dict[str, Any]) -> Dict[str, Any]:
    """Apply one chat message to a stored trait vector."""
    from .evolution import evolve

    try:
        stored = json.loads(args.vector)
    except json.JSONDecodeError as e:
        raise ValueError(f"--vector must be a JSON object: {e}") from e

    result = evolve(stored, args.message, build_signal_rules(config))
    if result.changed:
        logger.info(f"Traits changed by rules: {result.fired_rules}")
    else:
        logger.info("No trait change; nothing to persist")
    return result.to_dict()


def _load_candidates(profiles_path: str):
    from .data_loading import load_profiles, candidates_from_frame

    return candidates_from_frame(load_profiles(profiles_path))


def _load_connection_states(path: Optional[str]) -> Dict[str, str]:
    if not path:
        return {}
    with open(path, "r") as f:
        states = json.load(f)
    if not isinstance(states, dict):
        raise ValueError(f"Connections file must hold an object of id -> state: {path}")
    return states


def run_rank(args: argparse.Namespace, config: Dict[str, Any]) -> Tuple[List[Dict[str, Any]], Any]:
    """Rank profiles against one user's traits."""
    from .similarity import RankingConfig, build_exclusions, rank, ranking_to_frame

    ranking_config = RankingConfig.from_config(config)
    ranking_config.validate()

    candidates = _load_candidates(args.profiles)
    requester = next((c for c in candidates if c.id == args.user_id), None)
    if requester is None:
        raise ValueError(f"User {args.user_id!r} not found in {args.profiles}")

    excluded = build_exclusions(
        requester.id,
        _load_connection_states(args.connections),
        ranking_config.exclude_states
    )
    excluded.update(_parse_id_list(args.exclude))

    limit = args.limit if args.limit is not None else ranking_config.default_limit
    ranked = rank(
        requester.traits, candidates,
        exclude_ids=excluded, limit=limit, community_id=args.community
    )
    logger.info(f"Ranked {len(ranked)} matches for {requester.id} "
                f"(excluded {len(excluded)}, community={args.community})")

    return [match.to_dict() for match in ranked], ranking_to_frame(ranked)


def run_report(args: argparse.Namespace, config: Dict[str, Any]):
    """Build an evaluation report over a profile export."""
    from .configs import get_config_value
    from .evaluation import create_evaluation_report
    from .evaluation.metrics import DEFAULT_QUANTILES, DEFAULT_AUDIT_PAIRS

    candidates = _load_candidates(args.profiles)
    report = create_evaluation_report(
        name=Path(args.profiles).stem,
        candidates=candidates,
        quantiles=get_config_value(config, "evaluation.quantiles", list(DEFAULT_QUANTILES)),
        audit_pairs=get_config_value(config, "evaluation.audit_pairs", DEFAULT_AUDIT_PAIRS)
    )
    if args.output:
        report.save(args.output)
    return report


# =============================================================================
# Entry point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Mindset trait derivation, evolution and match ranking"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH} if present)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    derive_parser = subparsers.add_parser("derive", help="Derive traits from questionnaire answers")
    derive_parser.add_argument(
        "--answers", type=str, required=True,
        help="Comma-separated option index per question, e.g. 0,3,1,..."
    )
    derive_parser.add_argument(
        "--allow-partial", action="store_true",
        help="Accept fewer answers than questions"
    )

    evolve_parser = subparsers.add_parser("evolve", help="Apply a chat message to stored traits")
    evolve_parser.add_argument("--vector", type=str, required=True, help="Stored traits as JSON")
    evolve_parser.add_argument("--message", type=str, required=True, help="Chat message text")

    rank_parser = subparsers.add_parser("rank", help="Rank profiles by similarity to a user")
    rank_parser.add_argument("--profiles", type=str, required=True, help="Profile export (.csv or .json)")
    rank_parser.add_argument("--user-id", type=str, required=True, help="Requesting user id")
    rank_parser.add_argument("--community", type=str, default=None, help="Only rank members of this community")
    rank_parser.add_argument("--limit", type=int, default=None, help="Maximum matches to return")
    rank_parser.add_argument("--exclude", type=str, default=None, help="Comma-separated ids to exclude")
    rank_parser.add_argument(
        "--connections", type=str, default=None,
        help="JSON file mapping user id -> connection state"
    )
    rank_parser.add_argument(
        "--format", type=str, choices=["json", "table"], default="json",
        help="Output format"
    )

    report_parser = subparsers.add_parser("report", help="Similarity statistics over a profile export")
    report_parser.add_argument("--profiles", type=str, required=True, help="Profile export (.csv or .json)")
    report_parser.add_argument("--output", type=str, default=None, help="Write the report JSON here")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_runtime_config(args.config)

        if args.command == "derive":
            print(json.dumps(run_derive(args, config), indent=2))
        elif args.command == "evolve":
            print(json.dumps(run_evolve(args, config), indent=2))
        elif args.command == "rank":
            matches, table = run_rank(args, config)
            if args.format == "table":
                print(table.to_string(index=False))
            else:
                print(json.dumps(matches, indent=2))
        elif args.command == "report":
            print(run_report(args, config).summary())
        return 0
    except Exception as e:
        logger.exception(f"Command {args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
