"""
Candidate ranking by mindset similarity.

Ranking steps:
1. Drop candidates whose id is excluded (the requester, and usually
   anyone already connected or with a pending request)
2. Optionally keep only members of one community
3. Score every remaining candidate against the requester in one
   vectorized pass
4. Sort by score, highest first, keeping input order among equal scores
5. Truncate to the requested limit

Ranking is read-only: nothing is persisted, scores are recomputed on
every request.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Iterable, List, Mapping, Optional, Sequence, Set

import numpy as np
import pandas as pd

from ..traits.schema import TraitVector, TRAIT_DIMENSIONS
from .scoring import coerce_vector, similarity_batch, stack_vectors

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection status between the requester and another user."""
    NONE = "none"
    PENDING_SENT = "pending_sent"
    PENDING_RECEIVED = "pending_received"
    CONNECTED = "connected"


DEFAULT_EXCLUDE_STATES = (
    ConnectionState.CONNECTED,
    ConnectionState.PENDING_SENT,
    ConnectionState.PENDING_RECEIVED,
)


@dataclass
class MatchCandidate:
    """
    Public projection of another user, used as ranking input.

    Attributes:
        id: User identifier
        name: Display name
        username: Handle
        avatar_url: Avatar reference, if any
        traits: Stored trait vector; None or a malformed mapping scores as neutral
        joined_communities: Ids of communities the user belongs to
    """
    id: str
    name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    traits: Optional[Any] = None
    joined_communities: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        traits = self.traits
        if isinstance(traits, TraitVector):
            traits = traits.to_dict()
        return {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "avatar_url": self.avatar_url,
            "traits": traits,
            "joined_communities": list(self.joined_communities)
        }


@dataclass
class RankedMatch:
    """
    A candidate with its similarity to the requester.

    Attributes:
        candidate: The ranked candidate
        similarity: Integer score in [0, 100]
    """
    candidate: MatchCandidate
    similarity: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        result = self.candidate.to_dict()
        result["similarity"] = self.similarity
        return result


@dataclass
class RankingConfig:
    """
    Configuration for match ranking.

    Attributes:
        default_limit: Number of matches returned when the caller gives no limit
            (None returns every candidate)
        exclude_states: Connection states whose users are left out of suggestions
    """
    default_limit: Optional[int] = None
    exclude_states: Sequence[ConnectionState] = DEFAULT_EXCLUDE_STATES

    def validate(self) -> None:
        """Validate configuration values."""
        if self.default_limit is not None and self.default_limit < 0:
            raise ValueError(f"default_limit must be non-negative, got {self.default_limit}")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "RankingConfig":
        """Create from main config dictionary."""
        ranking_config = config.get("ranking", {}) or {}
        states = ranking_config.get("exclude_states")
        if states is None:
            exclude_states = DEFAULT_EXCLUDE_STATES
        else:
            exclude_states = tuple(ConnectionState(s) for s in states)

        return cls(
            default_limit=ranking_config.get("default_limit"),
            exclude_states=exclude_states
        )


def filter_by_community(
    candidates: Iterable[MatchCandidate],
    community_id: str
) -> List[MatchCandidate]:
    """Keep only candidates who joined the given community."""
    return [c for c in candidates if community_id in (c.joined_communities or [])]


def build_exclusions(
    requester_id: Optional[str],
    connection_states: Optional[Mapping[str, Any]] = None,
    exclude_states: Sequence[ConnectionState] = DEFAULT_EXCLUDE_STATES
) -> Set[str]:
    """
    Build the set of user ids to leave out of match suggestions.

    Args:
        requester_id: The requesting user's id (always excluded)
        connection_states: Mapping of other user id -> ConnectionState (or its value)
        exclude_states: States that exclude a user

    Returns:
        Set of excluded ids
    """
    excluded = set()
    if requester_id is not None:
        excluded.add(requester_id)

    excluded_values = {ConnectionState(s) for s in exclude_states}
    for user_id, state in (connection_states or {}).items():
        if ConnectionState(state) in excluded_values:
            excluded.add(user_id)
    return excluded


def rank(
    requester: Optional[Any],
    candidates: Iterable[MatchCandidate],
    exclude_ids: Iterable[str] = (),
    limit: Optional[int] = None,
    community_id: Optional[str] = None
) -> List[RankedMatch]:
    """
    Rank candidates by similarity to the requester.

    Args:
        requester: Requesting user's vector (TraitVector, stored mapping, or None)
        candidates: Candidates to score, in their input order
        exclude_ids: Candidate ids to leave out
        limit: If given, return at most this many matches
        community_id: If given, only rank members of this community

    Returns:
        RankedMatch list sorted by similarity, highest first; equal scores
        keep their input order
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    requester_vector = coerce_vector(requester, owner="requester")
    excluded = set(exclude_ids)

    pool = [c for c in candidates if c.id not in excluded]
    if community_id is not None:
        pool = filter_by_community(pool, community_id)

    if not pool:
        return []

    vectors = [coerce_vector(c.traits, owner=f"candidate {c.id}") for c in pool]
    scores = similarity_batch(requester_vector, stack_vectors(vectors))

    # Stable sort on negated scores keeps input order among ties
    order = np.argsort(-scores, kind="stable")
    if limit is not None:
        order = order[:limit]

    ranked = [RankedMatch(candidate=pool[i], similarity=int(scores[i])) for i in order]
    logger.debug(f"Ranked {len(pool)} candidates, returning {len(ranked)}")
    return ranked


def ranking_to_frame(ranked: Sequence[RankedMatch]) -> pd.DataFrame:
    """
    Tabulate a ranking for display or export.

    Args:
        ranked: Output of rank()

    Returns:
        DataFrame with id, name, username, similarity and one column per
        trait dimension
    """
    rows = []
    for match in ranked:
        traits = coerce_vector(match.candidate.traits).to_dict()
        row = {
            "id": match.candidate.id,
            "name": match.candidate.name,
            "username": match.candidate.username,
            "similarity": match.similarity,
        }
        row.update(traits)
        rows.append(row)

    columns = ["id", "name", "username", "similarity"] + list(TRAIT_DIMENSIONS)
    return pd.DataFrame(rows, columns=columns)
