"""Shared fixtures for mindset engine tests."""

import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mindset.similarity import MatchCandidate
from mindset.traits import TraitVector, TRAIT_DIMENSIONS

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def uniform_vector(value: int) -> TraitVector:
    """Vector with every dimension set to the same score."""
    return TraitVector(**{dim: value for dim in TRAIT_DIMENSIONS})


@pytest.fixture
def scenario_a_vector():
    return TraitVector(
        analytical=80, creative=20, emotional=50,
        logical=70, risk_taking=30, collaborative=60
    )


@pytest.fixture
def candidates():
    """Small population with known scores against the neutral vector."""
    return [
        MatchCandidate(id="far", name="Far", username="far", traits=uniform_vector(90)),
        MatchCandidate(id="near", name="Near", username="near", traits=uniform_vector(55),
                       joined_communities=["c1"]),
        MatchCandidate(id="same", name="Same", username="same", traits=uniform_vector(50),
                       joined_communities=["c1", "c2"]),
        MatchCandidate(id="mid", name="Mid", username="mid", traits=uniform_vector(70),
                       joined_communities=["c2"]),
        MatchCandidate(id="near_too", name="Near Too", username="near_too", traits=uniform_vector(45),
                       joined_communities=["c1"]),
    ]
