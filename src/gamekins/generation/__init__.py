"""
Gamekins - Challenge Generation

Candidate selection, the challenge-type registry, one generator per kind
and the factory that retries and falls back around them.
"""

from gamekins.generation.factory import AttemptOutcome, ChallengeFactory
from gamekins.generation.registry import (
    ChallengeGenerator,
    ChallengeTypeRegistry,
    RegistryConfigurationError,
    create_default_registry,
)
from gamekins.generation.selection import (
    initialize_rank_selection,
    rank_select,
    select_candidate,
)

__all__ = [
    # Factory
    "AttemptOutcome",
    "ChallengeFactory",
    # Registry
    "ChallengeGenerator",
    "ChallengeTypeRegistry",
    "RegistryConfigurationError",
    "create_default_registry",
    # Selection
    "initialize_rank_selection",
    "rank_select",
    "select_candidate",
]
