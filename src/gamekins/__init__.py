"""
Gamekins: Challenge Generation & Lifecycle Engine.

Turns code-coverage, mutation and static-analysis reports produced by a build
into verifiable challenges for the contributors who changed the code, and
re-evaluates those challenges at every later build.

Key Features:
- Rank selection of the changed file that receives a challenge
- Weighted registry of challenge kinds with one generator per kind
- Tolerant parsing of JaCoCo, PIT, JUnit and smell reports
- Bounded retry with an explicit "no challenge" sentinel

Example:
    from gamekins import ChallengeFactory, ChallengeRepository

    factory = ChallengeFactory.from_config(config)
    repository = ChallengeRepository()
    factory.generate_new_challenges("alice", parameters, files, repository)
"""

from gamekins.challenges import Challenge, DummyChallenge
from gamekins.generation.factory import ChallengeFactory
from gamekins.lifecycle import ChallengeLifecycle, LifecycleState
from gamekins.state.repository import ChallengeRepository
from gamekins.version import __version__

__all__ = [
    "__version__",
    "Challenge",
    "ChallengeFactory",
    "ChallengeLifecycle",
    "ChallengeRepository",
    "DummyChallenge",
    "LifecycleState",
]
