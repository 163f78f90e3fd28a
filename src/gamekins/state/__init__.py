"""
Gamekins - Challenge State

Host-owned per-user challenge sets with atomic transitions.
"""

from gamekins.state.repository import (
    ChallengeRepository,
    ChallengeSet,
    ProjectChallenges,
    RejectedChallenge,
)

__all__ = [
    "ChallengeRepository",
    "ChallengeSet",
    "ProjectChallenges",
    "RejectedChallenge",
]
