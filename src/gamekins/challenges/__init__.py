"""
Gamekins - Challenges

One class per challenge kind. Each snapshots its target at creation and
re-reads the build reports to decide whether it is still solvable or solved.
"""

from gamekins.challenges.base import Challenge, current_millis
from gamekins.challenges.build import BuildChallenge
from gamekins.challenges.coverage import (
    BranchCoverageChallenge,
    ClassCoverageChallenge,
    CoverageChallenge,
    ExceptionCoverageChallenge,
    LineCoverageChallenge,
    MethodCoverageChallenge,
)
from gamekins.challenges.dummy import DummyChallenge
from gamekins.challenges.mutation import MutationChallenge
from gamekins.challenges.smell import SmellChallenge
from gamekins.challenges.test import TestChallenge

__all__ = [
    "Challenge",
    "current_millis",
    # Coverage
    "CoverageChallenge",
    "ClassCoverageChallenge",
    "LineCoverageChallenge",
    "BranchCoverageChallenge",
    "ExceptionCoverageChallenge",
    "MethodCoverageChallenge",
    # Others
    "MutationChallenge",
    "SmellChallenge",
    "TestChallenge",
    "BuildChallenge",
    "DummyChallenge",
]
