"""
Build challenge: get a broken build back to green.
"""

from __future__ import annotations

from gamekins.challenges.base import Challenge
from gamekins.models.base import BuildResult, ChallengeKind
from gamekins.models.files import BuildParameters


class BuildChallenge(Challenge):
    """Issued by the host after a failing build of the user's commit."""

    kind = ChallengeKind.BUILD

    def __init__(self, branch: str, result: BuildResult | None = None) -> None:
        super().__init__(branch)
        self.result = result

    @property
    def score(self) -> int:
        return 1

    def identity(self) -> tuple:
        return (self.branch,)

    def _check_solvable(self, parameters: BuildParameters) -> bool:
        return True

    def _check_solved(self, parameters: BuildParameters) -> bool:
        return parameters.build_result == BuildResult.SUCCESS

    def __str__(self) -> str:
        return f"Let the build run successfully (created for branch {self.branch})"
