"""
Test challenge: add a new test to the project.
"""

from __future__ import annotations

from typing import Any

from gamekins.challenges.base import Challenge
from gamekins.models.base import ChallengeKind
from gamekins.models.files import BuildParameters
from gamekins.reports.junit import count_tests


class TestChallenge(Challenge):
    """Solved once a later commit raises the total number of tests.

    Attributes:
        test_count: Total executed tests at creation
        head_commit: Commit hash at creation
    """

    __test__ = False

    kind = ChallengeKind.TEST

    def __init__(self, branch: str, test_count: int, head_commit: str) -> None:
        super().__init__(branch)
        self.test_count = test_count
        self.head_commit = head_commit

    @property
    def score(self) -> int:
        return 1

    def identity(self) -> tuple:
        return (self.branch, self.test_count, self.head_commit)

    def _check_solvable(self, parameters: BuildParameters) -> bool:
        return True

    def _check_solved(self, parameters: BuildParameters) -> bool:
        if not parameters.head_commit or parameters.head_commit == self.head_commit:
            return False
        current = count_tests(parameters.junit_results_dir, parameters.read_policy)
        return current > self.test_count

    def _xml_attributes(self) -> dict[str, Any]:
        return {"tests": self.test_count}

    def __str__(self) -> str:
        return f"Write a new test in branch {self.branch}"
