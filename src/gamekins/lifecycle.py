"""
Challenge Lifecycle.

Re-evaluates a user's current challenges against a new build:

    CREATED -> SOLVABLE | UNSOLVABLE -> SOLVED | REJECTED | DISCARDED

Solved challenges move to the completed set (a dummy is discarded
instead), unsolvable ones are rejected. The report lists every move so the
host can do its own scoring.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from gamekins.challenges.base import Challenge
from gamekins.challenges.dummy import DummyChallenge
from gamekins.models.files import BuildParameters
from gamekins.state.repository import ChallengeRepository

logger = logging.getLogger(__name__)

NOT_SOLVABLE = "Not solvable"


class LifecycleState(str, Enum):
    """State of a challenge in its lifecycle."""

    CREATED = "created"
    SOLVABLE = "solvable"
    UNSOLVABLE = "unsolvable"
    SOLVED = "solved"
    REJECTED = "rejected"
    DISCARDED = "discarded"


@dataclass
class LifecycleReport:
    """Outcome of one lifecycle update.

    Attributes:
        user: User whose challenges were evaluated
        project: Project of the challenges
        solved: Challenges moved to completed
        rejected: Challenges moved to rejected
        discarded: Dummy challenges removed without history
        unchanged: Challenges that stay current
    """

    user: str
    project: str
    solved: list[Challenge] = field(default_factory=list)
    rejected: list[Challenge] = field(default_factory=list)
    discarded: list[Challenge] = field(default_factory=list)
    unchanged: list[Challenge] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.solved or self.rejected or self.discarded)

    @property
    def score(self) -> int:
        """Points of the challenges solved in this update."""
        return sum(challenge.score for challenge in self.solved)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "user": self.user,
            "project": self.project,
            "solved": [str(c) for c in self.solved],
            "rejected": [str(c) for c in self.rejected],
            "discarded": [str(c) for c in self.discarded],
            "unchanged": len(self.unchanged),
        }


class ChallengeLifecycle:
    """Evaluates challenges on demand at each build.

    Usage:
        lifecycle = ChallengeLifecycle()
        report = lifecycle.update(repository, "alice", parameters)
        for challenge in report.solved:
            ...
    """

    def evaluate(self, challenge: Challenge, parameters: BuildParameters) -> LifecycleState:
        """Evaluate one challenge: solved first, then solvable.

        Args:
            challenge: Challenge to evaluate
            parameters: Build to evaluate against

        Returns:
            SOLVED, SOLVABLE or UNSOLVABLE
        """
        if challenge.is_solved(parameters):
            return LifecycleState.SOLVED
        if challenge.is_solvable(parameters):
            return LifecycleState.SOLVABLE
        return LifecycleState.UNSOLVABLE

    def update(
        self,
        repository: ChallengeRepository,
        user: str,
        parameters: BuildParameters,
    ) -> LifecycleReport:
        """Evaluate and move all current challenges of a user.

        Args:
            repository: Per-user challenge state
            user: User to update
            parameters: Build to evaluate against

        Returns:
            LifecycleReport of the moves
        """
        project = parameters.project_name
        report = LifecycleReport(user=user, project=project)

        for challenge in repository.current(user, project):
            state = self.evaluate(challenge, parameters)
            if state == LifecycleState.SOLVED:
                if not repository.complete_challenge(user, project, challenge):
                    continue
                if isinstance(challenge, DummyChallenge):
                    report.discarded.append(challenge)
                else:
                    report.solved.append(challenge)
                    logger.info(f"Solved challenge of {user}: {challenge}")
            elif state == LifecycleState.UNSOLVABLE:
                if repository.reject_challenge(user, project, challenge, NOT_SOLVABLE):
                    report.rejected.append(challenge)
            else:
                report.unchanged.append(challenge)

        return report
