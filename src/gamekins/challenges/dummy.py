"""
Sentinel for rounds where no real challenge could be generated.
"""

from __future__ import annotations

from typing import Any

from gamekins.challenges.base import Challenge
from gamekins.models.base import ChallengeKind, DummyReason
from gamekins.models.files import BuildParameters


class DummyChallenge(Challenge):
    """Sentinel that stands in for a challenge, carrying the reason why.

    Always solvable and always solved, worth nothing, and never kept in the
    completed history.
    """

    kind = ChallengeKind.DUMMY

    def __init__(self, reason: DummyReason | str, branch: str = "") -> None:
        super().__init__(branch)
        self.reason = reason.value if isinstance(reason, DummyReason) else str(reason)

    @property
    def score(self) -> int:
        return 0

    def identity(self) -> tuple:
        return (self.reason,)

    def is_solvable(self, parameters: BuildParameters) -> bool:
        return True

    def is_solved(self, parameters: BuildParameters) -> bool:
        return True

    def _check_solvable(self, parameters: BuildParameters) -> bool:
        return True

    def _check_solved(self, parameters: BuildParameters) -> bool:
        return True

    def _xml_attributes(self) -> dict[str, Any]:
        return {"reason": self.reason}

    def __str__(self) -> str:
        if self.reason == DummyReason.NOTHING_DEVELOPED.value:
            return "You have nothing developed recently"
        return f"No challenge could be generated ({self.reason})"
