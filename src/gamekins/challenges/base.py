"""
Challenge base class.

A challenge is a single verifiable goal tied to a coverage, mutation, smell
or build fact. It snapshots the fact at creation and later re-reads the
reports of a build to decide whether the goal is still reachable
(``is_solvable``) or has been reached (``is_solved``).

Challenges are immutable apart from the solved stamp, which the first
successful ``is_solved`` call writes exactly once.
"""

from __future__ import annotations

import logging
import time
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from gamekins.models.base import ChallengeKind
from gamekins.models.coverage import CoverageSnapshot
from gamekins.models.files import BuildParameters

logger = logging.getLogger(__name__)


def current_millis() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


class Challenge(ABC):
    """Base class for all challenge variants.

    Attributes:
        kind: Kind tag of the variant
        branch: Branch the challenge was generated against
        created: Creation time in epoch milliseconds
        solved: Solve time in epoch milliseconds, 0 while unsolved
        solved_coverage: Class coverage ratio at solve time
        snapshot: Coverage of the targeted class at creation
    """

    kind: ClassVar[ChallengeKind]

    def __init__(self, branch: str, snapshot: CoverageSnapshot | None = None) -> None:
        self.branch = branch
        self.created = current_millis()
        self.solved = 0
        self.solved_coverage = 0.0
        self.snapshot = snapshot or CoverageSnapshot()

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    @abstractmethod
    def score(self) -> int:
        """Points awarded when the challenge is solved."""

    @property
    def built_correctly(self) -> bool:
        """Whether construction captured everything the checks need."""
        return True

    @property
    def is_stamped(self) -> bool:
        return self.solved != 0

    @abstractmethod
    def identity(self) -> tuple:
        """Fields that make two challenges of the same kind equal."""

    @abstractmethod
    def _check_solvable(self, parameters: BuildParameters) -> bool:
        """Kind-specific solvability check on the challenge's own branch."""

    @abstractmethod
    def _check_solved(self, parameters: BuildParameters) -> bool:
        """Kind-specific solve check on the challenge's own branch."""

    def _coverage_at_solve(self, parameters: BuildParameters) -> float:
        return 0.0

    def is_solvable(self, parameters: BuildParameters) -> bool:
        """Check whether the goal can still be reached in this build.

        Builds of another branch cannot prove anything about this one, so
        the challenge stays solvable there.

        Args:
            parameters: Build to evaluate against

        Returns:
            True if the challenge should stay in the current set
        """
        if parameters.branch != self.branch:
            return True
        return self._check_solvable(parameters)

    def is_solved(self, parameters: BuildParameters) -> bool:
        """Check whether the goal has been reached in this build.

        The first positive check stamps the solve time and the coverage at
        solve time. Later calls return True without stamping again.

        Args:
            parameters: Build to evaluate against

        Returns:
            True if the challenge is solved
        """
        if self.is_stamped:
            return True
        if parameters.branch != self.branch:
            return False
        if not self._check_solved(parameters):
            return False
        self.mark_solved(self._coverage_at_solve(parameters))
        logger.debug(f"Stamped {self.name} as solved: {self}")
        return True

    def mark_solved(self, coverage: float = 0.0, solved_at: int | None = None) -> bool:
        """Stamp the solve time and coverage once.

        Returns:
            True if this call wrote the stamp
        """
        if self.is_stamped:
            return False
        self.solved = max(solved_at or current_millis(), 1)
        self.solved_coverage = coverage
        return True

    def _xml_attributes(self) -> dict[str, Any]:
        return {}

    def serialize(self, reason: str = "", indent: str = "") -> str:
        """Render the challenge as one XML element for the audit log.

        Args:
            reason: Optional reason, e.g. why the challenge was rejected
            indent: Prefix for the element

        Returns:
            A single self-closing XML element
        """
        attributes = {
            "created": self.created,
            "solved": self.solved,
            "branch": self.branch,
            "score": self.score,
            "coverage": self.snapshot.coverage,
            "coverageAtSolved": self.solved_coverage,
        }
        attributes.update(self._xml_attributes())
        if reason:
            attributes["reason"] = reason
        element = ET.Element(self.name, {key: str(value) for key, value in attributes.items()})
        return indent + ET.tostring(element, encoding="unicode")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Challenge):
            return NotImplemented
        return type(self) is type(other) and self.identity() == other.identity()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.identity()))

    def __repr__(self) -> str:
        return f"<{self.name} {self.identity()!r} branch={self.branch!r}>"
