"""
Smell challenge: remove one static-analysis finding from a file.
"""

from __future__ import annotations

from typing import Any

from gamekins.challenges.base import Challenge
from gamekins.models.base import ChallengeKind
from gamekins.models.coverage import CoverageSnapshot, SmellRecord
from gamekins.models.files import BuildParameters, FileDetails
from gamekins.reports.base import MalformedReportError
from gamekins.reports.io import read_report_text
from gamekins.reports.smells import find_smell, parse_smells


class SmellChallenge(Challenge):
    """Fix one finding reported by the static analyzer.

    Solved only when the findings file exists, parses and no longer lists
    the finding. A missing findings file makes the challenge unsolvable.
    """

    kind = ChallengeKind.SMELL

    def __init__(self, details: FileDetails, smell: SmellRecord, branch: str) -> None:
        super().__init__(branch, CoverageSnapshot(coverage=details.coverage))
        self.details = details
        self.smell = smell

    @property
    def score(self) -> int:
        return 2

    def identity(self) -> tuple:
        return (self.smell.file_path, self.smell.rule, self.smell.message)

    def _current_smells(self, parameters: BuildParameters) -> list[SmellRecord] | None:
        """Findings of the build, or None if the file is missing."""
        path = parameters.smells_report_file
        text = read_report_text(path, policy=parameters.read_policy)
        if text is None:
            return None
        return parse_smells(text, path)

    def _check_solvable(self, parameters: BuildParameters) -> bool:
        try:
            smells = self._current_smells(parameters)
        except MalformedReportError:
            return True
        return smells is not None and find_smell(smells, self.smell) is not None

    def _check_solved(self, parameters: BuildParameters) -> bool:
        try:
            smells = self._current_smells(parameters)
        except MalformedReportError:
            return False
        return smells is not None and find_smell(smells, self.smell) is None

    def _xml_attributes(self) -> dict[str, Any]:
        attributes: dict[str, Any] = {"file": self.smell.file_path, "rule": self.smell.rule}
        if self.smell.line is not None:
            attributes["line"] = self.smell.line
        return attributes

    def __str__(self) -> str:
        location = f" at line {self.smell.line}" if self.smell.line is not None else ""
        return (
            f"Fix \"{self.smell.message}\" ({self.smell.rule}){location} in file "
            f"{self.details.file_name} in package {self.details.package_name} "
            f"(created for branch {self.branch})"
        )
