"""
Coverage challenges.

All of them target one source file and read its JaCoCo pages. A missing or
unreadable page means "cannot evaluate now": the challenge stays solvable
but is not solved.
"""

from __future__ import annotations

from typing import Any

from gamekins.challenges.base import Challenge
from gamekins.models.base import ChallengeKind, CoverageStatus
from gamekins.models.coverage import CoverageSnapshot, LineCoverage, MethodCoverage
from gamekins.models.files import BuildParameters, SourceFileDetails
from gamekins.models.generation import ChallengeGenerationData
from gamekins.reports.jacoco import (
    SourceReport,
    find_method,
    load_method_entries,
    load_source_report,
    read_class_coverage,
)

HIGH_COVERAGE = 0.8


class CoverageChallenge(Challenge):
    """Common part of the challenges that target a source file's coverage."""

    def __init__(self, data: ChallengeGenerationData, report: SourceReport) -> None:
        details = data.selected_file
        if not isinstance(details, SourceFileDetails):
            raise TypeError(f"{type(self).__name__} needs a source file, got {details.file_type}")
        snapshot = CoverageSnapshot.from_class(
            report.class_coverage(details.file_name, details.package_name, details.coverage)
        )
        super().__init__(data.parameters.branch, snapshot)
        self.details = details

    def _load_report(self, parameters: BuildParameters) -> SourceReport:
        return load_source_report(self.details.source_report(parameters), parameters.read_policy)

    def _read_coverage(self, parameters: BuildParameters) -> float | None:
        return read_class_coverage(
            parameters.jacoco_csv_file,
            self.details.package_name,
            self.details.file_name,
            policy=parameters.read_policy,
        )

    def _coverage_at_solve(self, parameters: BuildParameters) -> float:
        coverage = self._read_coverage(parameters)
        return coverage if coverage is not None else 0.0

    def _location(self) -> str:
        return (
            f"in class {self.details.file_name} in package {self.details.package_name} "
            f"(created for branch {self.branch})"
        )

    def _xml_attributes(self) -> dict[str, Any]:
        return {"class": self.details.file_name, "package": self.details.package_name}


class ClassCoverageChallenge(CoverageChallenge):
    """Raise the line coverage of a whole class."""

    kind = ChallengeKind.CLASS_COVERAGE

    def __init__(self, data: ChallengeGenerationData, report: SourceReport) -> None:
        super().__init__(data, report)
        # 0.0 is also what the host hands over when it had no CSV
        if self.details.coverage == 0.0:
            coverage = self._read_coverage(data.parameters)
            if coverage is None:
                coverage = report.class_coverage(self.details.file_name).coverage
            self.snapshot = self.snapshot.model_copy(update={"coverage": coverage})

    @property
    def score(self) -> int:
        return 1

    def identity(self) -> tuple:
        return (self.details.package_name, self.details.file_name)

    def _check_solvable(self, parameters: BuildParameters) -> bool:
        report = self._load_report(parameters)
        if report.is_empty:
            return True
        return report.has_uncovered_lines

    def _check_solved(self, parameters: BuildParameters) -> bool:
        coverage = self._read_coverage(parameters)
        return coverage is not None and coverage > self.snapshot.coverage

    def __str__(self) -> str:
        return f"Write a test to cover more lines {self._location()}"


class LineCoverageChallenge(CoverageChallenge):
    """Cover one not or partially covered line.

    The line is remembered by number, text and marker. Branch lines also
    remember how many of their branches were covered at creation.
    """

    kind = ChallengeKind.LINE_COVERAGE

    def __init__(self, data: ChallengeGenerationData, report: SourceReport) -> None:
        if data.line is None:
            raise ValueError(f"{type(self).__name__} needs a pre-picked line")
        super().__init__(data, report)
        self.line: LineCoverage = data.line
        self.current_covered_branches = data.line.covered_branches
        self.max_covered_branches = data.line.total_branches

    @property
    def score(self) -> int:
        partially = self.line.status == CoverageStatus.PARTIALLY_COVERED
        return 3 if partially or self.snapshot.coverage >= HIGH_COVERAGE else 2

    @property
    def built_correctly(self) -> bool:
        return bool(self.line.text) and self.line.status != CoverageStatus.FULLY_COVERED

    def identity(self) -> tuple:
        return (
            self.details.package_name,
            self.details.file_name,
            self.line.number,
            self.line.text,
            self.line.status,
        )

    def _check_solvable(self, parameters: BuildParameters) -> bool:
        report = self._load_report(parameters)
        if report.is_empty:
            return True
        return report.contains_uncovered_text(self.line.text)

    def _check_solved(self, parameters: BuildParameters) -> bool:
        report = self._load_report(parameters)
        if report.is_empty:
            return False
        match = report.find_match(self.line)
        if match is None or match.status == CoverageStatus.NOT_COVERED:
            return False
        return self._improved(match)

    def _improved(self, match: LineCoverage) -> bool:
        """Whether the matched line has more covered branches than at creation."""
        tokens = match.title.split()
        if tokens and tokens[0] == "All":
            return False
        if self.max_covered_branches > 1:
            return match.covered_branches > self.current_covered_branches
        return True

    def _description(self) -> str:
        if self.max_covered_branches > 1:
            return (
                f"Write a test to cover more branches (currently {self.current_covered_branches} "
                f"of {self.max_covered_branches} covered) of line {self.line.number}"
            )
        return f"Write a test to fully cover line {self.line.number}"

    def _xml_attributes(self) -> dict[str, Any]:
        attributes = super()._xml_attributes()
        attributes.update(line=self.line.number, coverageType=self.line.status.value)
        return attributes

    def __str__(self) -> str:
        return f"{self._description()} {self._location()}"


class BranchCoverageChallenge(LineCoverageChallenge):
    """Cover more branches of a partially covered line."""

    kind = ChallengeKind.BRANCH_COVERAGE

    def _description(self) -> str:
        return (
            f"Write a test to cover more branches (currently {self.current_covered_branches} "
            f"of {self.max_covered_branches} covered) of line {self.line.number}"
        )


class ExceptionCoverageChallenge(LineCoverageChallenge):
    """Cover a line that throws, catches or declares an exception."""

    kind = ChallengeKind.EXCEPTION_COVERAGE

    def _description(self) -> str:
        return f"Write a test to cover the exception handling of line {self.line.number}"


class MethodCoverageChallenge(CoverageChallenge):
    """Fully cover one method."""

    kind = ChallengeKind.METHOD_COVERAGE

    def __init__(self, data: ChallengeGenerationData, report: SourceReport) -> None:
        if data.method is None:
            raise ValueError(f"{type(self).__name__} needs a pre-picked method")
        super().__init__(data, report)
        self.method: MethodCoverage = data.method

    @property
    def score(self) -> int:
        return 3 if self.method.coverage >= HIGH_COVERAGE else 2

    @property
    def built_correctly(self) -> bool:
        return self.method.total_lines > 0 and self.method.missed_lines > 0

    def identity(self) -> tuple:
        return (self.details.package_name, self.details.file_name, self.method.name)

    def _current_method(self, parameters: BuildParameters) -> tuple[bool, MethodCoverage | None]:
        """Look the method up in the current reports.

        Returns:
            Tuple of (reports available, method or None)
        """
        report = self._load_report(parameters)
        if report.is_empty:
            return False, None
        methods = load_method_entries(
            self.details.method_report(parameters), report, policy=parameters.read_policy
        )
        if not methods:
            return False, None
        return True, find_method(methods, self.method.name)

    def _check_solvable(self, parameters: BuildParameters) -> bool:
        available, method = self._current_method(parameters)
        if not available:
            return True
        if method is None:
            return False
        return method.missed_lines > 0

    def _check_solved(self, parameters: BuildParameters) -> bool:
        available, method = self._current_method(parameters)
        if not available or method is None:
            return False
        return method.missed_lines == 0

    def _xml_attributes(self) -> dict[str, Any]:
        attributes = super()._xml_attributes()
        attributes.update(method=self.method.name, missedLines=self.method.missed_lines)
        return attributes

    def __str__(self) -> str:
        return (
            f"Write a test to cover more lines ({self.method.missed_lines} of "
            f"{self.method.total_lines} missed) of method {self.method.name} {self._location()}"
        )
