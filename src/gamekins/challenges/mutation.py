"""
Mutation challenge: kill one surviving mutant of a class.
"""

from __future__ import annotations

from typing import Any

from gamekins.challenges.base import Challenge
from gamekins.models.base import ChallengeKind, MutationStatus
from gamekins.models.coverage import CoverageSnapshot, MutationRecord
from gamekins.models.files import BuildParameters, SourceFileDetails
from gamekins.models.generation import ChallengeGenerationData
from gamekins.reports.jacoco import read_class_coverage
from gamekins.reports.mutation import find_mutant, load_mutations


class MutationChallenge(Challenge):
    """Write a test that detects one mutant PIT reported as alive.

    A missing report makes the challenge unsolvable.
    """

    kind = ChallengeKind.MUTATION

    def __init__(self, details: SourceFileDetails, mutant: MutationRecord, branch: str) -> None:
        super().__init__(branch, CoverageSnapshot(coverage=details.coverage))
        self.details = details
        self.mutant = mutant

    @classmethod
    def from_data(cls, data: ChallengeGenerationData) -> "MutationChallenge":
        """Build the challenge from a bundle with a pre-picked mutant."""
        if data.mutant is None:
            raise ValueError("MutationChallenge needs a pre-picked mutant")
        if not isinstance(data.selected_file, SourceFileDetails):
            raise TypeError(f"MutationChallenge needs a source file, got {data.selected_file.file_type}")
        return cls(data.selected_file, data.mutant, data.parameters.branch)

    @property
    def score(self) -> int:
        return 4

    @property
    def built_correctly(self) -> bool:
        return bool(self.mutant.mutated_class) and self.mutant.status != MutationStatus.KILLED

    def identity(self) -> tuple:
        return (
            self.mutant.mutated_class,
            self.mutant.mutated_method,
            self.mutant.method_description,
            self.mutant.line_number,
            self.mutant.mutator,
            self.mutant.description,
        )

    def _current(self, parameters: BuildParameters) -> MutationRecord | None:
        mutants = load_mutations(parameters.mutation_report_file, parameters.read_policy)
        return find_mutant(mutants, self.mutant)

    def _check_solvable(self, parameters: BuildParameters) -> bool:
        current = self._current(parameters)
        return current is not None and current.status != MutationStatus.KILLED

    def _check_solved(self, parameters: BuildParameters) -> bool:
        current = self._current(parameters)
        return current is not None and current.status == MutationStatus.KILLED

    def _coverage_at_solve(self, parameters: BuildParameters) -> float:
        coverage = read_class_coverage(
            parameters.jacoco_csv_file,
            self.details.package_name,
            self.details.file_name,
            policy=parameters.read_policy,
        )
        return coverage if coverage is not None else 0.0

    def _xml_attributes(self) -> dict[str, Any]:
        return {
            "class": self.details.file_name,
            "package": self.details.package_name,
            "method": self.mutant.mutated_method,
            "line": self.mutant.line_number,
            "mutator": self.mutant.mutator_name,
        }

    def __str__(self) -> str:
        return (
            f"Write a test to kill the mutant \"{self.mutant.description}\" at line "
            f"{self.mutant.line_number} of method {self.mutant.mutated_method} in class "
            f"{self.details.file_name} in package {self.details.package_name} "
            f"(created for branch {self.branch})"
        )
