"""
Challenge Generators.

One function per drawable kind. Each takes the attempt's data bundle and
returns a challenge, or None when the selected file offers nothing for that
kind. Report errors propagate to the caller, which counts them as a failed
attempt.
"""

from __future__ import annotations

import logging
from typing import Optional

from gamekins.challenges.base import Challenge
from gamekins.challenges.coverage import (
    BranchCoverageChallenge,
    ClassCoverageChallenge,
    ExceptionCoverageChallenge,
    LineCoverageChallenge,
    MethodCoverageChallenge,
)
from gamekins.challenges.mutation import MutationChallenge
from gamekins.challenges.smell import SmellChallenge
from gamekins.challenges.test import TestChallenge
from gamekins.models.base import ChallengeKind
from gamekins.models.files import SourceFileDetails
from gamekins.models.generation import ChallengeGenerationData
from gamekins.reports.base import MalformedReportError
from gamekins.reports.jacoco import (
    SourceReport,
    choose_exception_line,
    choose_random_line,
    choose_random_method,
    load_method_entries,
    load_source_report,
)
from gamekins.reports.junit import count_tests
from gamekins.reports.mutation import alive_mutants, load_mutations, mutants_of_file
from gamekins.reports.smells import load_smells, smells_of_file

logger = logging.getLogger(__name__)


def uncovered_report(data: ChallengeGenerationData) -> Optional[SourceReport]:
    """Load the source page of the selected file if it has uncovered lines.

    Args:
        data: Attempt bundle

    Returns:
        The parsed report, or None if the file is not a source file, has no
        page yet or is fully covered

    Raises:
        MalformedReportError: If the page exists but yields no coverage data
    """
    details = data.selected_file
    if not isinstance(details, SourceFileDetails):
        return None

    path = details.source_report(data.parameters)
    report = load_source_report(path, data.parameters.read_policy)
    if report.is_empty:
        if path.exists():
            raise MalformedReportError("JaCoCo source page has no coverage data", str(path))
        return None
    if not report.has_uncovered_lines:
        return None
    return report


def generate_class_coverage(data: ChallengeGenerationData) -> Optional[Challenge]:
    report = uncovered_report(data)
    if report is None:
        return None
    return ClassCoverageChallenge(data, report)


def generate_line_coverage(data: ChallengeGenerationData) -> Optional[Challenge]:
    report = uncovered_report(data)
    if report is None:
        return None
    line = choose_random_line(report, data.rng)
    if line is None:
        return None
    return LineCoverageChallenge(data.with_line(line), report)


def generate_branch_coverage(data: ChallengeGenerationData) -> Optional[Challenge]:
    report = uncovered_report(data)
    if report is None:
        return None
    line = choose_random_line(report, data.rng, partially=True)
    if line is None:
        return None
    return BranchCoverageChallenge(data.with_line(line), report)


def generate_exception_coverage(data: ChallengeGenerationData) -> Optional[Challenge]:
    report = uncovered_report(data)
    if report is None:
        return None
    line = choose_exception_line(report, data.rng)
    if line is None:
        return None
    return ExceptionCoverageChallenge(data.with_line(line), report)


def generate_method_coverage(data: ChallengeGenerationData) -> Optional[Challenge]:
    report = uncovered_report(data)
    if report is None:
        return None
    details = data.selected_file
    methods = load_method_entries(
        details.method_report(data.parameters), report, policy=data.parameters.read_policy
    )
    method = choose_random_method(methods, data.rng)
    if method is None:
        return None
    return MethodCoverageChallenge(data.with_method(method), report)


def generate_mutation(data: ChallengeGenerationData) -> Optional[Challenge]:
    """Draw one mutant of the selected class that is still alive.

    Runs the mutation tool first when a runner is configured. Without a
    runner the report of the build is used as is.
    """
    details = data.selected_file
    if not isinstance(details, SourceFileDetails):
        return None
    if not details.source_report(data.parameters).exists():
        return None

    if data.mutation_runner is not None and not data.mutation_runner(details, data.parameters):
        data.listener.info(f"Mutation run failed for {details.qualified_name}")
        return None

    mutants = alive_mutants(
        mutants_of_file(
            load_mutations(data.parameters.mutation_report_file, data.parameters.read_policy),
            details,
        )
    )
    if not mutants:
        return None
    return MutationChallenge.from_data(data.with_mutant(data.rng.choice(mutants)))


def generate_smell(data: ChallengeGenerationData) -> Optional[Challenge]:
    smells = smells_of_file(
        load_smells(data.parameters.smells_report_file, data.parameters.read_policy),
        data.selected_file,
    )
    if not smells:
        return None
    return SmellChallenge(data.selected_file, data.rng.choice(smells), data.parameters.branch)


def generate_test(data: ChallengeGenerationData) -> Optional[Challenge]:
    test_count = count_tests(data.parameters.junit_results_dir, data.parameters.read_policy)
    return TestChallenge(data.parameters.branch, test_count, data.parameters.head_commit)


DEFAULT_GENERATORS = {
    ChallengeKind.CLASS_COVERAGE: generate_class_coverage,
    ChallengeKind.LINE_COVERAGE: generate_line_coverage,
    ChallengeKind.BRANCH_COVERAGE: generate_branch_coverage,
    ChallengeKind.METHOD_COVERAGE: generate_method_coverage,
    ChallengeKind.EXCEPTION_COVERAGE: generate_exception_coverage,
    ChallengeKind.MUTATION: generate_mutation,
    ChallengeKind.SMELL: generate_smell,
    ChallengeKind.TEST: generate_test,
}
