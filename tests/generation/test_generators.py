"""Tests for the per-kind challenge generators."""

import logging
from unittest import mock

import pytest

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
from gamekins.generation.generators import (
    generate_branch_coverage,
    generate_class_coverage,
    generate_exception_coverage,
    generate_line_coverage,
    generate_method_coverage,
    generate_mutation,
    generate_smell,
    generate_test,
    uncovered_report,
)
from gamekins.models.generation import ChallengeGenerationData
from gamekins.reports.base import MalformedReportError
from tests.fixtures.files import make_test_file
from tests.fixtures.reports import CART_LINES, CART_PATH, mutation


def fully_covered():
    return [(n, "fc", text, "") for n, _, text, _ in CART_LINES]


class TestUncoveredReport:
    """Tests for uncovered_report."""

    def test_returns_report(self, cart_data, cart_workspace):
        report = uncovered_report(cart_data)
        assert report is not None
        assert len(report.lines) == 5

    def test_test_file(self, cart_data, cart_workspace):
        data = ChallengeGenerationData(
            parameters=cart_data.parameters,
            user="alice",
            selected_file=make_test_file("CartTest"),
        )
        assert uncovered_report(data) is None

    def test_missing_page(self, cart_data):
        assert uncovered_report(cart_data) is None

    def test_fully_covered(self, cart_data, cart_workspace, cart_details):
        cart_workspace.write_source_page(cart_details, fully_covered())
        assert uncovered_report(cart_data) is None

    def test_page_without_data(self, cart_data, cart_workspace, cart_details):
        """A page that exists but has no coverage spans is malformed."""
        cart_workspace.write_source_page(cart_details, [])
        with pytest.raises(MalformedReportError):
            uncovered_report(cart_data)


class TestCoverageGenerators:
    """Tests for the coverage generators."""

    def test_class(self, cart_data, cart_workspace):
        assert isinstance(generate_class_coverage(cart_data), ClassCoverageChallenge)

    def test_line(self, cart_data, cart_workspace):
        challenge = generate_line_coverage(cart_data)
        assert isinstance(challenge, LineCoverageChallenge)
        assert challenge.line.number in {7, 8, 13}
        assert challenge.built_correctly

    def test_branch(self, cart_data, cart_workspace):
        challenge = generate_branch_coverage(cart_data)
        assert isinstance(challenge, BranchCoverageChallenge)
        assert challenge.line.number == 7

    def test_branch_without_partial_lines(self, cart_data, cart_workspace, cart_details):
        lines = [entry for entry in CART_LINES if entry[1] != "pc"]
        cart_workspace.write_source_page(cart_details, lines)
        assert generate_branch_coverage(cart_data) is None

    def test_exception(self, cart_data, cart_workspace):
        challenge = generate_exception_coverage(cart_data)
        assert isinstance(challenge, ExceptionCoverageChallenge)
        assert challenge.line.number == 8

    def test_method(self, cart_data, cart_workspace):
        challenge = generate_method_coverage(cart_data)
        assert isinstance(challenge, MethodCoverageChallenge)
        assert challenge.method.name in {"add(Item)", "total()"}

    def test_method_without_class_page(self, cart_data, cart_workspace, cart_details, parameters):
        cart_details.method_report(parameters).unlink()
        assert generate_method_coverage(cart_data) is None

    def test_fully_covered_class(self, cart_data, cart_workspace, cart_details):
        cart_workspace.write_source_page(cart_details, fully_covered())
        assert generate_line_coverage(cart_data) is None
        assert generate_class_coverage(cart_data) is None


class TestMutationGenerator:
    """Tests for generate_mutation."""

    def test_draws_alive_mutant(self, cart_data, cart_workspace):
        cart_workspace.write_mutations(
            [
                mutation("org.example.Cart", line=7, status="KILLED"),
                mutation("org.example.Cart", line=8, status="SURVIVED"),
                mutation("org.example.Item", line=3, status="SURVIVED"),
            ]
        )
        challenge = generate_mutation(cart_data)
        assert isinstance(challenge, MutationChallenge)
        assert challenge.mutant.line_number == 8

    def test_all_killed(self, cart_data, cart_workspace):
        cart_workspace.write_mutations([mutation("org.example.Cart", status="KILLED")])
        assert generate_mutation(cart_data) is None

    def test_missing_report(self, cart_data, cart_workspace):
        assert generate_mutation(cart_data) is None

    def test_without_source_page(self, cart_data, reports):
        reports.write_mutations([mutation("org.example.Cart")])
        assert generate_mutation(cart_data) is None

    def test_runner_invoked(self, cart_data, cart_workspace, cart_details):
        cart_workspace.write_mutations([mutation("org.example.Cart")])
        runner = mock.Mock(return_value=True)
        data = ChallengeGenerationData(
            parameters=cart_data.parameters,
            user="alice",
            selected_file=cart_details,
            mutation_runner=runner,
        )
        assert isinstance(generate_mutation(data), MutationChallenge)
        runner.assert_called_once_with(cart_details, cart_data.parameters)

    def test_runner_failure(self, cart_data, cart_workspace, cart_details):
        """A failed mutation run yields nothing and tells the listener."""
        cart_workspace.write_mutations([mutation("org.example.Cart")])
        listener = mock.Mock(spec=logging.Logger)
        data = ChallengeGenerationData(
            parameters=cart_data.parameters,
            user="alice",
            selected_file=cart_details,
            listener=listener,
            mutation_runner=mock.Mock(return_value=False),
        )
        assert generate_mutation(data) is None
        listener.info.assert_called_once()


class TestSmellGenerator:
    """Tests for generate_smell."""

    def test_draws_finding_of_file(self, cart_data, reports):
        reports.write_smells(
            [
                (CART_PATH, "S1481", "Remove unused variable", 12),
                ("src/main/java/org/example/Item.java", "S100", "Rename", 3),
            ]
        )
        challenge = generate_smell(cart_data)
        assert isinstance(challenge, SmellChallenge)
        assert challenge.smell.rule == "S1481"

    def test_no_findings_for_file(self, cart_data, reports):
        reports.write_smells([("src/main/java/org/example/Item.java", "S100", "Rename", 3)])
        assert generate_smell(cart_data) is None

    def test_malformed_findings(self, cart_data, reports):
        reports.write_smells_text("[{")
        assert generate_smell(cart_data) is None


class TestTestGenerator:
    """Tests for generate_test."""

    def test_counts_current_tests(self, cart_data, reports):
        reports.write_junit("org.example.CartTest", ["a", "b"])
        challenge = generate_test(cart_data)
        assert isinstance(challenge, TestChallenge)
        assert challenge.test_count == 2
        assert challenge.head_commit == "a1b2c3d"
