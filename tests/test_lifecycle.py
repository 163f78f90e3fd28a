"""Tests for the challenge lifecycle update."""

import pytest

from gamekins.challenges.build import BuildChallenge
from gamekins.challenges.dummy import DummyChallenge
from gamekins.challenges.mutation import MutationChallenge
from gamekins.challenges.test import TestChallenge
from gamekins.lifecycle import NOT_SOLVABLE, ChallengeLifecycle, LifecycleState
from gamekins.models.base import BuildResult, DummyReason
from gamekins.reports.mutation import parse_mutation_report
from tests.fixtures.reports import mutation, mutations_xml


@pytest.fixture
def lifecycle():
    return ChallengeLifecycle()


@pytest.fixture
def succeeded(parameters):
    return parameters.model_copy(update={"build_result": BuildResult.SUCCESS})


@pytest.fixture
def cart_mutant():
    (record,) = parse_mutation_report(mutations_xml([mutation("org.example.Cart")]))
    return record


class TestEvaluate:
    """Tests for single challenge evaluation."""

    def test_solved(self, lifecycle, succeeded):
        assert lifecycle.evaluate(BuildChallenge("master"), succeeded) == LifecycleState.SOLVED

    def test_solvable(self, lifecycle, parameters):
        assert lifecycle.evaluate(BuildChallenge("master"), parameters) == LifecycleState.SOLVABLE

    def test_unsolvable(self, lifecycle, parameters, cart_details, cart_mutant):
        """A mutation challenge without a report cannot be solved."""
        challenge = MutationChallenge(cart_details, cart_mutant, "master")
        assert lifecycle.evaluate(challenge, parameters) == LifecycleState.UNSOLVABLE

    def test_other_branch_stays_solvable(self, lifecycle, parameters, cart_details, cart_mutant):
        challenge = MutationChallenge(cart_details, cart_mutant, "feature")
        assert lifecycle.evaluate(challenge, parameters) == LifecycleState.SOLVABLE


class TestUpdate:
    """Tests for moving a user's current challenges."""

    def test_moves_every_challenge(
        self, lifecycle, repository, succeeded, cart_details, cart_mutant
    ):
        build = BuildChallenge("master")
        mutant = MutationChallenge(cart_details, cart_mutant, "master")
        dummy = DummyChallenge(DummyReason.GENERATION, "master")
        test = TestChallenge("master", 2, "a1b2c3d")
        for challenge in (build, mutant, dummy, test):
            repository.new_challenge("alice", "shop", challenge)

        report = lifecycle.update(repository, "alice", succeeded)

        assert report.solved == [build]
        assert report.rejected == [mutant]
        assert report.discarded == [dummy]
        assert report.unchanged == [test]
        assert report.changed
        assert report.score == 1

        assert repository.current("alice", "shop") == (test,)
        assert repository.completed("alice", "shop") == (build,)
        (rejected,) = repository.rejected("alice", "shop")
        assert rejected.reason == NOT_SOLVABLE
        assert build.solved > 0

    def test_killed_mutant_solved(self, lifecycle, repository, cart_workspace, cart_details, cart_mutant):
        """Killing the mutant solves it and records the class coverage."""
        challenge = MutationChallenge(cart_details, cart_mutant, "master")
        repository.new_challenge("alice", "shop", challenge)
        cart_workspace.write_mutations([mutation("org.example.Cart", status="KILLED")])

        report = lifecycle.update(repository, "alice", cart_workspace.parameters)

        assert report.solved == [challenge]
        assert report.score == 4
        assert challenge.solved_coverage == pytest.approx(0.6)

    def test_nothing_changed(self, lifecycle, repository, parameters):
        repository.new_challenge("alice", "shop", BuildChallenge("master"))

        report = lifecycle.update(repository, "alice", parameters)

        assert not report.changed
        assert report.score == 0
        assert len(report.unchanged) == 1

    def test_to_dict(self, lifecycle, repository, succeeded):
        repository.new_challenge("alice", "shop", BuildChallenge("master"))

        data = lifecycle.update(repository, "alice", succeeded).to_dict()

        assert data["user"] == "alice"
        assert data["project"] == "shop"
        assert data["solved"] == ["Let the build run successfully (created for branch master)"]
        assert data["unchanged"] == 0
