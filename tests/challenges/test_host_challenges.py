"""Tests for the test, build and dummy challenges."""

from gamekins.challenges.build import BuildChallenge
from gamekins.challenges.dummy import DummyChallenge
from gamekins.challenges.test import TestChallenge
from gamekins.models.base import BuildResult, DummyReason


class TestTestChallenge:
    """Tests for TestChallenge."""

    def test_always_solvable(self, parameters):
        challenge = TestChallenge("master", 3, "a1b2c3d")
        assert challenge.is_solvable(parameters)
        assert challenge.score == 1

    def test_not_solved_on_same_commit(self, reports, parameters):
        reports.write_junit("org.example.CartTest", ["a", "b", "c", "d"])
        assert not TestChallenge("master", 3, "a1b2c3d").is_solved(parameters)

    def test_solved_with_more_tests_on_new_commit(self, reports, parameters):
        reports.write_junit("org.example.CartTest", ["a", "b", "c", "d"])
        later = parameters.model_copy(update={"head_commit": "e4f5a6b"})
        assert TestChallenge("master", 3, "a1b2c3d").is_solved(later)

    def test_not_solved_with_same_count(self, reports, parameters):
        reports.write_junit("org.example.CartTest", ["a", "b", "c"])
        later = parameters.model_copy(update={"head_commit": "e4f5a6b"})
        assert not TestChallenge("master", 3, "a1b2c3d").is_solved(later)

    def test_not_solved_without_commit(self, reports, parameters):
        reports.write_junit("org.example.CartTest", ["a", "b", "c", "d"])
        unknown = parameters.model_copy(update={"head_commit": ""})
        assert not TestChallenge("master", 3, "a1b2c3d").is_solved(unknown)

    def test_str(self):
        assert str(TestChallenge("develop", 0, "x")) == "Write a new test in branch develop"


class TestBuildChallenge:
    """Tests for BuildChallenge."""

    def test_solved_by_successful_build(self, parameters):
        success = parameters.model_copy(update={"build_result": BuildResult.SUCCESS})
        challenge = BuildChallenge("master", BuildResult.FAILURE)
        assert challenge.is_solved(success)
        assert challenge.solved > 0

    def test_not_solved_by_failing_build(self, parameters):
        failure = parameters.model_copy(update={"build_result": BuildResult.FAILURE})
        assert not BuildChallenge("master").is_solved(failure)

    def test_equality_by_branch(self):
        assert BuildChallenge("master", BuildResult.FAILURE) == BuildChallenge("master")
        assert BuildChallenge("master") != BuildChallenge("feature")


class TestDummyChallenge:
    """Tests for DummyChallenge."""

    def test_sentinel_behaviour(self, parameters):
        dummy = DummyChallenge(DummyReason.GENERATION, "master")
        assert dummy.score == 0
        assert dummy.is_solvable(parameters)
        assert dummy.is_solved(parameters)

    def test_never_stamped(self, parameters):
        dummy = DummyChallenge(DummyReason.GENERATION)
        dummy.is_solved(parameters)
        assert not dummy.is_stamped

    def test_solved_on_any_branch(self, parameters):
        dummy = DummyChallenge(DummyReason.GENERATION, "master")
        assert dummy.is_solved(parameters.model_copy(update={"branch": "feature"}))

    def test_nothing_developed_text(self):
        assert str(DummyChallenge(DummyReason.NOTHING_DEVELOPED)) == "You have nothing developed recently"

    def test_reason_text(self):
        dummy = DummyChallenge(DummyReason.GENERATION)
        assert dummy.reason == "generation failed"
        assert str(dummy) == "No challenge could be generated (generation failed)"

    def test_free_text_reason(self):
        assert DummyChallenge("custom").reason == "custom"
