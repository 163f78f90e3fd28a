"""
Base enumerations and constants used throughout the data models.

These enums provide type-safe values for the categorical fields shared by
the report parsers, the challenges and the generation pipeline.
"""

from enum import Enum


class ChallengeKind(str, Enum):
    """Kind of challenge a generator produces.

    BUILD and DUMMY are constructed directly by the factory and are never
    drawn from the challenge-type registry.
    """

    CLASS_COVERAGE = "class_coverage"
    LINE_COVERAGE = "line_coverage"
    BRANCH_COVERAGE = "branch_coverage"
    METHOD_COVERAGE = "method_coverage"
    EXCEPTION_COVERAGE = "exception_coverage"
    MUTATION = "mutation"
    SMELL = "smell"
    TEST = "test"
    BUILD = "build"
    DUMMY = "dummy"

    @property
    def is_coverage(self) -> bool:
        """Whether this kind targets JaCoCo coverage of a source file."""
        return self in COVERAGE_KINDS


COVERAGE_KINDS = frozenset(
    {
        ChallengeKind.CLASS_COVERAGE,
        ChallengeKind.LINE_COVERAGE,
        ChallengeKind.BRANCH_COVERAGE,
        ChallengeKind.METHOD_COVERAGE,
        ChallengeKind.EXCEPTION_COVERAGE,
    }
)

# Kinds that never go through the weighted draw
HOST_ONLY_KINDS = frozenset({ChallengeKind.BUILD, ChallengeKind.DUMMY})


class CoverageStatus(str, Enum):
    """Coverage marker of a single line in a JaCoCo source page."""

    FULLY_COVERED = "fc"
    PARTIALLY_COVERED = "pc"
    NOT_COVERED = "nc"


class MutationStatus(str, Enum):
    """Status of a mutant as reported by PIT."""

    KILLED = "KILLED"
    SURVIVED = "SURVIVED"
    NO_COVERAGE = "NO_COVERAGE"
    TIMED_OUT = "TIMED_OUT"
    MEMORY_ERROR = "MEMORY_ERROR"
    RUN_ERROR = "RUN_ERROR"
    NON_VIABLE = "NON_VIABLE"
    UNKNOWN = "UNKNOWN"


class BuildResult(str, Enum):
    """Result of the build that triggered a generation or evaluation round."""

    SUCCESS = "SUCCESS"
    UNSTABLE = "UNSTABLE"
    FAILURE = "FAILURE"
    ABORTED = "ABORTED"
    NOT_BUILT = "NOT_BUILT"


class DummyReason(str, Enum):
    """Diagnostic reasons carried by the "no challenge available" sentinel."""

    GENERATION = "generation failed"
    NOTHING_DEVELOPED = "nothing changed by user"
    NO_CHALLENGE_TYPES = "no challenge types configured"
