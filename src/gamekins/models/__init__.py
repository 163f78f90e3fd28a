"""
Gamekins - Core Data Models

Pydantic models for build parameters, tracked files and the coverage,
mutation and smell records read from build reports.
"""

from gamekins.models.base import (
    COVERAGE_KINDS,
    HOST_ONLY_KINDS,
    BuildResult,
    ChallengeKind,
    CoverageStatus,
    DummyReason,
    MutationStatus,
)
from gamekins.models.coverage import (
    BranchCoverage,
    ClassCoverage,
    CoverageEntity,
    CoverageSnapshot,
    LineCoverage,
    MethodCoverage,
    MutationRecord,
    SmellRecord,
)
from gamekins.models.files import (
    BuildParameters,
    FileDetails,
    ReadPolicy,
    SourceFileDetails,
    TestFileDetails,
    split_file_path,
)
from gamekins.models.generation import ChallengeGenerationData, MutationRunner

__all__ = [
    # Base enums
    "ChallengeKind",
    "CoverageStatus",
    "MutationStatus",
    "BuildResult",
    "DummyReason",
    "COVERAGE_KINDS",
    "HOST_ONLY_KINDS",
    # Files
    "BuildParameters",
    "FileDetails",
    "ReadPolicy",
    "SourceFileDetails",
    "TestFileDetails",
    "split_file_path",
    # Coverage entities
    "LineCoverage",
    "BranchCoverage",
    "MethodCoverage",
    "ClassCoverage",
    "CoverageEntity",
    "CoverageSnapshot",
    "MutationRecord",
    "SmellRecord",
    # Generation
    "ChallengeGenerationData",
    "MutationRunner",
]
