"""
File data models for the artifacts a challenge can target.

A FileDetails identifies one source or test file that a user changed in
recent history. The host refreshes these once per build; inside a
generation round they are immutable.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gamekins.models.base import BuildResult

# Directory names that mark the root of a source set (src/main/java/...)
SOURCE_SET_ROOTS = ("java", "kotlin", "scala", "groovy")


class ReadPolicy(BaseModel):
    """How report reads react to files that are rewritten mid-read.

    Attributes:
        attempts: Total read attempts before giving up
        wait_seconds: Pause between attempts
    """

    model_config = ConfigDict(frozen=True)

    attempts: int = Field(default=3, ge=1)
    wait_seconds: float = Field(default=0.05, ge=0.0)


class BuildParameters(BaseModel):
    """Build-level context handed in by the host for one round.

    Report locations are relative to the workspace, so a challenge created
    in one workspace can be re-evaluated in another (multi-branch jobs
    check out every branch into its own directory).

    Attributes:
        project_name: Name of the job the challenges belong to
        branch: Branch the build ran on
        workspace: Root directory of the checked-out code
        jacoco_results_path: Directory with the JaCoCo HTML report
        jacoco_csv_path: JaCoCo CSV with per-class aggregates
        mutation_report_path: PIT mutations.xml
        smells_report_path: JSON list of static-analysis findings
        junit_results_path: Directory with TEST-*.xml results
        head_commit: Hash of the commit the build ran on
        build_result: Result of the build, if already known
        read_policy: Retry policy for report reads
    """

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(..., min_length=1)
    branch: str = Field(default="master")
    workspace: Path
    jacoco_results_path: str = Field(default="target/site/jacoco")
    jacoco_csv_path: str = Field(default="target/site/jacoco/jacoco.csv")
    mutation_report_path: str = Field(default="target/pit-reports/mutations.xml")
    smells_report_path: str = Field(default="target/gamekins/smells.json")
    junit_results_path: str = Field(default="target/surefire-reports")
    head_commit: str = Field(default="")
    build_result: Optional[BuildResult] = None
    read_policy: ReadPolicy = Field(default_factory=ReadPolicy)

    def resolve(self, relative: str) -> Path:
        """Resolve a workspace-relative path."""
        return self.workspace / relative

    @property
    def jacoco_results_dir(self) -> Path:
        return self.resolve(self.jacoco_results_path)

    @property
    def jacoco_csv_file(self) -> Path:
        return self.resolve(self.jacoco_csv_path)

    @property
    def mutation_report_file(self) -> Path:
        return self.resolve(self.mutation_report_path)

    @property
    def smells_report_file(self) -> Path:
        return self.resolve(self.smells_report_path)

    @property
    def junit_results_dir(self) -> Path:
        return self.resolve(self.junit_results_path)


def split_file_path(file_path: str) -> tuple[str, str, str]:
    """Split a workspace-relative path into package, file name and extension.

    The package is taken from the directories below the source-set root,
    e.g. ``src/main/java/org/example/Foo.java`` gives ``org.example``.

    Args:
        file_path: Path relative to the workspace

    Returns:
        Tuple of (package_name, file_name, extension)
    """
    path = PurePosixPath(file_path.replace("\\", "/"))
    directories = list(path.parent.parts)
    root_index = -1
    for index, part in enumerate(directories):
        if part in SOURCE_SET_ROOTS:
            root_index = index
    package_parts = directories[root_index + 1:] if root_index >= 0 else []
    return ".".join(package_parts), path.stem, path.suffix.lstrip(".")


class FileDetails(BaseModel):
    """Identity of a tracked artifact.

    Attributes:
        package_name: Dotted package of the file
        file_name: File name without extension
        file_extension: Extension without the dot
        file_path: Path relative to the workspace
        coverage: Line coverage ratio of the artifact (0.0 to 1.0)
        exists: Whether the file still exists in the workspace
        changed_by_users: Users who touched the file in recent commits
    """

    model_config = ConfigDict(frozen=True)

    file_type: str = "file"
    package_name: str = Field(default="")
    file_name: str = Field(..., min_length=1)
    file_extension: str = Field(default="java")
    file_path: str = Field(..., min_length=1)
    coverage: float = Field(default=0.0, ge=0.0, le=1.0)
    exists: bool = Field(default=True)
    changed_by_users: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("changed_by_users", mode="before")
    @classmethod
    def coerce_users(cls, v):
        """Accept any iterable of user names."""
        if isinstance(v, str):
            return frozenset({v})
        return frozenset(v or ())

    @property
    def qualified_name(self) -> str:
        """Fully qualified class name of the file."""
        if self.package_name:
            return f"{self.package_name}.{self.file_name}"
        return self.file_name

    def changed_by(self, user: str) -> bool:
        """Check whether the user touched this file recently."""
        return user in self.changed_by_users

    def same_file(self, other: FileDetails) -> bool:
        """Compare by package and file name, ignoring build-specific data."""
        return (
            self.package_name == other.package_name
            and self.file_name == other.file_name
        )


class SourceFileDetails(FileDetails):
    """A production source file with coverage, mutation and smell data."""

    file_type: Literal["source"] = "source"

    def source_report(self, parameters: BuildParameters) -> Path:
        """JaCoCo page with the annotated source lines."""
        return (
            parameters.jacoco_results_dir
            / self.package_name
            / f"{self.file_name}.{self.file_extension}.html"
        )

    def method_report(self, parameters: BuildParameters) -> Path:
        """JaCoCo class page listing the methods."""
        return parameters.jacoco_results_dir / self.package_name / f"{self.file_name}.html"

    def reports_exist(self, parameters: BuildParameters) -> bool:
        """Check that the source file and its JaCoCo page are present."""
        return (
            self.exists
            and parameters.resolve(self.file_path).exists()
            and self.source_report(parameters).exists()
        )

    @classmethod
    def from_reports(
        cls,
        parameters: BuildParameters,
        file_path: str,
        changed_by_users: frozenset[str] | set[str] | None = None,
    ) -> SourceFileDetails:
        """Build details for a source file, reading coverage from the JaCoCo CSV.

        Args:
            parameters: Build the file belongs to
            file_path: Path relative to the workspace
            changed_by_users: Users who touched the file

        Returns:
            SourceFileDetails with the current coverage ratio
        """
        from gamekins.reports.jacoco import read_class_coverage

        package_name, file_name, extension = split_file_path(file_path)
        coverage = read_class_coverage(
            parameters.jacoco_csv_file,
            package_name,
            file_name,
            policy=parameters.read_policy,
        )
        return cls(
            package_name=package_name,
            file_name=file_name,
            file_extension=extension or "java",
            file_path=file_path,
            coverage=coverage if coverage is not None else 0.0,
            exists=parameters.resolve(file_path).exists(),
            changed_by_users=frozenset(changed_by_users or ()),
        )


class TestFileDetails(FileDetails):
    """A test file with the results of its last execution.

    Attributes:
        test_count: Number of executed tests, -1 if no result exists
        test_names: Names of the executed test cases
    """

    __test__ = False

    file_type: Literal["test"] = "test"
    test_count: int = Field(default=-1, ge=-1)
    test_names: frozenset[str] = Field(default_factory=frozenset)

    def junit_report(self, parameters: BuildParameters) -> Path:
        """JUnit result of this test class."""
        return parameters.junit_results_dir / f"TEST-{self.qualified_name}.xml"

    @classmethod
    def from_reports(
        cls,
        parameters: BuildParameters,
        file_path: str,
        changed_by_users: frozenset[str] | set[str] | None = None,
    ) -> TestFileDetails:
        """Build details for a test file from its JUnit result.

        Args:
            parameters: Build the file belongs to
            file_path: Path relative to the workspace
            changed_by_users: Users who touched the file

        Returns:
            TestFileDetails, with test_count -1 if the result is missing
        """
        from gamekins.reports.junit import read_test_suite

        package_name, file_name, extension = split_file_path(file_path)
        details = cls(
            package_name=package_name,
            file_name=file_name,
            file_extension=extension or "java",
            file_path=file_path,
            exists=parameters.resolve(file_path).exists(),
            changed_by_users=frozenset(changed_by_users or ()),
        )
        suite = read_test_suite(details.junit_report(parameters), policy=parameters.read_policy)
        if suite is None:
            return details
        return details.model_copy(
            update={"test_count": suite.tests, "test_names": frozenset(suite.test_names)}
        )
