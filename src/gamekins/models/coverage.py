"""
Coverage data models produced by the report parsers.

The coverage entities form a small typed union (line, branch, method and
class records). Mutation and smell records describe the other two report
sources. All of them are immutable snapshots of a report at read time.
"""

from typing import Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from gamekins.models.base import CoverageStatus, MutationStatus


class LineCoverage(BaseModel):
    """Coverage of a single source line.

    Attributes:
        number: 1-based line number
        status: fc/pc/nc marker of the line
        text: Source text of the line as rendered in the report
        title: Raw title attribute (branch description), empty if none
        covered_branches: Covered branches, 0 for non-branching lines
        total_branches: Total branches, 1 for non-branching lines
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["line"] = "line"
    number: int = Field(..., ge=1)
    status: CoverageStatus
    text: str = ""
    title: str = ""
    covered_branches: int = Field(default=0, ge=0)
    total_branches: int = Field(default=1, ge=1)

    @property
    def is_branching(self) -> bool:
        return self.total_branches > 1


class BranchCoverage(LineCoverage):
    """A line with more than one branch."""

    kind: Literal["branch"] = "branch"


class MethodCoverage(BaseModel):
    """Line coverage aggregated over the span of one method.

    Attributes:
        name: Method signature as shown in the report, e.g. ``toString()``
        first_line: First line of the method span
        last_line: Last line of the method span
        total_lines: Instrumented lines inside the span
        missed_lines: Lines in the span that are not fully covered
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["method"] = "method"
    name: str = Field(..., min_length=1)
    first_line: int = Field(default=1, ge=1)
    last_line: int = Field(default=1, ge=1)
    total_lines: int = Field(default=0, ge=0)
    missed_lines: int = Field(default=0, ge=0)

    @property
    def coverage(self) -> float:
        """Ratio of fully covered lines inside the method."""
        if self.total_lines == 0:
            return 1.0
        return (self.total_lines - self.missed_lines) / self.total_lines

    @property
    def fully_covered(self) -> bool:
        return self.missed_lines == 0


class ClassCoverage(BaseModel):
    """Aggregate coverage of a class plus its line counts.

    Attributes:
        class_name: Simple class name
        package_name: Dotted package name
        coverage: Line coverage ratio (0.0 to 1.0)
        fully_covered_lines: Lines marked fc
        partially_covered_lines: Lines marked pc
        not_covered_lines: Lines marked nc
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["class"] = "class"
    class_name: str
    package_name: str = ""
    coverage: float = Field(default=0.0, ge=0.0, le=1.0)
    fully_covered_lines: int = Field(default=0, ge=0)
    partially_covered_lines: int = Field(default=0, ge=0)
    not_covered_lines: int = Field(default=0, ge=0)


CoverageEntity = Union[LineCoverage, BranchCoverage, MethodCoverage, ClassCoverage]


class CoverageSnapshot(BaseModel):
    """Coverage of the targeted class at the moment a challenge was created.

    Attributes:
        coverage: Line coverage ratio of the class
        fully_covered_lines: Lines marked fc
        partially_covered_lines: Lines marked pc
        not_covered_lines: Lines marked nc
    """

    model_config = ConfigDict(frozen=True)

    coverage: float = Field(default=0.0, ge=0.0, le=1.0)
    fully_covered_lines: int = Field(default=0, ge=0)
    partially_covered_lines: int = Field(default=0, ge=0)
    not_covered_lines: int = Field(default=0, ge=0)

    @classmethod
    def from_class(cls, class_coverage: ClassCoverage) -> "CoverageSnapshot":
        return cls(
            coverage=class_coverage.coverage,
            fully_covered_lines=class_coverage.fully_covered_lines,
            partially_covered_lines=class_coverage.partially_covered_lines,
            not_covered_lines=class_coverage.not_covered_lines,
        )


class MutationRecord(BaseModel):
    """A single mutant from a PIT report.

    Attributes:
        source_file: File name the mutant lives in
        mutated_class: Fully qualified class name
        mutated_method: Method name
        method_description: JVM method descriptor
        line_number: Line of the mutation
        mutator: Fully qualified mutator name
        description: Human-readable description of the change
        status: Status reported by PIT
        detected: Whether any test detected the mutant
    """

    model_config = ConfigDict(frozen=True)

    source_file: str = ""
    mutated_class: str
    mutated_method: str = ""
    method_description: str = ""
    line_number: int = Field(default=0, ge=0)
    mutator: str = ""
    description: str = ""
    status: MutationStatus = MutationStatus.UNKNOWN
    detected: bool = False

    @property
    def mutator_name(self) -> str:
        """Short mutator name without its package."""
        return self.mutator.rsplit(".", 1)[-1]

    def same_mutant(self, other: "MutationRecord") -> bool:
        """Compare location and kind, ignoring the status."""
        return (
            self.mutated_class == other.mutated_class
            and self.mutated_method == other.mutated_method
            and self.method_description == other.method_description
            and self.line_number == other.line_number
            and self.mutator == other.mutator
            and self.description == other.description
        )


class SmellRecord(BaseModel):
    """A single static-analysis finding.

    Attributes:
        file_path: Workspace-relative path of the affected file
        line: Line of the finding, if known
        rule: Rule identifier of the analyzer
        message: Finding message
        severity: Severity as reported by the analyzer
    """

    model_config = ConfigDict(frozen=True)

    file_path: str = Field(..., validation_alias=AliasChoices("file_path", "file"))
    line: Optional[int] = Field(default=None, ge=0)
    rule: str = Field(..., validation_alias=AliasChoices("rule", "rule_id"))
    message: str = ""
    severity: Optional[str] = None

    def same_finding(self, other: "SmellRecord") -> bool:
        """Compare file, rule and message; lines shift between builds."""
        return (
            self.file_path == other.file_path
            and self.rule == other.rule
            and self.message == other.message
        )
