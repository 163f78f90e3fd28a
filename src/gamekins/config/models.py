"""
Configuration Data Models.

Defines the configuration schemas using Pydantic for validation
and type safety.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from gamekins.models.base import ChallengeKind
from gamekins.models.files import BuildParameters, ReadPolicy


class GenerationConfig(BaseModel):
    """Configuration for challenge generation.

    Attributes:
        max_attempts: Attempts of the outer loop before a dummy is issued
        unique_attempts: Tries to find a challenge unlike the current ones
        current_challenges: Challenges a user holds at the same time
        stored_challenges: Challenges a user may put aside
        rank_bias: Selection pressure of the candidate selector
        build_challenge_interval_days: Minimum days between build challenges
        seed: Seed of the random source, None for a random seed
    """

    max_attempts: int = Field(
        default=5,
        ge=1,
        description="Attempts per generated challenge",
    )
    unique_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts to find a unique challenge",
    )
    current_challenges: int = Field(
        default=3,
        ge=1,
        description="Concurrent challenges per user",
    )
    stored_challenges: int = Field(
        default=2,
        ge=0,
        description="Stored challenges per user",
    )
    rank_bias: float = Field(
        default=1.5,
        ge=1.0,
        le=2.0,
        description="Rank selection pressure",
    )
    build_challenge_interval_days: int = Field(
        default=7,
        ge=0,
        description="Days between build challenges",
    )
    seed: Optional[int] = Field(
        default=None,
        description="Random seed for reproducible rounds",
    )


class ChallengeWeightsConfig(BaseModel):
    """Draw weight per challenge kind. A weight of 0 disables the kind."""

    class_coverage: int = Field(default=1, ge=0)
    line_coverage: int = Field(default=4, ge=0)
    branch_coverage: int = Field(default=2, ge=0)
    method_coverage: int = Field(default=3, ge=0)
    exception_coverage: int = Field(default=1, ge=0)
    mutation: int = Field(default=2, ge=0)
    smell: int = Field(default=2, ge=0)
    test: int = Field(default=1, ge=0)

    def as_mapping(self) -> dict[ChallengeKind, int]:
        """Weights keyed by challenge kind."""
        return {ChallengeKind(name): weight for name, weight in self.model_dump().items()}


class ReportsConfig(BaseModel):
    """Locations of the build reports, relative to the workspace.

    Attributes:
        jacoco_results_path: Directory with the JaCoCo HTML report
        jacoco_csv_path: JaCoCo CSV report
        mutation_report_path: PIT mutations.xml
        smells_report_path: JSON findings of the static analyzer
        junit_results_path: Directory with TEST-*.xml results
        read_attempts: Read attempts for reports that are being rewritten
        read_wait_seconds: Pause between read attempts
    """

    jacoco_results_path: str = Field(default="target/site/jacoco")
    jacoco_csv_path: str = Field(default="target/site/jacoco/jacoco.csv")
    mutation_report_path: str = Field(default="target/pit-reports/mutations.xml")
    smells_report_path: str = Field(default="target/gamekins/smells.json")
    junit_results_path: str = Field(default="target/surefire-reports")
    read_attempts: int = Field(default=3, ge=1, description="Report read attempts")
    read_wait_seconds: float = Field(default=0.05, ge=0.0, description="Wait between reads")

    def build_parameters(
        self,
        project_name: str,
        workspace: Path,
        branch: str = "master",
        **kwargs: Any,
    ) -> BuildParameters:
        """Create build parameters that point at these report locations.

        Args:
            project_name: Name of the job
            workspace: Root of the checked-out code
            branch: Branch of the build
            **kwargs: Further BuildParameters fields (head_commit, build_result)

        Returns:
            BuildParameters for one round
        """
        return BuildParameters(
            project_name=project_name,
            workspace=workspace,
            branch=branch,
            jacoco_results_path=self.jacoco_results_path,
            jacoco_csv_path=self.jacoco_csv_path,
            mutation_report_path=self.mutation_report_path,
            smells_report_path=self.smells_report_path,
            junit_results_path=self.junit_results_path,
            read_policy=ReadPolicy(attempts=self.read_attempts, wait_seconds=self.read_wait_seconds),
            **kwargs,
        )


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LoggingConfig(BaseModel):
    """Configuration for logging.

    Attributes:
        level: Level of the gamekins loggers
        format: Log record format
    """

    level: LogLevel = Field(default=LogLevel.INFO, description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept lower-case level names."""
        if isinstance(v, str):
            return v.upper()
        return v


class GamekinsConfig(BaseModel):
    """Root configuration of the challenge engine.

    Attributes:
        generation: Generation limits and randomness
        weights: Draw weights of the challenge kinds
        reports: Report locations and read policy
        logging: Logging configuration
    """

    generation: GenerationConfig = Field(
        default_factory=GenerationConfig,
        description="Generation settings",
    )
    weights: ChallengeWeightsConfig = Field(
        default_factory=ChallengeWeightsConfig,
        description="Challenge kind weights",
    )
    reports: ReportsConfig = Field(
        default_factory=ReportsConfig,
        description="Report locations",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )

    def to_yaml_dict(self) -> dict[str, Any]:
        """Convert to YAML-friendly dictionary."""
        return self.model_dump(mode="json", exclude_none=True)
