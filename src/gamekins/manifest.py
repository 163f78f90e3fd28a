"""
Generation manifest for the CLI.

A YAML document that stands in for the host: it names the project, the
workspace with its reports, and the files each user changed.

    project: shop
    workspace: .
    branch: main
    head_commit: 3f2a9c1
    build_result: FAILURE
    committer: alice
    files:
      - path: src/main/java/org/example/Cart.java
        users: [alice, bob]
      - path: src/test/java/org/example/CartTest.java
        type: test
        users: [alice]
"""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from gamekins.config.loader import ConfigurationError
from gamekins.config.models import ReportsConfig
from gamekins.models.base import BuildResult
from gamekins.models.files import BuildParameters, FileDetails, SourceFileDetails, TestFileDetails


class ManifestFile(BaseModel):
    """A changed file and the users who changed it."""

    path: str = Field(..., min_length=1)
    type: Literal["source", "test"] = "source"
    users: list[str] = Field(default_factory=list)


class GenerationManifest(BaseModel):
    """One generation round as the host would describe it."""

    project: str = Field(..., min_length=1)
    workspace: Path = Field(default=Path("."))
    branch: str = Field(default="master")
    head_commit: str = Field(default="")
    build_result: Optional[BuildResult] = None
    committer: Optional[str] = None
    files: list[ManifestFile] = Field(default_factory=list)

    @property
    def users(self) -> list[str]:
        """Every user named in the manifest, in order of appearance."""
        seen: list[str] = []
        for entry in self.files:
            for user in entry.users:
                if user not in seen:
                    seen.append(user)
        if self.committer and self.committer not in seen:
            seen.append(self.committer)
        return seen

    def build_parameters(self, reports: ReportsConfig, base_dir: Path) -> BuildParameters:
        """Build parameters with the workspace resolved against base_dir."""
        workspace = self.workspace if self.workspace.is_absolute() else base_dir / self.workspace
        return reports.build_parameters(
            self.project,
            workspace.resolve(),
            branch=self.branch,
            head_commit=self.head_commit,
            build_result=self.build_result,
        )

    def file_details(self, parameters: BuildParameters) -> list[FileDetails]:
        """Read coverage and test results for every listed file."""
        details: list[FileDetails] = []
        for entry in self.files:
            file_type = TestFileDetails if entry.type == "test" else SourceFileDetails
            details.append(file_type.from_reports(parameters, entry.path, set(entry.users)))
        return details


def load_manifest(path: Path) -> GenerationManifest:
    """Load and validate a manifest file.

    Raises:
        ConfigurationError: If the YAML or its content is invalid
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", path=path) from e

    try:
        return GenerationManifest(**data)
    except (TypeError, ValidationError) as e:
        errors = e.errors() if isinstance(e, ValidationError) else []
        raise ConfigurationError("Invalid manifest", errors=errors, path=path) from e
