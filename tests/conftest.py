"""
Gamekins Test Configuration and Fixtures

This module provides pytest fixtures for testing the challenge engine.
All fixtures write their reports into a temporary workspace and use a
seeded random source, so every test is deterministic.

Fixture Categories:
- Paths: Temporary workspace and project root
- Build: Build parameters with a fast read policy
- Files: Tracked source and test files
- Reports: Report writers and parsed JaCoCo pages
- Generation: Random source and per-attempt data bundles
"""

import random
from pathlib import Path

import pytest

from gamekins.models.files import BuildParameters, ReadPolicy, SourceFileDetails
from gamekins.models.generation import ChallengeGenerationData
from gamekins.reports.jacoco import SourceReport, parse_source_page
from gamekins.state.repository import ChallengeRepository
from tests.fixtures.reports import CART_LINES, CART_PATH, ReportWorkspace, source_page

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Return an empty workspace directory."""
    path = tmp_path / "workspace"
    path.mkdir()
    return path


# =============================================================================
# Build Fixtures
# =============================================================================


@pytest.fixture
def read_policy() -> ReadPolicy:
    """Read policy that retries without waiting."""
    return ReadPolicy(attempts=2, wait_seconds=0)


@pytest.fixture
def parameters(workspace: Path, read_policy: ReadPolicy) -> BuildParameters:
    """Build parameters of a master build in the temporary workspace."""
    return BuildParameters(
        project_name="shop",
        branch="master",
        workspace=workspace,
        head_commit="a1b2c3d",
        read_policy=read_policy,
    )


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def cart_details() -> SourceFileDetails:
    """Cart.java, changed by alice, 60% covered."""
    return SourceFileDetails(
        package_name="org.example",
        file_name="Cart",
        file_path=CART_PATH,
        coverage=0.6,
        changed_by_users={"alice"},
    )


# =============================================================================
# Report Fixtures
# =============================================================================


@pytest.fixture
def reports(parameters: BuildParameters) -> ReportWorkspace:
    """Writer for reports of the temporary build."""
    return ReportWorkspace(parameters)


@pytest.fixture
def cart_workspace(reports: ReportWorkspace, cart_details: SourceFileDetails) -> ReportWorkspace:
    """Workspace with Cart.java, its JaCoCo pages and the CSV."""
    reports.write_cart(cart_details)
    return reports


@pytest.fixture
def cart_report() -> SourceReport:
    """Parsed JaCoCo source page of Cart.java."""
    return parse_source_page(source_page(CART_LINES))


# =============================================================================
# Generation Fixtures
# =============================================================================


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def cart_data(
    parameters: BuildParameters,
    cart_details: SourceFileDetails,
    rng: random.Random,
) -> ChallengeGenerationData:
    """Attempt bundle for alice and Cart.java."""
    return ChallengeGenerationData(
        parameters=parameters,
        user="alice",
        selected_file=cart_details,
        rng=rng,
    )


@pytest.fixture
def repository() -> ChallengeRepository:
    """Empty challenge repository."""
    return ChallengeRepository(max_stored=2)
