"""Tests for the generation manifest."""

from pathlib import Path

import pytest
import yaml

from gamekins.config import ConfigurationError, ReportsConfig
from gamekins.manifest import GenerationManifest, ManifestFile, load_manifest
from gamekins.models.base import BuildResult
from gamekins.models.files import SourceFileDetails, TestFileDetails
from tests.fixtures.reports import CART_PATH, ReportWorkspace


@pytest.fixture
def manifest_data():
    return {
        "project": "shop",
        "workspace": "workspace",
        "branch": "main",
        "head_commit": "3f2a9c1",
        "build_result": "FAILURE",
        "committer": "carol",
        "files": [
            {"path": CART_PATH, "users": ["alice", "bob"]},
            {"path": "src/test/java/org/example/CartTest.java", "type": "test", "users": ["bob"]},
        ],
    }


def write_manifest(path: Path, data) -> Path:
    path.write_text(data if isinstance(data, str) else yaml.safe_dump(data))
    return path


class TestGenerationManifest:
    """Tests for GenerationManifest."""

    def test_users_in_order(self, manifest_data):
        manifest = GenerationManifest(**manifest_data)
        assert manifest.users == ["alice", "bob", "carol"]

    def test_committer_already_listed(self):
        manifest = GenerationManifest(
            project="shop",
            committer="alice",
            files=[ManifestFile(path=CART_PATH, users=["alice"])],
        )
        assert manifest.users == ["alice"]

    def test_build_parameters(self, manifest_data, tmp_path):
        manifest = GenerationManifest(**manifest_data)
        parameters = manifest.build_parameters(ReportsConfig(), tmp_path)

        assert parameters.workspace == (tmp_path / "workspace").resolve()
        assert parameters.branch == "main"
        assert parameters.head_commit == "3f2a9c1"
        assert parameters.build_result == BuildResult.FAILURE

    def test_absolute_workspace(self, tmp_path):
        manifest = GenerationManifest(project="shop", workspace=tmp_path)
        parameters = manifest.build_parameters(ReportsConfig(), Path("/elsewhere"))
        assert parameters.workspace == tmp_path.resolve()

    def test_file_details(self, manifest_data, tmp_path):
        manifest = GenerationManifest(**manifest_data)
        parameters = manifest.build_parameters(ReportsConfig(), tmp_path)
        reports = ReportWorkspace(parameters)
        cart = SourceFileDetails(package_name="org.example", file_name="Cart", file_path=CART_PATH)
        reports.write_cart(cart)
        reports.write_junit("org.example.CartTest", ["adds"])

        source, test = manifest.file_details(parameters)

        assert isinstance(source, SourceFileDetails)
        assert source.coverage == pytest.approx(0.6)
        assert source.changed_by_users == frozenset({"alice", "bob"})
        assert isinstance(test, TestFileDetails)
        assert test.test_count == 1


class TestLoadManifest:
    """Tests for load_manifest."""

    def test_load(self, tmp_path, manifest_data):
        manifest = load_manifest(write_manifest(tmp_path / "round.yaml", manifest_data))
        assert manifest.project == "shop"
        assert len(manifest.files) == 2

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_manifest(write_manifest(tmp_path / "round.yaml", "project: [shop"))

    def test_missing_project(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_manifest(write_manifest(tmp_path / "round.yaml", {"branch": "main"}))
        assert exc_info.value.errors

    def test_unknown_file_type(self, tmp_path):
        data = {"project": "shop", "files": [{"path": CART_PATH, "type": "doc"}]}
        with pytest.raises(ConfigurationError):
            load_manifest(write_manifest(tmp_path / "round.yaml", data))

    def test_non_mapping_root(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_manifest(write_manifest(tmp_path / "round.yaml", "- shop\n"))
