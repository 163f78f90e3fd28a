"""Tests for the command line interface."""

import pytest
import yaml
from click.testing import CliRunner

from gamekins.cli import main
from gamekins.config import ReportsConfig, reset_config
from gamekins.models.files import SourceFileDetails
from gamekins.version import __version__
from tests.fixtures.reports import CART_LINES, CART_PATH, ReportWorkspace, source_page


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run every command in an empty directory without a .env file."""
    import gamekins.config.environment as env_module

    monkeypatch.setattr(env_module, "_dotenv_loaded", True)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def shop(tmp_path):
    """Workspace with Cart reports and a manifest for alice."""
    parameters = ReportsConfig().build_parameters("shop", tmp_path)
    cart = SourceFileDetails(package_name="org.example", file_name="Cart", file_path=CART_PATH)
    ReportWorkspace(parameters).write_cart(cart)

    manifest = tmp_path / "round.yaml"
    manifest.write_text(
        yaml.safe_dump(
            {
                "project": "shop",
                "workspace": ".",
                "head_commit": "a1b2c3d",
                "build_result": "FAILURE",
                "committer": "alice",
                "files": [{"path": CART_PATH, "users": ["alice"]}],
            }
        )
    )
    return manifest


class TestMain:
    """Tests for the command group."""

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("report", "select", "generate", "config"):
            assert command in result.output


class TestReportCommand:
    """Tests for the report command."""

    def test_lists_lines(self, runner, tmp_path):
        page = tmp_path / "Cart.java.html"
        page.write_text(source_page(CART_LINES))

        result = runner.invoke(main, ["report", str(page), "--uncovered"])

        assert result.exit_code == 0
        assert "not covered: 2" in result.output
        assert "partially covered: 1" in result.output

    def test_empty_page(self, runner, tmp_path):
        page = tmp_path / "Empty.java.html"
        page.write_text("<html><body></body></html>")

        result = runner.invoke(main, ["report", str(page)])

        assert result.exit_code == 1
        assert "No coverage data" in result.output


class TestSelectCommand:
    """Tests for the select command."""

    def test_rank_table(self, runner):
        result = runner.invoke(main, ["select", "0.9", "0.1", "--bias", "2.0"])
        assert result.exit_code == 0
        assert "0.10" in result.output
        assert "Rank selection" in result.output

    def test_draws(self, runner):
        result = runner.invoke(main, ["select", "0.5", "0.2", "0.7", "--draws", "50", "--seed", "3"])
        assert result.exit_code == 0
        assert "Drawn" in result.output

    def test_bias_out_of_range(self, runner):
        result = runner.invoke(main, ["select", "0.5", "--bias", "2.5"])
        assert result.exit_code != 0


class TestGenerateCommand:
    """Tests for the generate command."""

    def test_generates_for_user(self, runner, shop):
        result = runner.invoke(main, ["generate", str(shop), "--seed", "5", "--xml"])

        assert result.exit_code == 0, result.output
        assert "Project shop" in result.output
        assert "alice (" in result.output
        assert "<BuildChallenge" in result.output

    def test_invalid_manifest(self, runner, tmp_path):
        manifest = tmp_path / "broken.yaml"
        manifest.write_text("branch: main\n")

        result = runner.invoke(main, ["generate", str(manifest)])

        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_invalid_config(self, runner, shop, tmp_path):
        config = tmp_path / "gamekins.yaml"
        config.write_text(yaml.safe_dump({"generation": {"max_attempts": 0}}))

        result = runner.invoke(main, ["generate", str(shop), "--config", str(config)])

        assert result.exit_code == 1


class TestConfigCommand:
    """Tests for the config command."""

    def test_defaults(self, runner):
        result = runner.invoke(main, ["config"])
        assert result.exit_code == 0
        assert "max_attempts: 5" in result.output
        assert "line_coverage: 4" in result.output

    def test_from_file(self, runner, tmp_path):
        config = tmp_path / "custom.yaml"
        config.write_text(yaml.safe_dump({"weights": {"smell": 0}}))

        result = runner.invoke(main, ["config", "--config", str(config)])

        assert result.exit_code == 0
        assert "smell: 0" in result.output
