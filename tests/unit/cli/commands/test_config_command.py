"""Tests for config command."""

from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from pdfit.cli.commands.config import DEFAULT_CONFIG_TEMPLATE, config_app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    from pdfit.config.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestConfigInit:
    """Tests for config init command."""

    def test_init_creates_config(self, tmp_path):
        """Test that init creates a config file."""
        runner = CliRunner()
        config_path = tmp_path / "pdfit.yaml"

        result = runner.invoke(config_app, ["init", "--path", str(config_path)])

        assert result.exit_code == 0
        assert config_path.exists()
        assert "Created config file" in result.stdout

    def test_init_default_path(self, tmp_path):
        """Test init with default path."""
        runner = CliRunner()

        result = runner.invoke(config_app, ["init"])

        assert result.exit_code == 0
        assert Path("pdfit.yaml").exists()

    def test_init_exists_no_force(self, tmp_path):
        """Test init fails if file exists without force."""
        runner = CliRunner()
        config_path = tmp_path / "pdfit.yaml"
        config_path.write_text("existing: config")

        result = runner.invoke(config_app, ["init", "--path", str(config_path)])

        assert result.exit_code == 1
        assert "already exists" in result.stdout

    def test_init_force_overwrite(self, tmp_path):
        """Test init with force overwrites existing file."""
        runner = CliRunner()
        config_path = tmp_path / "pdfit.yaml"
        config_path.write_text("existing: config")

        result = runner.invoke(config_app, ["init", "--path", str(config_path), "--force"])

        assert result.exit_code == 0
        assert config_path.read_text(encoding="utf-8") == DEFAULT_CONFIG_TEMPLATE

    def test_template_loads_as_settings(self, tmp_path):
        """The generated file is a valid configuration."""
        from pdfit.config.settings import PdfitSettings

        data = yaml.safe_load(DEFAULT_CONFIG_TEMPLATE)
        (tmp_path / "pdfit.yaml").write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")

        settings = PdfitSettings()

        assert settings.converter.chunk_size == data["converter"]["chunk_size"]
        assert settings.converter.backend == "external_process"
        assert settings.naming.source == "none"


class TestConfigShow:
    def test_show(self):
        result = CliRunner().invoke(config_app, ["show"])

        assert result.exit_code == 0
        assert "Current Configuration" in result.stdout
        assert "external_process" in result.stdout


class TestConfigLocations:
    def test_locations(self):
        result = CliRunner().invoke(config_app, ["locations"])

        assert result.exit_code == 0
        assert "Configuration File Locations" in result.stdout
        assert "PDFIT_" in result.stdout
