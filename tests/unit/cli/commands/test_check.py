"""Tests for check command."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from pdfit.cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    from pdfit.config.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestCheckCommand:
    def test_configured_backend_available(self):
        availability = {"exclusive_session": False, "external_process": True}
        with patch(
            "pdfit.cli.commands.check.check_backends_available", return_value=availability
        ):
            result = runner.invoke(app, ["check"])

        assert result.exit_code == 0
        assert "LibreOffice" in result.stdout
        assert "not available" in result.stdout

    def test_configured_backend_missing(self):
        availability = {"exclusive_session": True, "external_process": False}
        with patch(
            "pdfit.cli.commands.check.check_backends_available", return_value=availability
        ):
            result = runner.invoke(app, ["check"])

        assert result.exit_code == 1

    def test_backend_path_option(self, tmp_path):
        soffice = tmp_path / "soffice"
        soffice.write_text("")

        with patch("pdfit.converters.office.sys.platform", "linux"):
            result = runner.invoke(app, ["check", "--backend-path", str(soffice)])

        assert result.exit_code == 0


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.stdout
