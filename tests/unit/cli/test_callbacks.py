import pytest
import typer

from pdfit.cli.callbacks import validate_backend, validate_output_dir


class TestCallbacks:
    def test_validate_output_dir_valid(self, tmp_path):
        """Test validation of valid output directory."""
        assert validate_output_dir(tmp_path) == tmp_path

    def test_validate_output_dir_none(self):
        """Test validation of None output directory."""
        assert validate_output_dir(None) is None

    def test_validate_output_dir_missing_is_ok(self, tmp_path):
        """Missing output directories are created later."""
        assert validate_output_dir(tmp_path / "new") == tmp_path / "new"

    def test_validate_output_dir_file(self, tmp_path):
        """Test validation fails if output path is a file."""
        file_path = tmp_path / "test.txt"
        file_path.touch()
        with pytest.raises(typer.BadParameter, match="Output path exists but is not a directory"):
            validate_output_dir(file_path)

    @pytest.mark.parametrize("value", ["exclusive_session", "external_process", None])
    def test_validate_backend_valid(self, value):
        assert validate_backend(value) == value

    def test_validate_backend_invalid(self):
        with pytest.raises(typer.BadParameter, match="Invalid backend 'word'"):
            validate_backend("word")
