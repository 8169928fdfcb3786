"""Tests for logging utilities module."""

import io
import logging

import pytest

from pdfit.utils.logging import (
    SafeStreamHandler,
    _add_separator,
    _filter_event_dict,
    create_task_log_path,
    get_console,
    get_logger,
    setup_logging,
    setup_task_logging,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Keep handler changes from leaking into other tests."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestFilterEventDict:
    """Tests for _filter_event_dict processor."""

    def test_short_values_untouched(self):
        event = {"event": "Converted", "file": "a.doc"}

        assert _filter_event_dict(None, "info", dict(event)) == event

    def test_long_strings_truncated(self):
        """Long captured output is cut down."""
        result = _filter_event_dict(None, "warning", {"error": "x" * 2000})

        assert len(result["error"]) < 600
        assert "2000 chars total" in result["error"]

    def test_binary_replaced(self):
        result = _filter_event_dict(None, "debug", {"output": b"\x00" * 1000})

        assert result["output"] == "[BINARY DATA: 1000 bytes]"


class TestAddSeparator:
    def test_adds_separator_with_context(self):
        result = _add_separator(None, "info", {"event": "Converted", "file": "a.doc"})

        assert result["event"] == "Converted |"

    def test_no_separator_without_context(self):
        result = _add_separator(None, "info", {"event": "Done", "level": "info"})

        assert result["event"] == "Done"


class TestSafeStreamHandler:
    def test_replaces_unencodable_characters(self):
        raw = io.BytesIO()
        stream = io.TextIOWrapper(raw, encoding="cp1252", errors="strict")
        handler = SafeStreamHandler(stream)
        handler.setFormatter(logging.Formatter("%(message)s"))

        handler.emit(logging.makeLogRecord({"msg": "Converted 报告.doc"}))
        stream.flush()

        assert b"Converted" in raw.getvalue()


class TestSetupLogging:
    """Tests for setup_logging and task logging."""

    def test_writes_to_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        setup_logging(level="DEBUG", log_file=str(log_file))

        get_logger("pdfit.test").info("Converted", file="a.doc")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "Converted" in content
        assert "a.doc" in content

    def test_json_format(self, tmp_path):
        log_file = tmp_path / "run.jsonl"
        setup_logging(level="INFO", log_file=str(log_file), json_format=True)

        get_logger("pdfit.test").info("Progress", percent="50%")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert '"event": "Progress |"' in log_file.read_text(encoding="utf-8")

    def test_noisy_loggers_quieted(self):
        setup_logging(level="DEBUG")

        assert logging.getLogger("openpyxl").level == logging.WARNING

    def test_create_task_log_path(self, tmp_path):
        task_id, path = create_task_log_path(tmp_path / "logs", "batch")

        assert len(task_id) == 8
        assert path.parent == tmp_path / "logs"
        assert path.name.startswith("batch_")
        assert path.name.endswith(f"_{task_id}.log")
        assert path.parent.is_dir()

    def test_setup_task_logging_levels(self, tmp_path):
        _, path = setup_task_logging(tmp_path, prefix="batch", verbose=False)

        handlers = logging.getLogger().handlers
        console = [h for h in handlers if isinstance(h, SafeStreamHandler)]
        files = [h for h in handlers if not isinstance(h, SafeStreamHandler)]
        assert console[0].level == logging.WARNING
        assert files[0].level == logging.DEBUG
        assert path.exists()

    def test_setup_task_logging_verbose(self, tmp_path):
        setup_task_logging(tmp_path, verbose=True)

        console = [h for h in logging.getLogger().handlers if isinstance(h, SafeStreamHandler)]
        assert console[0].level == logging.DEBUG

    def test_get_console_is_shared(self):
        assert get_console() is get_console()
