"""Pytest configuration and fixtures."""

import stat
import tempfile
import threading
import time
from pathlib import Path

import pytest

from pdfit.converters.base import ConversionBackend
from pdfit.exceptions import ConversionError

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

FAKE_PDF = b"%PDF-1.4 fake\n"

# Shell stand-in for soffice. It understands the arguments LibreOfficeBackend
# passes and behaves according to MODE.
_FAKE_SOFFICE = """#!/bin/sh
MODE="{mode}"
outdir=""
src=""
while [ $# -gt 0 ]; do
  case "$1" in
    --outdir) outdir="$2"; shift 2 ;;
    *) src="$1"; shift ;;
  esac
done
name=$(basename "$src")
stem="${{name%.*}}"
echo "$src" >> "{calls_log}"
case "$MODE" in
  ok)
    printf '%%PDF-1.4 fake\\n' > "$outdir/$stem.pdf"
    echo "convert $src -> $outdir/$stem.pdf using filter : writer_pdf_Export"
    ;;
  fail)
    echo "Error: source file could not be loaded" >&2
    exit 1
    ;;
  silent_fail)
    exit 77
    ;;
  no_output)
    exit 0
    ;;
  hang)
    exec sleep 30
    ;;
  launcher_hang)
    sleep 30 &
    echo $! > "{child_pid}"
    wait
    ;;
esac
"""


class RecordingBackend(ConversionBackend):
    """In-process backend that writes a fake PDF and records every call."""

    name = "fake"
    kind = "external_process"

    def __init__(
        self,
        fail_on: set[str] | None = None,
        crash_on: set[str] | None = None,
        delay: float = 0.0,
        parallelism_ceiling: int | None = None,
    ) -> None:
        self.fail_on = fail_on or set()
        self.crash_on = crash_on or set()
        self.delay = delay
        self.parallelism_ceiling = parallelism_ceiling
        self.calls: list[Path] = []
        self.reclaims = 0
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def convert(self, source_path: Path, target_path: Path, timeout: float | None = None) -> Path:
        with self._lock:
            self.calls.append(source_path)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            if source_path.name in self.crash_on:
                raise RuntimeError("unexpected backend crash")
            if source_path.name in self.fail_on:
                raise ConversionError(source_path, "document is corrupt")
            target_path.parent.mkdir(parents=True, exist_ok=True)
            target_path.write_bytes(FAKE_PDF)
            return target_path
        finally:
            with self._lock:
                self.active -= 1

    def reclaim(self) -> None:
        self.reclaims += 1

    @property
    def converted_names(self) -> set[str]:
        return {p.name for p in self.calls}


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def recording_backend():
    """Factory for RecordingBackend instances."""
    return RecordingBackend


@pytest.fixture
def fake_soffice(tmp_path):
    """Factory writing an executable fake soffice script for a given mode.

    Every invocation appends the source path to ``soffice_calls.log`` next to
    the script. In ``launcher_hang`` mode the script starts a background child,
    writes its pid to ``child.pid`` and waits for it, like the soffice launcher.
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    def make(mode: str = "ok") -> str:
        script = bin_dir / f"soffice-{mode}"
        script.write_text(
            _FAKE_SOFFICE.format(
                mode=mode,
                calls_log=bin_dir / "soffice_calls.log",
                child_pid=bin_dir / "child.pid",
            ),
            encoding="utf-8",
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return make


@pytest.fixture
def make_documents(tmp_path):
    """Factory creating placeholder documents in ``tmp_path / "in"``."""
    input_dir = tmp_path / "in"
    input_dir.mkdir(exist_ok=True)

    def make(*names: str) -> Path:
        for name in names:
            (input_dir / name).write_bytes(b"\xd0\xcf\x11\xe0 fake word document")
        return input_dir

    return make
