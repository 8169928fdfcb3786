"""External-process backend: one headless LibreOffice process per document.

Each conversion gets its own scratch directory that holds the LibreOffice
user profile and the output directory. Two soffice processes sharing a
profile fight over its lock file, so the private profile is what makes
concurrent conversions safe.
"""

from __future__ import annotations

import os
import shutil
import signal
import subprocess
import sys
import tempfile
from pathlib import Path

from pdfit.config.constants import (
    DEFAULT_CONVERSION_TIMEOUT,
    DEFAULT_SCRATCH_PREFIX,
    LIBREOFFICE_MACOS_PATH,
    LIBREOFFICE_WINDOWS_PATHS,
    TARGET_EXTENSION,
)
from pdfit.converters.base import ConversionBackend, discard_partial, partial_target_path
from pdfit.exceptions import BackendNotFoundError, ConversionError, ConversionTimeoutError
from pdfit.utils.logging import get_logger

log = get_logger(__name__)


def find_soffice() -> str | None:
    """Find the LibreOffice soffice executable."""
    if sys.platform == "win32":
        for path in LIBREOFFICE_WINDOWS_PATHS:
            if Path(path).exists():
                return path

    elif sys.platform == "darwin":
        if Path(LIBREOFFICE_MACOS_PATH).exists():
            return LIBREOFFICE_MACOS_PATH

    return shutil.which("soffice") or shutil.which("libreoffice")


class LibreOfficeBackend(ConversionBackend):
    """Convert documents to PDF with headless LibreOffice subprocesses."""

    name = "libreoffice"
    kind = "external_process"

    def __init__(
        self,
        soffice_path: str | None = None,
        timeout: int = DEFAULT_CONVERSION_TIMEOUT,
        scratch_root: Path | str | None = None,
    ) -> None:
        """Initialize the LibreOffice backend.

        Args:
            soffice_path: Path to the soffice executable. Discovered from
                          well-known locations and PATH when omitted.
            timeout: Default conversion timeout in seconds
            scratch_root: Parent directory for per-job scratch directories
                          (system temp directory by default)

        Raises:
            BackendNotFoundError: soffice cannot be located
        """
        if soffice_path:
            if not Path(soffice_path).exists():
                raise BackendNotFoundError(
                    self.name, f"LibreOffice executable not found at: {soffice_path}"
                )
            self.soffice_path = soffice_path
        else:
            log.warning("LibreOffice path not configured, attempting to auto-detect")
            detected = find_soffice()
            if not detected:
                raise BackendNotFoundError(
                    self.name,
                    "LibreOffice installation not found. Install LibreOffice or set "
                    "converter.backend_path",
                )
            log.info("Auto-detected LibreOffice", path=detected)
            self.soffice_path = detected

        self.timeout = timeout
        self.scratch_root = Path(scratch_root) if scratch_root else None

    def convert(self, source_path: Path, target_path: Path, timeout: float | None = None) -> Path:
        """Convert a document in a private scratch directory and move the PDF into place."""
        effective_timeout = timeout or self.timeout

        if self.scratch_root is not None:
            self.scratch_root.mkdir(parents=True, exist_ok=True)
        scratch_dir = Path(tempfile.mkdtemp(prefix=DEFAULT_SCRATCH_PREFIX, dir=self.scratch_root))

        try:
            produced = self._run_soffice(source_path, scratch_dir, effective_timeout)
            target_path.parent.mkdir(parents=True, exist_ok=True)
            self._place_output(source_path, produced, target_path)
            return target_path
        finally:
            self._remove_scratch(scratch_dir)

    def _place_output(self, source_path: Path, produced: Path, target_path: Path) -> None:
        """Move the PDF next to the target first, then replace the target in one step."""
        partial_path = partial_target_path(target_path)
        try:
            shutil.move(str(produced), str(partial_path))
            os.replace(partial_path, target_path)
        except OSError as e:
            raise ConversionError(
                source_path, f"Failed to move output into place: {e}", cause=e
            ) from e
        finally:
            discard_partial(partial_path)

    def build_command(self, source_path: Path, profile_dir: Path, out_dir: Path) -> list[str]:
        """Build the soffice command line for one conversion."""
        return [
            self.soffice_path,
            "--headless",
            "--norestore",
            f"-env:UserInstallation={profile_dir.resolve().as_uri()}",
            "--convert-to",
            TARGET_EXTENSION.lstrip("."),
            "--outdir",
            str(out_dir),
            str(source_path),
        ]

    def _run_soffice(self, source_path: Path, scratch_dir: Path, timeout: float) -> Path:
        profile_dir = scratch_dir / "profile"
        out_dir = scratch_dir / "out"
        profile_dir.mkdir()
        out_dir.mkdir()

        cmd = self.build_command(source_path, profile_dir, out_dir)
        log.debug("Running LibreOffice", command=" ".join(cmd))

        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=scratch_dir,
                **_process_group_options(),
            )
        except OSError as e:
            raise ConversionError(source_path, f"Failed to start LibreOffice: {e}", cause=e) from e

        try:
            raw_stdout, raw_stderr = process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired as e:
            # soffice is often a launcher, the converting process is its child
            _kill_process_tree(process)
            process.communicate()
            log.warning("LibreOffice timed out, process killed", file=source_path.name, timeout=timeout)
            raise ConversionTimeoutError(source_path, timeout) from e

        stdout = _decode(raw_stdout)
        stderr = _decode(raw_stderr)
        if stdout:
            log.debug("LibreOffice output", file=source_path.name, output=stdout)
        if stderr:
            log.warning("LibreOffice error output", file=source_path.name, error=stderr)

        if process.returncode != 0:
            message = stderr or f"LibreOffice exited with code {process.returncode}"
            raise ConversionError(source_path, message)

        output_path = out_dir / (source_path.stem + TARGET_EXTENSION)
        if not output_path.exists():
            # LibreOffice might use different naming
            for f in out_dir.iterdir():
                if f.suffix.lower() == TARGET_EXTENSION:
                    output_path = f
                    break

        if not output_path.exists():
            raise ConversionError(source_path, "LibreOffice did not produce output file")

        return output_path

    def _remove_scratch(self, scratch_dir: Path) -> None:
        try:
            shutil.rmtree(scratch_dir)
        except OSError as e:
            log.warning("Failed to remove scratch directory", path=str(scratch_dir), error=str(e))


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace").strip()


def check_libreoffice_available(soffice_path: str | None = None) -> bool:
    """Check whether a LibreOffice executable can be located."""
    if soffice_path:
        return Path(soffice_path).exists()
    return find_soffice() is not None


def _process_group_options() -> dict:
    """Start soffice as the leader of its own process group."""
    if sys.platform == "win32":
        return {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP}
    return {"start_new_session": True}


def _kill_process_tree(process: subprocess.Popen) -> None:
    """Forcibly terminate a process and everything it started."""
    if sys.platform == "win32":
        result = subprocess.run(
            ["taskkill", "/F", "/T", "/PID", str(process.pid)],
            capture_output=True,
            check=False,
        )
        if result.returncode != 0:
            process.kill()
        return

    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    except OSError as e:
        log.debug("Process group kill failed, killing process", pid=process.pid, error=str(e))
        process.kill()
