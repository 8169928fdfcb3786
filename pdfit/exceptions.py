"""Custom exceptions for PdfIt."""

from pathlib import Path


class PdfitError(Exception):
    """Base exception class for PdfIt."""

    pass


class ConfigurationError(PdfitError):
    """Configuration error."""

    pass


class BackendNotFoundError(ConfigurationError):
    """The configured conversion backend is not installed or not reachable."""

    def __init__(self, backend: str, message: str) -> None:
        self.backend = backend
        super().__init__(f"{backend} backend unavailable: {message}")


class DiscoveryError(PdfitError):
    """Error while discovering input files."""

    pass


class NoCandidatesError(DiscoveryError):
    """No input files are left to convert after discovery and filtering."""

    def __init__(
        self, input_dir: Path, extensions: list[str], patterns: list[str] | None = None
    ) -> None:
        self.input_dir = input_dir
        self.extensions = extensions
        self.patterns = patterns or []
        if self.patterns:
            message = (
                f"No files match patterns {', '.join(self.patterns)} "
                f"in input directory: {input_dir}"
            )
        else:
            message = f"No {', '.join(extensions)} files found in input directory: {input_dir}"
        super().__init__(message)


class ConversionError(PdfitError):
    """Error during document conversion."""

    def __init__(self, file_path: Path, message: str, cause: Exception | None = None) -> None:
        self.file_path = file_path
        self.cause = cause
        self.reason = message
        super().__init__(f"Conversion failed for {file_path}: {message}")


class ConversionTimeoutError(ConversionError):
    """A single conversion exceeded its time budget."""

    def __init__(self, file_path: Path, timeout: float) -> None:
        super().__init__(file_path, f"conversion timed out after {timeout:g}s")
        self.timeout = timeout
