"""Conversion backends for PdfIt."""

from pathlib import Path

from pdfit.config.settings import ConverterConfig
from pdfit.converters.base import ConversionBackend
from pdfit.converters.libreoffice import (
    LibreOfficeBackend,
    check_libreoffice_available,
    find_soffice,
)
from pdfit.converters.office import (
    OfficeSession,
    WordSession,
    WordSessionBackend,
    check_word_available,
)
from pdfit.exceptions import ConfigurationError


def create_backend(config: ConverterConfig, scratch_root: Path | None = None) -> ConversionBackend:
    """Create the backend selected by ``config.backend``.

    Raises:
        BackendNotFoundError: The selected backend is not available
        ConfigurationError: Unknown backend kind
    """
    if config.backend == "exclusive_session":
        return WordSessionBackend(session_ceiling=config.session_ceiling)
    if config.backend == "external_process":
        return LibreOfficeBackend(
            soffice_path=config.backend_path,
            timeout=config.timeout,
            scratch_root=scratch_root,
        )
    raise ConfigurationError(f"Unknown backend: {config.backend}")


def check_backends_available(backend_path: str | None = None) -> dict[str, bool]:
    """Check availability of each backend kind.

    Returns:
        Dictionary with backend availability status
    """
    return {
        "exclusive_session": check_word_available(),
        "external_process": check_libreoffice_available(backend_path),
    }


__all__ = [
    "ConversionBackend",
    "LibreOfficeBackend",
    "OfficeSession",
    "WordSession",
    "WordSessionBackend",
    "check_backends_available",
    "check_libreoffice_available",
    "check_word_available",
    "create_backend",
    "find_soffice",
]
