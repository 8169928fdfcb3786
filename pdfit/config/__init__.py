"""Configuration module for PdfIt."""

from pdfit.config.settings import (
    ConverterConfig,
    NamingConfig,
    PdfitSettings,
    get_settings,
    reload_settings,
)

__all__ = [
    "ConverterConfig",
    "NamingConfig",
    "PdfitSettings",
    "get_settings",
    "reload_settings",
]
