"""Configuration settings using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, YamlConfigSettingsSource

from pdfit.config.constants import (
    DEFAULT_CHUNK_PAUSE,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CONFIG_FILE,
    DEFAULT_CONVERSION_TIMEOUT,
    DEFAULT_DEPARTMENT_QUERY,
    DEFAULT_LOG_DIR,
    DEFAULT_MTIME_TOLERANCE,
    DEFAULT_PARALLELISM,
    DEFAULT_SESSION_CEILING,
    DEFAULT_SOURCE_EXTENSIONS,
)

BackendKind = Literal["exclusive_session", "external_process"]


class ConverterConfig(BaseModel):
    """Batch conversion configuration."""

    input_dir: str | None = None
    output_dir: str | None = None
    backend: BackendKind = "external_process"
    backend_path: str | None = None  # external_process only; None triggers discovery
    max_parallelism: int | None = Field(default=None, ge=1)  # None = per-backend default
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, ge=1)
    timeout: int = Field(default=DEFAULT_CONVERSION_TIMEOUT, ge=1)
    file_name_patterns: list[str] = Field(default_factory=list)
    extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_SOURCE_EXTENSIONS))
    session_ceiling: int = Field(default=DEFAULT_SESSION_CEILING, ge=1)
    chunk_pause: float = Field(default=DEFAULT_CHUNK_PAUSE, ge=0)
    mtime_tolerance: float = Field(default=DEFAULT_MTIME_TOLERANCE, ge=0)

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, value: list[str]) -> list[str]:
        normalized = []
        for ext in value:
            ext = ext.strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = "." + ext
            if ext not in normalized:
                normalized.append(ext)
        if not normalized:
            raise ValueError("at least one source extension is required")
        return normalized

    @field_validator("file_name_patterns")
    @classmethod
    def _drop_blank_patterns(cls, value: list[str]) -> list[str]:
        return [p.strip() for p in value if p and p.strip()]

    @property
    def effective_max_parallelism(self) -> int:
        """Configured parallelism, or the backend's default when unset."""
        if self.max_parallelism is not None:
            return self.max_parallelism
        return DEFAULT_PARALLELISM[self.backend]


class NamingConfig(BaseModel):
    """Output file name mapping configuration."""

    source: Literal["none", "excel", "database"] = "none"
    excel_path: str | None = None
    database_path: str | None = None
    query: str = DEFAULT_DEPARTMENT_QUERY


class PdfitSettings(BaseSettings):
    """Main configuration class for PdfIt."""

    model_config = SettingsConfigDict(
        env_prefix="PDFIT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings sources to include YAML file."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=DEFAULT_CONFIG_FILE),
            file_secret_settings,
        )

    # Sub-configurations
    converter: ConverterConfig = Field(default_factory=ConverterConfig)
    naming: NamingConfig = Field(default_factory=NamingConfig)

    # Global settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_dir: str = DEFAULT_LOG_DIR

    def get_input_dir(self) -> Path | None:
        """Get the input directory path, if configured."""
        return Path(self.converter.input_dir) if self.converter.input_dir else None

    def get_output_dir(self) -> Path | None:
        """Get the output directory path, if configured."""
        return Path(self.converter.output_dir) if self.converter.output_dir else None


@lru_cache
def get_settings() -> PdfitSettings:
    """Get cached settings instance."""
    return PdfitSettings()


def reload_settings() -> PdfitSettings:
    """Force reload settings (clear cache)."""
    get_settings.cache_clear()
    return get_settings()
