"""Application settings using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cbomkit.core.config.loader import load_config_file

# Searched in order when no explicit configuration file is given
DEFAULT_CONFIG_PATHS = [
    Path("cbomkit.yaml"),
    Path.home() / ".cbomkit" / "config.yaml",
]


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="CBOMKIT_LOGGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = Field(
        default="INFO",
        description="Log level",
    )
    format: str = Field(
        default="[%(name)s] %(message)s",
        description="Log format string",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path",
    )
    use_rich: bool = Field(
        default=True,
        description="Use Rich console for output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("file", mode="before")
    @classmethod
    def validate_file(cls, v: str | None) -> Path | None:
        """Validate and convert file to Path."""
        if v is None or v == "":
            return None
        return Path(v)


class IndexingSettings(BaseSettings):
    """Module indexing settings.

    A language left at ``None`` uses the exclude patterns its indexing
    strategy ships with. An empty list disables exclusion for it.
    """

    model_config = SettingsConfigDict(
        env_prefix="CBOMKIT_INDEXING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    python_exclude_patterns: list[str] | None = Field(
        default=None,
        description="Regular expressions excluding Python paths",
    )
    java_exclude_patterns: list[str] | None = Field(
        default=None,
        description="Regular expressions excluding Java paths",
    )
    cpp_exclude_patterns: list[str] | None = Field(
        default=None,
        description="Regular expressions excluding C/C++ paths",
    )

    def exclude_patterns_for(self, language: str) -> list[str] | None:
        """Return the configured exclude patterns for a language, if any."""
        return getattr(self, f"{language}_exclude_patterns", None)


class ScanningSettings(BaseSettings):
    """Scanning configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="CBOMKIT_SCANNING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    require_build: bool = Field(
        default=True,
        description="Refuse Java scans without dependency jars or class directories",
    )
    workers: int = Field(
        default=1,
        ge=1,
        le=64,
        description="Number of modules scanned in parallel",
    )
    java_dependency_jars: list[str] = Field(
        default_factory=list,
        description="Dependency jars (globs allowed) for Java semantic resolution",
    )
    java_class_dirs: list[str] = Field(
        default_factory=list,
        description="Compiled class directories for Java semantic resolution",
    )


class OutputSettings(BaseSettings):
    """CBOM output settings."""

    model_config = SettingsConfigDict(
        env_prefix="CBOMKIT_OUTPUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    cbom_file: Path = Field(
        default=Path("cbom.json"),
        description="Default CBOM output file",
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CBOMKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    indexing: IndexingSettings = Field(default_factory=IndexingSettings)
    scanning: ScanningSettings = Field(default_factory=ScanningSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file.

        Values set in the file take precedence over environment variables
        and .env entries; those still fill in keys the file leaves out.

        Args:
            path: Path to YAML configuration file.

        Returns:
            Settings instance with values from YAML.
        """
        sections = load_config_file(path)

        return cls(
            logging=LoggingSettings(**sections.get("logging", {})),
            indexing=IndexingSettings(**sections.get("indexing", {})),
            scanning=ScanningSettings(**sections.get("scanning", {})),
            output=OutputSettings(**sections.get("output", {})),
        )

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from default locations.

        Priority: cbomkit.yaml > environment variables > .env > defaults

        Returns:
            Settings instance.
        """
        for candidate in DEFAULT_CONFIG_PATHS:
            if candidate.exists():
                return cls.from_yaml(candidate)

        return cls()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings singleton.
    """
    return Settings.load()
