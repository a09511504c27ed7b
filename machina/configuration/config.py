"""Configuration management for machina."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s", alias="LOG_FORMAT"
    )

    # Durable store
    database_url: str = Field(default="sqlite+aiosqlite:///./machina.db", alias="DATABASE_URL")
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    # Host data (unpacked boxes live under <data_path>/boxes)
    data_path: Path = Field(default=Path.home() / ".machina", alias="MACHINA_DATA_PATH")
    host_name: str = Field(default="local", alias="MACHINA_HOST_NAME")

    # Resource resolution
    # Used when a machine's configuration does not pin a provider
    default_box_provider: str = Field(default="virtualbox", alias="DEFAULT_BOX_PROVIDER")
    default_box_version: str = Field(default="0", alias="DEFAULT_BOX_VERSION")
    default_synced_folder_type: str = Field(
        default="virtualbox", alias="DEFAULT_SYNCED_FOLDER_TYPE"
    )

    # Capability resolution
    capability_probe_timeout_seconds: float = Field(
        default=10.0, alias="CAPABILITY_PROBE_TIMEOUT_SECONDS", gt=0
    )
    capability_sort_candidates: bool = Field(
        default=False,
        alias="CAPABILITY_SORT_CANDIDATES",
        description="Sort candidates by name before detection so score ties are "
        "broken alphabetically instead of by plugin registration order.",
    )
    # Comma-separated in the environment, e.g. SEEDED_CAPABILITY_KINDS=guest,host
    seeded_capability_kinds: str | list[str] = Field(
        default=["guest"], alias="SEEDED_CAPABILITY_KINDS"
    )

    # OpenTelemetry Settings
    service_name: str = Field(default="machina", alias="SERVICE_NAME")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    enable_telemetry: bool = Field(default=False, alias="ENABLE_TELEMETRY")
    otel_exporter_otlp_endpoint: str | None = Field(
        default=None, alias="OTEL_EXPORTER_OTLP_ENDPOINT"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str | None) -> str:
        """Normalize log level value from environment."""
        if value is None:
            return "INFO"
        return str(value).strip().upper()

    @field_validator("seeded_capability_kinds", mode="before")
    @classmethod
    def normalize_seeded_kinds(cls, value: str | list[str] | None) -> list[str]:
        """Normalize capability kind names (a bare string is split on commas)."""
        if value is None:
            return []
        if isinstance(value, str):
            return [item.strip().lower() for item in value.split(",") if item.strip()]
        return [str(item).strip().lower() for item in value]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
