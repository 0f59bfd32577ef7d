from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from flashrep.domain.constants import ANALYTICS_TIMEOUT, LEARNING_THRESHOLD


class AppConfig(BaseSettings):
    """
    Configuration model for flashrep.
    Supports loading from:
    1. Config file (~/.config/flashrep/config.toml or ~/.flashrep.toml)
    2. Environment variables (FLASHREP_*)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="FLASHREP_",
        extra="ignore",
    )

    # Cards
    deck_path: Path | None = None
    user_id: str = "local"

    # Analytics
    analytics_backend: Literal["log", "http"] = "log"
    analytics_url: str = "http://localhost:8080/analytics"
    analytics_timeout_seconds: float = Field(default=ANALYTICS_TIMEOUT, gt=0)

    # Classification
    learning_threshold: int = Field(default=LEARNING_THRESHOLD, ge=1)

    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Find the first existing file
        toml_file = None
        for f in _config_files():
            if f.exists():
                toml_file = f
                break

        # Earlier sources take priority: CLI overrides, then env, then file.
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("deck_path", mode="before")
    @classmethod
    def resolve_deck_path(cls, v: Any) -> Path | None:
        if not v:
            return None
        return Path(v).expanduser().resolve()


def _config_files() -> list[Path]:
    # Path.home() follows HOME, so look it up on every call.
    home = Path.home()
    return [home / ".config/flashrep/config.toml", home / ".flashrep.toml"]


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/flashrep/config.toml (if exists)
    3. Environment variables (FLASHREP_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
