from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from kanjisrs.domain.constants import DEFAULT_SESSION_SIZE, REQUEST_TIMEOUT, WANIKANI_API_URL


def config_dir() -> Path:
    return Path.home() / ".config/kanjisrs"


class AppConfig(BaseSettings):
    """
    Configuration model for kanjisrs.
    Supports loading from:
    1. Environment variables (KANJISRS_*)
    2. Config file (~/.config/kanjisrs/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="KANJISRS_",
        extra="ignore",
    )

    # Paths
    data_dir: Path | None = None
    store_path: Path = Field(default_factory=lambda: config_dir() / "progress.db")
    log_dir: Path = Field(default_factory=lambda: config_dir() / "logs")

    # Storage
    store_backend: Literal["sqlite", "memory"] = "sqlite"

    # External SRS provider
    wanikani_api_key: str | None = None
    wanikani_url: str = WANIKANI_API_URL
    request_timeout: float = REQUEST_TIMEOUT

    # Review settings
    reading_first: bool = True
    fuzzy_matching_enabled: bool = True
    auto_convert_katakana: bool = True
    retry_incorrect: bool = False
    session_size: int = Field(default=DEFAULT_SESSION_SIZE, ge=1)

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

        toml_file = config_dir() / "config.toml"

        # Init (CLI) beats env, env beats the file
        if toml_file.exists():
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("data_dir", mode="before")
    @classmethod
    def resolve_data_dir(cls, v: Any) -> Path | None:
        if v is None:
            return None
        return Path(v).expanduser().resolve()

    @field_validator("store_path", mode="before")
    @classmethod
    def resolve_store_path(cls, v: Any) -> Path:
        return Path(v).expanduser()

    @field_validator("wanikani_api_key", mode="before")
    @classmethod
    def blank_key_is_none(cls, v: Any) -> str | None:
        if v is None or not str(v).strip():
            return None
        return str(v).strip()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/kanjisrs/config.toml (if exists)
    3. Environment variables (KANJISRS_*)
    4. cli_overrides (passed from Typer, None values dropped)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    config = AppConfig(**overrides)

    if config.data_dir is None:
        # Bundled subject data sits next to the progress database by default
        config.data_dir = config.store_path.parent / "data"

    return config
