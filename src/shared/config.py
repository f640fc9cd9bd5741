"""Storefront configuration.

Settings live in ``storefront.toml``: top-level tables hold the defaults and
an environment table (``[test]``, ``[production]``, ...) overlays them.
Environment variables with the ``STOREFRONT_`` prefix win over the file,
nested keys joined by ``__``:

- ``STOREFRONT_ENV`` selects the environment table
- ``STOREFRONT_CONFIG_FILE`` points at another TOML file
- ``STOREFRONT_DATABASE__DATABASE_URI`` overrides the database URI

Example::

    [database]
    database_uri = "sqlite:///storefront.db"

    [test.database]
    database_uri = "sqlite:///storefront-test.db"
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

DEFAULT_CONFIG_FILE = Path("storefront.toml")

ENVIRONMENTS = ("development", "test", "production")


class DatabaseSettings(BaseModel):
    database_uri: str = "sqlite:///storefront.db"
    # Upper bound on how long a transaction waits for a row or database lock
    lock_timeout_ms: int = Field(default=5000, gt=0)
    echo: bool = False


class LoggingSettings(BaseModel):
    level: str = "INFO"
    json_output: bool = False


class TomlTableSource(TomlConfigSettingsSource):
    """One slice of the TOML file: its base tables, or a single environment table."""

    def __init__(self, settings_cls: type[BaseSettings], toml_file: Path, table: str | None = None) -> None:
        super().__init__(settings_cls, toml_file=toml_file)
        if table is None:
            # Environment tables are overlays, not settings of their own
            self.table_data = {key: value for key, value in self.toml_data.items() if key not in ENVIRONMENTS}
        else:
            self.table_data = self.toml_data.get(table, {})

    def __call__(self) -> dict[str, Any]:
        return self.table_data


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    env: str = "development"
    config_file: Path = DEFAULT_CONFIG_FILE
    debug: bool = False
    # Create missing tables when the web app starts
    auto_create_schema: bool = False
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        explicit, from_env = init_settings(), env_settings()
        env = explicit.get("env") or from_env.get("env") or "development"
        toml_file = Path(explicit.get("config_file") or from_env.get("config_file") or DEFAULT_CONFIG_FILE)

        # Earlier sources win; nested tables are merged key by key
        return (
            init_settings,
            env_settings,
            TomlTableSource(settings_cls, toml_file, table=env),
            TomlTableSource(settings_cls, toml_file),
        )


def load_settings(path: str | Path | None = None, env: str | None = None) -> Settings:
    """Load settings for ``env`` from ``path`` (both default from the environment)."""
    overrides: dict[str, Any] = {}
    if path is not None:
        overrides["config_file"] = Path(path)
    if env is not None:
        overrides["env"] = env
    return Settings(**overrides)
