"""Settings merged from keyword overrides, ``NEXTMATCH_*`` env vars, and TOML.

Keyword arguments win over env vars, env vars over ``nextmatch.toml``, and
the file over the defaults baked into :mod:`nextmatch.config.models`. The
file is located by :func:`nextmatch.config.discovery.find_config`, so
``NEXTMATCH_CONFIG`` pins it and otherwise it is searched for upward from the
working directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from nextmatch.config.discovery import find_config, read_toml
from nextmatch.config.models import LoggingConfig, SearchConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Sections of the discovered ``nextmatch.toml``, plus its location."""

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        super().__init__(settings_cls)
        path = find_config()
        self._data: dict[str, Any] = {}
        if path is not None:
            self._data = {**read_toml(path), "config_path": path}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


class NextMatchSettings(BaseSettings):
    """Process-wide nextmatch settings.

    Attributes:
        config_path: The TOML file the settings were read from, if any.
        search: Scan windows for the bounded searches.
        logging: Log verbosity and format.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "NEXTMATCH_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None
    search: SearchConfig = Field(default_factory=SearchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, TomlSettingsSource(settings_cls)
