"""Settings for one pagelinks invocation.

Sources, highest priority first: CLI flags, ``PAGELINKS_*`` environment
variables, a ``pagelinks.toml`` file, then the section model defaults.

The TOML file is the ``--config`` path when given, else ``$PAGELINKS_CONFIG``,
else the nearest ``pagelinks.toml`` walking up from the working directory.
"""

from __future__ import annotations

import os
import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    TomlConfigSettingsSource,
)

from pagelinks.config.models import InterpreterConfig, OutputConfig

CONFIG_FILENAME = "pagelinks.toml"
CONFIG_ENV_VAR = "PAGELINKS_CONFIG"

# TOML file chosen by from_cli, read back while sources are assembled.
_toml_file: ContextVar[Path | None] = ContextVar("_toml_file", default=None)


def find_config(start: Path | None = None) -> Path | None:
    """Locate the config file for a run starting in *start* (default: cwd).

    ``$PAGELINKS_CONFIG`` wins when set; a value naming no file means
    "no config" rather than falling back to the walk-up.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        return path if path.is_file() else None

    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


class PagelinksSettings(BaseSettings):
    """Frozen, merged settings for the CLI.

    Attributes:
        config_path: The TOML file that was read, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PAGELINKS_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    interpreter: InterpreterConfig = Field(default_factory=InterpreterConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_file = _toml_file.get()
        if toml_file is None:
            return (init_settings, env_settings)
        try:
            toml_settings = TomlConfigSettingsSource(settings_cls, toml_file=toml_file)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {toml_file}: {exc}"
            raise click.ClickException(msg) from exc
        return (init_settings, env_settings, toml_settings)

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        search_from: Path | None = None,
        **cli_flags: Any,
    ) -> PagelinksSettings:
        """Build settings for a CLI invocation.

        Raises:
            click.BadParameter: if *config_path* is given but names no file.
            click.ClickException: if the selected TOML file does not parse.
        """
        if config_path:
            toml_file: Path | None = Path(config_path)
            if not toml_file.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.BadParameter(msg, param_hint="'-c' / '--config'")
        else:
            toml_file = find_config(search_from)

        token = _toml_file.set(toml_file)
        try:
            return cls(config_path=toml_file, **cli_flags)
        finally:
            _toml_file.reset(token)
