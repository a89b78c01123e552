"""Loading and checking of ``bakehouse.toml``."""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from bakehouse.config.settings import BakeConfig
from bakehouse.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "bakehouse.toml"


def _deep_merge(destination: dict[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """Merge source into destination, with source values overwriting."""
    for key, value in source.items():
        if isinstance(value, Mapping) and key in destination and isinstance(destination[key], Mapping):
            destination[key] = _deep_merge(dict(destination[key]), value)
        else:
            destination[key] = value
    return destination


def _read_config_file(config_file: Path) -> dict[str, Any]:
    if not config_file.is_file():
        return {}
    try:
        with config_file.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid configuration file {config_file}: {exc}"
        raise ConfigurationError(msg) from exc
    # A [site] table is flattened so sites can group their own keys.
    site = data.pop("site", None)
    if isinstance(site, Mapping):
        data = _deep_merge(dict(site), data)
    return data


def load_config(
    source: Path | str,
    destination: Path | str | None = None,
    **overrides: Any,
) -> BakeConfig:
    """Load configuration for the site rooted at ``source``.

    Priority (highest to lowest):
    1. Keyword overrides (CLI flags, tests)
    2. Environment variables (BAKEHOUSE_KEY)
    3. Config file (bakehouse.toml)
    4. Defaults
    """
    source_path = Path(source).resolve()

    file_settings = _read_config_file(source_path / CONFIG_FILE_NAME)
    env_settings = BakeConfig().model_dump(exclude_unset=True)
    # Environment-derived values for the root folder would point at cwd.
    env_settings.pop("source_folder", None)

    merged = _deep_merge(file_settings, env_settings)
    merged = _deep_merge(merged, overrides)
    merged["source_folder"] = source_path
    if destination is not None:
        merged["destination_folder"] = Path(destination).resolve()

    try:
        return BakeConfig.model_validate(merged)
    except ValidationError as exc:
        msg = f"Invalid configuration for {source_path}: {exc}"
        raise ConfigurationError(msg) from exc


def inspect_config(config: BakeConfig) -> None:
    """Check that the folders a bake reads exist and create the destination."""
    _check_readable(config.source_path, "source")
    _check_readable(config.content_path, "content")
    _check_readable(config.template_path, "template")

    destination = config.destination_path
    destination.mkdir(parents=True, exist_ok=True)
    if not os.access(destination, os.W_OK):
        msg = f"Error: Destination folder is not writable: {destination}"
        raise ConfigurationError(msg)

    if not config.asset_path.is_dir():
        logger.warning("No asset folder '%s' was found!", config.asset_path)


def _check_readable(path: Path, label: str) -> None:
    if not path.is_dir():
        msg = f"Error: Required {label} folder cannot be found! Expected to find [{label}] folder in: {path}"
        raise ConfigurationError(msg)
    if not os.access(path, os.R_OK):
        msg = f"Error: Unable to access {label} folder: {path}"
        raise ConfigurationError(msg)
