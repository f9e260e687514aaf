"""Versioned, persisted configuration record for the Offline Furnaces plugin.

The record is stored as JSON using the key names server operators already
know from the shipped config file:

    {
      "Version": "1.0.0",
      "Oven Short Prefab Names": ["furnace", ...]
    }

A record written by an older plugin version is replaced wholesale by the
current defaults and stamped with the current version; it is never merged.
"""
from __future__ import annotations

import json
import logging
import os
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from offline_furnaces import __version__ as PLUGIN_VERSION

logger = logging.getLogger(__name__)

DEFAULT_OVEN_SHORT_PREFAB_NAMES: Tuple[str, ...] = (
    "furnace",
    "legacy_furnace",
    "furnace.large",
    "electricfurnace.deployed",
)


class ConfigError(ValueError):
    """Raised when the stored configuration record cannot be read."""


class PluginConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Records predating versioning always migrate
    version: str = Field("0.0.0", alias="Version")
    oven_short_prefab_names: List[str] = Field(default_factory=list, alias="Oven Short Prefab Names")

    @field_validator("oven_short_prefab_names")
    @classmethod
    def dedupe_names(cls, names: List[str]) -> List[str]:
        return list(dict.fromkeys(names))


def default_config(version: str = PLUGIN_VERSION) -> PluginConfig:
    return PluginConfig(
        version=version,
        oven_short_prefab_names=list(DEFAULT_OVEN_SHORT_PREFAB_NAMES),
    )


def _version_tuple(version: str) -> Tuple[int, ...]:
    parts: List[int] = []
    for chunk in str(version).strip().split("."):
        digits = ""
        for ch in chunk:
            if not ch.isdigit():
                break
            digits += ch
        parts.append(int(digits) if digits else 0)
    while len(parts) > 1 and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def compare_versions(left: str, right: str) -> int:
    """Compare dotted version strings numerically.

    Returns -1, 0 or 1. Missing components count as zero, so "1.0" == "1.0.0",
    and "1.10.0" sorts after "1.9.0". Pre-release suffixes are ignored.
    """
    a, b = _version_tuple(left), _version_tuple(right)
    return (a > b) - (a < b)


def migrate_config(config: PluginConfig, current_version: str = PLUGIN_VERSION) -> PluginConfig:
    """Return the record to use for ``current_version``.

    Stale records are replaced by the defaults, never partially merged.
    """
    if compare_versions(config.version, current_version) >= 0:
        return config
    logger.warning(
        "config_migration",
        extra={
            "from_version": config.version,
            "to_version": current_version,
            "action_context": "config:migrate",
        },
    )
    return default_config(current_version)


def read_config(path: str) -> Optional[PluginConfig]:
    """Read the stored record, or return None when no file exists yet."""
    if not os.path.exists(path):
        return None
    try:
        with open(path, "rb") as fh:
            raw = fh.read()
        text = raw.decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    try:
        return PluginConfig.model_validate_json(text)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration in {path}: {e}") from e


def save_config(path: str, config: PluginConfig) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    tmp_path = f"{path}.tmp"
    try:
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(config.model_dump(by_alias=True), fh, indent=2)
            fh.write("\n")
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def load_config(path: str, current_version: str = PLUGIN_VERSION) -> PluginConfig:
    """Load, migrate and persist the plugin configuration.

    A missing file yields the defaults. The resulting record is always
    written back so operators see the current schema on disk.
    """
    stored = read_config(path)
    if stored is None:
        logger.info(
            "config_default_created",
            extra={"path": path, "action_context": "config:load"},
        )
        config = default_config(current_version)
    else:
        config = migrate_config(stored, current_version)
    save_config(path, config)
    return config


__all__ = [
    "PLUGIN_VERSION",
    "DEFAULT_OVEN_SHORT_PREFAB_NAMES",
    "ConfigError",
    "PluginConfig",
    "default_config",
    "compare_versions",
    "migrate_config",
    "read_config",
    "save_config",
    "load_config",
]
