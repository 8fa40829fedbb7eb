"""
Configuration Loader (``envelope_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into an ``EngineConfig``.
Runtime callers go through ``envelope_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys, non-integer counts or invalid values  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from envelope_config.schema import EngineConfig
from envelope_kernel.exceptions import ConfigurationError

_SECTIONS = {
    "engine": {"flow_scope", "timezone", "minor_units_per_major", "fetch_workers"},
    "logging": {"level"},
    "database": {"url"},
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(name, section, "expected a mapping")
    unknown = set(section) - _SECTIONS[name]
    if unknown:
        raise ConfigurationError(
            f"{name}.{sorted(unknown)[0]}", section[sorted(unknown)[0]], "unknown key"
        )
    return section


def _integer(section: dict[str, Any], name: str, key: str, default: int) -> int:
    value = section.get(key, default)
    if isinstance(value, (bool, float)):
        raise ConfigurationError(f"{name}.{key}", value, "expected an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name}.{key}", value, "expected an integer") from None


def parse_engine_config(data: dict[str, Any]) -> EngineConfig:
    """Parse an ``EngineConfig`` from the YAML mapping."""
    unknown_sections = set(data) - set(_SECTIONS)
    if unknown_sections:
        name = sorted(unknown_sections)[0]
        raise ConfigurationError(name, data[name], "unknown section")

    engine = _section(data, "engine")
    logging_section = _section(data, "logging")
    database = _section(data, "database")

    defaults = EngineConfig.with_defaults()
    return EngineConfig(
        flow_scope=engine.get("flow_scope", defaults.flow_scope),
        timezone=engine.get("timezone", defaults.timezone),
        minor_units_per_major=_integer(
            engine, "engine", "minor_units_per_major", defaults.minor_units_per_major
        ),
        fetch_workers=_integer(engine, "engine", "fetch_workers", defaults.fetch_workers),
        log_level=logging_section.get("level", defaults.log_level),
        database_url=database.get("url"),
        checksum=compute_checksum(data),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
