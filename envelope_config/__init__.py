"""
envelope_config -- single public entrypoint for engine configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Returns a frozen ``EngineConfig``.

Architecture position:
    Configuration -- sits above ``envelope_kernel`` and below
    ``envelope_services``.  The kernel and engines MUST NEVER import from
    ``envelope_config``; services receive an ``EngineConfig`` instance.

Audit relevance:
    Every successful ``get_active_config()`` call emits an
    ``ENVELOPE_CONFIG_TRACE`` log entry with the source path, checksum and
    the policy values that change results (flow scope, time zone).
"""

from __future__ import annotations

import logging
from pathlib import Path

from envelope_config.loader import load_yaml_file, parse_engine_config
from envelope_config.schema import EngineConfig, FlowScope

_logger = logging.getLogger("envelope_kernel.config")

# Default configuration file
DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | str | None = None) -> EngineConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: YAML file to load.  Defaults to
            envelope_config/sets/default.yaml.

    Returns:
        EngineConfig parsed and validated from the file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If a value is invalid.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = parse_engine_config(load_yaml_file(path))

    _logger.info(
        "ENVELOPE_CONFIG_TRACE",
        extra={
            "trace_type": "ENVELOPE_CONFIG_TRACE",
            "config_path": str(path),
            "checksum": config.checksum,
            "flow_scope": config.flow_scope.value,
            "timezone": config.timezone,
            "fetch_workers": config.fetch_workers,
        },
    )
    return config


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "EngineConfig",
    "FlowScope",
    "get_active_config",
]
