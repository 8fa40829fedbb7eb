"""
Engine configuration schema.

Defines the runtime configuration of the aggregation engine.  YAML files
are parsed into ``EngineConfig`` by the loader; every field is validated at
construction time so an invalid value never reaches the engines.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Self
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from envelope_kernel.domain.values import AccountRole
from envelope_kernel.exceptions import ConfigurationError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class FlowScope(str, Enum):
    """Which accounts' transactions count toward total spent and income."""

    ALL_ACCOUNTS = "all_accounts"
    OPERATIONAL_ONLY = "operational_only"

    def account_roles(self) -> frozenset[AccountRole] | None:
        """Role filter for TransactionAggregator; None means unrestricted."""
        if self is FlowScope.OPERATIONAL_ONLY:
            return frozenset({AccountRole.OPERATIONAL})
        return None


@dataclass(frozen=True)
class EngineConfig:
    """
    Runtime configuration for the monthly overview.

    Fields:
        flow_scope: Account scope of total_spent and income.
        timezone: IANA zone used to bucket timezone-aware timestamps.
        minor_units_per_major: Display scale at the presentation boundary.
        fetch_workers: Threads used to issue the four reads concurrently.
        log_level: Level for the envelope_kernel logger hierarchy.
        database_url: Optional SQLAlchemy URL for SQL-backed sources.
        checksum: SHA-256 of the source mapping ("" for code defaults).
    """

    flow_scope: FlowScope = FlowScope.ALL_ACCOUNTS
    timezone: str = "UTC"
    minor_units_per_major: int = 100
    fetch_workers: int = 4
    log_level: str = "INFO"
    database_url: str | None = None
    checksum: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.flow_scope, FlowScope):
            try:
                object.__setattr__(self, "flow_scope", FlowScope(self.flow_scope))
            except ValueError:
                raise ConfigurationError(
                    "flow_scope",
                    self.flow_scope,
                    f"expected one of {[s.value for s in FlowScope]}",
                ) from None
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError, TypeError):
            raise ConfigurationError(
                "timezone", self.timezone, "unknown IANA time zone"
            ) from None
        if self.minor_units_per_major < 1:
            raise ConfigurationError(
                "minor_units_per_major", self.minor_units_per_major, "must be >= 1"
            )
        if self.fetch_workers < 1:
            raise ConfigurationError(
                "fetch_workers", self.fetch_workers, "must be >= 1"
            )
        level = str(self.log_level).upper()
        if level not in _LOG_LEVELS:
            raise ConfigurationError(
                "log_level", self.log_level, f"expected one of {list(_LOG_LEVELS)}"
            )
        object.__setattr__(self, "log_level", level)

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        return cls()
