"""
Reporting Configuration Schema.

Controls how long reference data stays cached for report generation and
whether a cash-flow statement may leave ledger accounts unclassified.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Self

from geoacct_kernel.exceptions import ValidationError
from geoacct_kernel.logging_config import get_logger

logger = get_logger("modules.reporting.config")


@dataclass
class ReportingConfig:
    """Configuration schema for the reporting module."""

    # TTL of the cached account directory and cash-flow map
    cache_ttl_seconds: float = 300

    # Raise UnmappedAccountError instead of reporting excluded transactions
    require_full_coverage: bool = False

    def __post_init__(self):
        if self.cache_ttl_seconds <= 0:
            raise ValidationError(
                "cache_ttl_seconds must be positive",
                field="cache_ttl_seconds",
                value=self.cache_ttl_seconds,
            )

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("reporting_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create config from dictionary."""
        logger.info(
            "reporting_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)
