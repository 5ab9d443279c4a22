"""
WIP Configuration Schema.

Where WIP adjustments are booked and how large a change in earned-value WIP
must be before one is posted.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Self

from geoacct_kernel.exceptions import ValidationError
from geoacct_kernel.logging_config import get_logger
from geoacct_engines.earned_value import WIP_THRESHOLD

logger = get_logger("modules.wip.config")


@dataclass
class WipConfig:
    # Balance-sheet account holding work in progress
    wip_account_code: str = "1301"

    # Adjustments at or below this magnitude are not posted
    threshold: Decimal = WIP_THRESHOLD

    # Move project status to what its progress implies when posting
    sync_status: bool = True

    def __post_init__(self):
        if not self.wip_account_code:
            raise ValidationError("wip_account_code is required", field="wip_account_code")
        if self.threshold < 0:
            raise ValidationError(
                "threshold cannot be negative", field="threshold", value=self.threshold,
            )

    @classmethod
    def with_defaults(cls) -> Self:
        logger.info("wip_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        logger.info("wip_config_loading_from_dict", extra={"keys": sorted(data.keys())})
        kwargs = dict(data)
        if "threshold" in kwargs:
            kwargs["threshold"] = Decimal(str(kwargs["threshold"]))
        if "wip_account_code" in kwargs:
            kwargs["wip_account_code"] = str(kwargs["wip_account_code"])
        return cls(**kwargs)
