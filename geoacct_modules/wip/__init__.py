"""Work in progress: earned-value WIP over stored projects and its ledger adjustments."""

from geoacct_modules.wip.config import WipConfig
from geoacct_modules.wip.posting import WipPosting, booked_wip, build_wip_adjustment
from geoacct_modules.wip.service import WipService

__all__ = ["WipConfig", "WipPosting", "WipService", "booked_wip", "build_wip_adjustment"]
