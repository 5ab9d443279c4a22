"""Reporting: cash-flow statements and project profitability."""

from geoacct_modules.reporting.config import ReportingConfig
from geoacct_modules.reporting.service import ReportingService

__all__ = ["ReportingConfig", "ReportingService"]
