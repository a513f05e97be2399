# erp_backend/app/core/errors.py
"""
Error types raised while loading and aggregating the legacy spreadsheet
exports. The analytics endpoint collapses all of them into one 500 response.
"""

ANALYTICS_FAILURE_MESSAGE = "Failed to process analytics data"


class AnalyticsDataError(Exception):
    """Base exception for analytics data problems."""
    pass


class DataSourceError(AnalyticsDataError):
    """Raised when a spreadsheet export is missing or cannot be read."""
    pass


class MalformedSheetError(AnalyticsDataError):
    """Raised when a workbook lacks the expected worksheet or cannot be parsed."""
    pass
