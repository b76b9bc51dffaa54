"""FastAPI dependencies for dependency injection."""

from datetime import datetime, tzinfo
from typing import Optional

from fastapi import Depends, Header, Query

from journal_analytics.datasources import DataSource
from journal_analytics.services import AnalyticsService
from journal_analytics.services.period_service import SUNDAY

# Global instances - initialized at app startup
_datasource: DataSource | None = None
_report_tz: tzinfo | None = None
_week_start: int = SUNDAY


def set_datasource(datasource: DataSource) -> None:
    """Set the global datasource instance."""
    global _datasource
    _datasource = datasource


def set_calendar(report_tz: tzinfo | None, week_start: int = SUNDAY) -> None:
    """Set the reporting timezone and first day of the week."""
    global _report_tz, _week_start
    _report_tz = report_tz
    _week_start = week_start


def get_datasource() -> DataSource:
    """Get the global datasource instance for dependency injection."""
    if _datasource is None:
        raise RuntimeError("DataSource not initialized. Call set_datasource() first.")
    return _datasource


def get_analytics_service(
    datasource: DataSource = Depends(get_datasource),
) -> AnalyticsService:
    """Build an analytics service bound to the configured calendar."""
    return AnalyticsService(datasource, tz=_report_tz, week_start=_week_start)


def get_reference_time(
    now: Optional[datetime] = Query(
        None,
        description="Reference time for period selection (ISO 8601). Defaults to the current time",
        examples=["2025-12-19T09:30:00Z"],
    ),
) -> datetime:
    """Resolve the time reporting periods are anchored on."""
    return now if now is not None else datetime.now(_report_tz)


def get_access_token(
    authorization: Optional[str] = Header(None, description="Bearer token of the signed-in user"),
) -> Optional[str]:
    """Extract the bearer token to forward to the data source."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None
