"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from zoneinfo import ZoneInfo

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from journal_analytics.config import Config
from journal_analytics.datasources import CsvDataSource, DataSource, DataSourceError, SupabaseDataSource
from journal_analytics.api import router
from journal_analytics.api.dependencies import set_calendar, set_datasource
from journal_analytics.services.period_service import parse_week_start

logger = logging.getLogger(__name__)


def create_datasource(config: Config) -> DataSource:
    """Pick the trade store: a CSV export when configured, Supabase otherwise."""
    if config.trades_csv:
        return CsvDataSource(config.trades_csv)
    return SupabaseDataSource(
        api_url=config.supabase_url,
        anon_key=config.supabase_anon_key,
    )


def create_app(config: Config | None = None, datasource: DataSource | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration. If None, loads from environment.
        datasource: Trade store override. If None, built from the config.

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = Config.from_env()

    if datasource is None:
        datasource = create_datasource(config)

    report_tz = ZoneInfo(config.report_timezone)
    week_start = parse_week_start(config.week_start)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        # Startup
        logger.info("Starting Trade Journal Analytics API")
        logger.info(f"Using data source: {type(datasource).__name__}")
        logger.info(f"Reporting timezone: {config.report_timezone}, week starts on {config.week_start}")

        set_datasource(datasource)
        set_calendar(report_tz, week_start)

        yield

        # Shutdown
        logger.info("Shutting down...")
        await datasource.close()

    app = FastAPI(
        title="Trade Journal Analytics API",
        description="Performance metrics, equity curve and P&L breakdowns for journaled trades",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.exception_handler(DataSourceError)
    async def datasource_error_handler(request: Request, exc: DataSourceError):
        logger.error(f"Trade fetch failed for {request.url.path}: {exc}")
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    # Include API routes
    app.include_router(router)

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app
