"""Tests for the HTTP API."""

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from conftest import FakeDataSource, make_trade
from journal_analytics import main as entry_point
from journal_analytics.app import create_app
from journal_analytics.config import Config
from journal_analytics.datasources import DataSource, DataSourceError
from journal_analytics.models import TradeRecord

NOW = "2025-01-08T12:00:00Z"


class BrokenDataSource(DataSource):
    async def get_trades(self, access_token: Optional[str] = None) -> list[TradeRecord]:
        raise DataSourceError("Supabase returned 500 for trades")


@pytest.fixture
def source(journal):
    return FakeDataSource(journal)


@pytest.fixture
def client(source):
    app = create_app(Config(), datasource=source)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_full_report(client):
    response = client.get("/v1/analytics", params={"now": NOW})

    assert response.status_code == 200
    body = response.json()
    assert body["period"] == "all"
    assert body["metrics"]["totalTrades"] == 6
    assert body["metrics"]["netPnL"] == pytest.approx(180.0)
    assert body["traderLevel"]["level"] == "Beginner"
    assert len(body["equityCurve"]) == 6
    assert body["equityCurve"][-1]["cumulativeValue"] == pytest.approx(180.0)
    assert [s["name"] for s in body["strategies"]] == ["Reversal", "Breakout", "No Strategy"]
    assert sum(b["count"] for b in body["distribution"]) == 6
    assert len(body["holdingTimes"]) == 4
    assert body["metrics"]["bestTrade"] == pytest.approx(250.0)
    assert body["metrics"]["winStreak"] == 0


def test_week_period_filters_trades(client):
    # The week of 2025-01-05 (Sunday) to 2025-01-11 holds four journal trades
    response = client.get("/v1/trades", params={"period": "week", "now": NOW})

    body = response.json()
    assert body["range"]["period"] == "week"
    assert body["range"]["start"].startswith("2025-01-05T00:00:00")
    assert len(body["trades"]) == 4


def test_unknown_period_means_all_time(client):
    response = client.get("/v1/analytics/metrics", params={"period": "fortnight", "now": NOW})

    assert response.status_code == 200
    assert response.json()["totalTrades"] == 6


def test_infinite_profit_factor_is_rendered():
    app = create_app(Config(), datasource=FakeDataSource([make_trade(10.0), make_trade(0.0)]))
    with TestClient(app) as client:
        body = client.get("/v1/analytics/metrics").json()

    assert body["profitFactor"] == "∞"
    assert body["winRate"] == 100.0


def test_strategy_limit_truncates(client):
    response = client.get("/v1/analytics/strategies", params={"limit": 1})

    assert [s["name"] for s in response.json()] == ["Reversal"]


def test_symbols(client):
    response = client.get("/v1/analytics/symbols")

    assert [s["symbol"] for s in response.json()] == ["BTC", "ES", "NQ"]


def test_weekdays(client):
    days = [b["day"] for b in client.get("/v1/analytics/weekdays").json()]

    assert days == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def test_equity_curve_starting_balance(client):
    points = client.get("/v1/analytics/equity-curve", params={"startingBalance": 10000}).json()

    assert points[0]["cumulativeValue"] == pytest.approx(10100.0)


def test_distribution_and_holding_times(client):
    assert client.get("/v1/analytics/distribution").status_code == 200
    minutes = [p["minutes"] for p in client.get("/v1/analytics/holding-times").json()]
    assert minutes == [30, 90, 120, 15]


def test_periods(client):
    periods = client.get("/v1/periods", params={"now": NOW}).json()

    assert [p["period"] for p in periods] == ["all", "week", "month", "quarter", "year"]
    assert periods[0]["start"] is None
    assert periods[2]["start"].startswith("2025-01-01T00:00:00")


def test_bearer_token_is_forwarded(client, source):
    client.get("/v1/analytics/metrics", headers={"Authorization": "Bearer user-jwt"})
    client.get("/v1/analytics/metrics")

    assert source.tokens == ["user-jwt", None]


def test_invalid_reference_time_is_rejected(client):
    assert client.get("/v1/analytics", params={"now": "yesterday"}).status_code == 422


def test_datasource_failure_is_bad_gateway():
    app = create_app(Config(), datasource=BrokenDataSource())
    with TestClient(app) as client:
        response = client.get("/v1/analytics")

    assert response.status_code == 502
    assert "500" in response.json()["detail"]


def test_datasource_closed_on_shutdown(source):
    with TestClient(create_app(Config(), datasource=source)):
        pass

    assert source.closed


def test_trades_carry_execution_details():
    trade = make_trade(12.5, entryPrice=5000.0, exitPrice=5012.5, positionSize=1.0)
    app = create_app(Config(), datasource=FakeDataSource([trade]))
    with TestClient(app) as client:
        body = client.get("/v1/trades").json()

    row = body["trades"][0]
    assert row["entryPrice"] == 5000.0
    assert row["exitPrice"] == 5012.5
    assert row["positionSize"] == 1.0
    assert "profitLossPercent" not in row


def test_entry_point_uses_configured_store_and_log_level(monkeypatch, tmp_path):
    monkeypatch.setenv("TRADES_CSV", str(tmp_path / "trades.csv"))
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("PORT", "9001")
    calls = []
    monkeypatch.setattr(entry_point.uvicorn, "run", lambda app, **kwargs: calls.append(kwargs))

    entry_point.main()

    assert calls == [{"host": "127.0.0.1", "port": 9001, "log_level": "debug"}]
    assert Config.from_env().log_level == "DEBUG"
