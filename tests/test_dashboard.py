"""Tests for dashboard bookkeeping (rendering without a live terminal)."""

import pytest
from rich.layout import Layout

from ui import dashboard as dashboard_module
from ui.dashboard import Dashboard


@pytest.fixture
def dashboard(config, monkeypatch) -> Dashboard:
    monkeypatch.setattr(dashboard_module, "write_cli_log", lambda *args, **kwargs: None)
    monkeypatch.setattr(dashboard_module, "write_proxy_log", lambda *args, **kwargs: None)
    return Dashboard(config)


def test_counts_and_statuses(dashboard: Dashboard) -> None:
    dashboard.log_request("GET", "/api/network/observations")
    dashboard.log_proxy("network", "https://network.test/api/observations", {"page": "1"})
    dashboard.log_upstream(
        "network",
        "https://network.test/api/observations",
        200,
        "application/json",
        path="/api/network/observations",
    )
    dashboard.log_proxy("db", "https://db.test/api/modes", {})
    dashboard.log_error("route", 404, "Not Found: Invalid API path structure.")

    assert dashboard._request_count == {"network": 1, "db": 1, "rejected": 1}
    assert [r.status for r in dashboard._requests] == [None, 200]
    assert dashboard._errors[0].startswith("route 404: ")
    assert isinstance(dashboard._build_layout(), Layout)


def test_recent_requests_are_capped(dashboard: Dashboard) -> None:
    for i in range(15):
        dashboard.log_proxy("db", f"https://db.test/api/satellites/{i}", {})

    assert len(dashboard._requests) == 10
    assert dashboard._requests[0].url.endswith("/14")


def test_upstream_status_lands_on_matching_request(dashboard: Dashboard) -> None:
    dashboard.log_proxy("network", "https://network.test/api/observations", {})
    dashboard.log_proxy("network", "https://network.test/api/stations", {})

    dashboard.log_upstream(
        "network",
        "https://network.test/api/stations",
        404,
        "application/json",
        path="/api/network/stations",
    )

    statuses = {r.target_url: r.status for r in dashboard._requests}
    assert statuses == {
        "https://network.test/api/stations": 404,
        "https://network.test/api/observations": None,
    }
