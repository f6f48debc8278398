"""
Test suite for expense analytics.
"""

from datetime import datetime, timezone
from types import SimpleNamespace

from components.analytics.service import expense_frame, year_summary, year_trends


def row(date, amount, category="Food"):
    return SimpleNamespace(date=date, amount=amount, category=category)


ROWS = [
    row(datetime(2023, 6, 1), 1000),
    row(datetime(2024, 1, 10), 300),
    row(datetime(2024, 1, 20), 200, "Transport"),
    row(datetime(2024, 3, 5), 900),
]


class TestYearSummary:
    """One calendar year."""

    def test_months_and_categories(self):
        summary = year_summary(expense_frame(ROWS), 2024)

        assert len(summary.months) == 12
        assert summary.months[0].total == 500
        assert summary.months[0].count == 2
        assert summary.months[1].total == 0
        assert summary.months[2].total == 900
        assert summary.categories == {"Food": 1200, "Transport": 200}
        assert list(summary.categories) == ["Food", "Transport"]
        assert summary.year_total == 1400
        assert summary.average_monthly == 1400 / 12
        assert summary.highest_month == 3

    def test_empty_year(self):
        summary = year_summary(expense_frame([]), 2024)
        assert summary.year_total == 0
        assert summary.highest_month is None
        assert summary.categories == {}


class TestYearTrends:
    """Year over year totals."""

    def test_trends(self):
        trends = year_trends(expense_frame(ROWS), 2024, 3)

        assert [trend.year for trend in trends] == [2022, 2023, 2024]
        assert [trend.total for trend in trends] == [0, 1000, 1400]
        assert trends[0].change_percentage is None
        # no baseline to compare against
        assert trends[1].change_percentage is None
        assert trends[2].change_percentage == 40.0


class TestAnalyticsRoutes:
    """Analytics API."""

    def test_summary_defaults_to_current_year(self, client, auth_headers):
        client.post("/api/expenses", json={"name": "Lunch", "amount": 250}, headers=auth_headers)
        data = client.get("/api/analytics/summary", headers=auth_headers).json()["data"]
        assert data["year"] == datetime.now(timezone.utc).year
        assert data["yearTotal"] == 250

    def test_summary_for_year(self, client, auth_headers):
        client.post("/api/expenses", json={
            "name": "Laptop", "amount": 60000, "category": "Shopping", "date": "2022-07-01T10:00:00",
        }, headers=auth_headers)
        data = client.get("/api/analytics/summary?year=2022", headers=auth_headers).json()["data"]
        assert data["highestMonth"] == 7
        assert data["categories"] == {"Shopping": 60000}

    def test_trends(self, client, auth_headers):
        data = client.get("/api/analytics/trends?years=2", headers=auth_headers).json()["data"]
        assert len(data["years"]) == 2
        assert all(year["total"] == 0 for year in data["years"])
