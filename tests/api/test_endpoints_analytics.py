"""Tests for analytics endpoints."""

from datetime import date

from fastapi.testclient import TestClient  # type: ignore[import-untyped]

from time_ledger.core.storage import StorageManager

ONE_HOUR = 3_600_000


class TestSeriesEndpoint:
    """Test GET /api/v1/analytics/series."""

    def test_series_defaults(self, client: TestClient) -> None:
        response = client.get("/api/v1/analytics/series")
        assert response.status_code == 200

        data = response.json()
        assert data["period"] == "30days"
        assert data["metric"] == "earnings"
        assert data["values"] == [0] * 30
        assert data["chart_max"] == 1

    def test_series_duration(self, client: TestClient, seeded: StorageManager) -> None:
        data = client.get(
            "/api/v1/analytics/series", params={"period": "30days", "metric": "duration"}
        ).json()
        assert data["values"][-1] == 3 * ONE_HOUR
        assert data["chart_max"] == 3 * ONE_HOUR

    def test_series_productivity(self, client: TestClient, seeded: StorageManager) -> None:
        data = client.get(
            "/api/v1/analytics/series", params={"period": "30days", "metric": "productivity"}
        ).json()
        assert data["values"][-1] == 67
        assert all(0 <= v <= 100 for v in data["values"])

    def test_series_year(self, client: TestClient, seeded: StorageManager) -> None:
        data = client.get("/api/v1/analytics/series", params={"period": "year"}).json()
        assert len(data["labels"]) == len(data["values"]) == 12

    def test_series_invalid_metric(self, client: TestClient) -> None:
        response = client.get("/api/v1/analytics/series", params={"metric": "velocity"})
        assert response.status_code == 422


class TestProductivityEndpoint:
    def test_productivity_no_data(self, client: TestClient) -> None:
        data = client.get("/api/v1/analytics/productivity").json()
        assert data == {"percentage": 0, "trend_delta": 0, "has_data": False}

    def test_productivity(self, client: TestClient, seeded: StorageManager) -> None:
        data = client.get("/api/v1/analytics/productivity", params={"period": "30days"}).json()
        assert data == {"percentage": 75, "trend_delta": 75, "has_data": True}


class TestWeekEndpoint:
    def test_week_monday(self, client: TestClient, seeded: StorageManager) -> None:
        data = client.get("/api/v1/analytics/week").json()
        assert data["labels"] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        assert sum(data["durations"]) == 3 * ONE_HOUR
        assert sum(data["earnings"]) == 100.0

    def test_week_rotation(self, client: TestClient, seeded: StorageManager) -> None:
        monday = client.get("/api/v1/analytics/week", params={"week_start": "monday"}).json()
        sunday = client.get("/api/v1/analytics/week", params={"week_start": "sunday"}).json()
        assert sunday["labels"][0] == "Sun"
        # Both weeks contain today, and only today has entries
        assert sum(sunday["durations"]) == sum(monday["durations"]) == 3 * ONE_HOUR


class TestTodayEndpoint:
    def test_today(self, client: TestClient, seeded: StorageManager) -> None:
        data = client.get("/api/v1/analytics/today").json()
        assert data == {
            "total_time": 3 * ONE_HOUR,
            "billable_time": 2 * ONE_HOUR,
            "non_billable_time": ONE_HOUR,
            "earnings": 100.0,
            "entries": 2,
        }

    def test_today_empty(self, client: TestClient) -> None:
        assert client.get("/api/v1/analytics/today").json()["entries"] == 0


class TestCalendarEndpoint:
    """Test GET /api/v1/analytics/calendar."""

    def test_calendar_current_month(self, client: TestClient, seeded: StorageManager) -> None:
        data = client.get("/api/v1/analytics/calendar").json()
        today = date.today()
        assert (data["year"], data["month"]) == (today.year, today.month)

        cells = [cell for week in data["weeks"] for cell in week if cell]
        today_cell = [cell for cell in cells if cell["day"] == today.isoformat()][0]
        assert today_cell["total_time"] == 3 * ONE_HOUR
        assert len(today_cell["entry_ids"]) == 2

    def test_calendar_leap_february(self, client: TestClient) -> None:
        data = client.get(
            "/api/v1/analytics/calendar", params={"month": "2024-02", "week_start": "sunday"}
        ).json()
        assert data["weekdays"][0] == "Sun"
        assert data["weeks"][0][:4] == [None, None, None, None]
        assert data["weeks"][0][4]["day"] == "2024-02-01"
        assert len([cell for week in data["weeks"] for cell in week if cell]) == 29
        assert data["total_time"] == 0

    def test_calendar_invalid_month(self, client: TestClient) -> None:
        for month in ("2024-13", "february"):
            response = client.get("/api/v1/analytics/calendar", params={"month": month})
            assert response.status_code == 400
            assert "YYYY-MM" in response.json()["detail"]
