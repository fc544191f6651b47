"""Tests for report endpoints."""

from datetime import date

from fastapi.testclient import TestClient  # type: ignore[import-untyped]

from time_ledger.core.storage import StorageManager


class TestSummaryEndpoint:
    """Test GET /api/v1/reports/summary."""

    def test_summary_empty(self, client: TestClient) -> None:
        response = client.get("/api/v1/reports/summary")
        assert response.status_code == 200

        data = response.json()
        assert data["period"] == "30days"
        assert data["has_data"] is False
        assert data["series"] == [0] * 30
        assert data["chart_max"] == 1
        assert data["trend"] == {"percentage": 0, "trend_delta": 0, "has_data": False}

    def test_summary_with_data(self, client: TestClient, seeded: StorageManager) -> None:
        data = client.get("/api/v1/reports/summary", params={"period": "30days"}).json()

        assert data["has_data"] is True
        assert data["totals"]["entries_found"] == 3
        assert data["totals"]["total_earnings"] == 150.0
        assert len(data["labels"]) == len(data["series"]) == 30
        assert data["series"][-1] == 100.0
        assert data["trend"]["percentage"] == 75
        assert [p["name"] for p in data["projects"]] == ["Website", "Internal"]
        assert [c["name"] for c in data["clients"]] == ["Acme", "Beta Corp", "Idle Ltd"]
        assert len(data["weekly_labels"]) == len(data["weekly_earnings"]) == 7

    def test_summary_quarter_has_13_buckets(
        self, client: TestClient, seeded: StorageManager
    ) -> None:
        data = client.get("/api/v1/reports/summary", params={"period": "quarter"}).json()
        assert len(data["series"]) == 13

    def test_summary_cached_until_data_changes(
        self, client: TestClient, seeded: StorageManager
    ) -> None:
        first = client.get("/api/v1/reports/summary").json()
        seeded.save_entries(seeded.load_entries()[:1])
        second = client.get("/api/v1/reports/summary").json()

        assert first["totals"]["entries_found"] == 3
        assert second["totals"]["entries_found"] == 1


class TestGroupedEndpoints:
    """Test projects, clients and team."""

    def test_projects(self, client: TestClient, seeded: StorageManager) -> None:
        rows = client.get("/api/v1/reports/projects", params={"period": "all"}).json()
        assert rows[0] == {
            "id": "p1",
            "name": "Website",
            "total_time": 3 * 3_600_000,
            "total_earnings": 150.0,
            "billable_time": 3 * 3_600_000,
        }

    def test_clients_include_idle(self, client: TestClient, seeded: StorageManager) -> None:
        rows = client.get("/api/v1/reports/clients", params={"period": "all"}).json()
        idle = [r for r in rows if r["name"] == "Idle Ltd"][0]
        assert idle["total_time"] == 0

    def test_team(self, client: TestClient, seeded: StorageManager) -> None:
        rows = client.get("/api/v1/reports/team", params={"period": "all"}).json()
        assert [r["name"] for r in rows] == ["Adam", "Zoe"]

    def test_invalid_period(self, client: TestClient) -> None:
        response = client.get("/api/v1/reports/projects", params={"period": "forever"})
        assert response.status_code == 422


class TestCompareEndpoint:
    """Test GET /api/v1/reports/compare."""

    def test_compare_clients(self, client: TestClient, seeded: StorageManager) -> None:
        rows = client.get("/api/v1/reports/compare", params={"by": "clients"}).json()
        assert [r["name"] for r in rows] == ["Acme", "Beta Corp"]

    def test_compare_range(self, client: TestClient, seeded: StorageManager) -> None:
        today = date.today().isoformat()
        rows = client.get(
            "/api/v1/reports/compare",
            params={"by": "projects", "start_date": today, "end_date": today},
        ).json()
        assert rows[0]["total_earnings"] == 100.0

    def test_compare_invalid_axis(self, client: TestClient) -> None:
        response = client.get("/api/v1/reports/compare", params={"by": "tasks"})
        assert response.status_code == 422

    def test_compare_invalid_date(self, client: TestClient) -> None:
        response = client.get("/api/v1/reports/compare", params={"start_date": "2025-02-30"})
        assert response.status_code == 400
        assert "start_date" in response.json()["detail"]


class TestDetailedEndpoint:
    """Test GET /api/v1/reports/detailed."""

    def test_detailed(self, client: TestClient, seeded: StorageManager) -> None:
        data = client.get("/api/v1/reports/detailed").json()
        assert data["totals"]["entries_found"] == 3
        assert len(data["entries"]) == 3
        starts = [e["start_time"] for e in data["entries"]]
        assert starts == sorted(starts, reverse=True)

    def test_detailed_filters(self, client: TestClient, seeded: StorageManager) -> None:
        data = client.get(
            "/api/v1/reports/detailed", params={"client_id": "c2", "billable": "non-billable"}
        ).json()
        assert data["totals"]["entries_found"] == 1
        assert data["entries"][0]["project_name"] == "Internal"

    def test_detailed_invalid_billable(self, client: TestClient) -> None:
        response = client.get("/api/v1/reports/detailed", params={"billable": "maybe"})
        assert response.status_code == 422

    def test_detailed_invalid_date(self, client: TestClient) -> None:
        response = client.get("/api/v1/reports/detailed", params={"end_date": "tomorrow"})
        assert response.status_code == 400
