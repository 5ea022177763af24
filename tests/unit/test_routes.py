"""Integration tests for API routes (routes.py + main.py)."""

import pytest
from unittest.mock import MagicMock, patch
from fastapi.testclient import TestClient


@pytest.fixture
def client():
    """TestClient with logger setup patched out (no log files on disk)."""
    from fleetstats.main import app

    with patch("fleetstats.main.setup_logger_from_settings") as mock_log:
        mock_log.return_value = MagicMock()
        with TestClient(app, raise_server_exceptions=True) as c:
            yield c


@pytest.mark.integration
class TestRoutes:
    """Exercise each endpoint through the FastAPI app."""

    def test_health(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_classify(self, client):
        response = client.post(
            "/api/v1.0/status/classify",
            json={"status_code": 3, "version": "3510.2.0", "error_code": (1 << 30) | 9},
        )

        body = response.json()
        assert body["code"] == 200
        assert body["data"]["kind"] == 3
        assert body["data"]["color_role"] == "danger"
        assert body["data"]["explanation"].endswith("DownloadTransferError with ResumedFlag")

    def test_classify_unknown_code(self, client):
        response = client.post("/api/v1.0/status/classify", json={"status_code": -5})

        assert response.json()["data"]["kind"] == 1

    def test_decode(self, client):
        response = client.post("/api/v1.0/errors/decode", json={"error_code": (1 << 31) | 2404})

        assert response.json()["data"] == {
            "primary": "Http error code(404)",
            "flags": ["DevModeFlag"],
            "message": "Http error code(404) with DevModeFlag",
        }

    def test_decode_null(self, client):
        response = client.post("/api/v1.0/errors/decode", json={"error_code": None})

        assert response.json()["data"] == {"primary": "", "flags": [], "message": ""}

    def test_colors(self, client):
        response = client.post(
            "/api/v1.0/versions/colors",
            json={"versions": ["1.0.0", "2.0.0", "3.0.0"], "reference_version": "2.0.0"},
        )

        assert response.json()["data"] == {"1.0.0": "warning", "2.0.0": "success", "3.0.0": "info"}

    def test_breakdown(self, client):
        response = client.post(
            "/api/v1.0/versions/breakdown",
            json={
                "entries": [
                    {"version": "1.0.0", "percentage": 5},
                    {"version": "2.0.0", "percentage": 95},
                ],
                "reference_version": "2.0.0",
            },
        )

        data = response.json()["data"]
        assert [b["version"] for b in data] == ["2.0.0", "Other"]
        assert data[0]["color_role"] == "success"

    def test_breakdown_negative_threshold(self, client):
        response = client.post(
            "/api/v1.0/versions/breakdown",
            json={"entries": [], "significance_threshold_pct": -1},
        )

        assert response.status_code == 200
        assert response.json()["code"] == 400
        assert "significance_threshold_pct" in response.json()["msg"]

    def test_error_envelope_has_no_data(self, client):
        response = client.post(
            "/api/v1.0/timeline/ticks",
            json={"timestamps": ["2024-03-05T14:00:00"], "desired_tick_count": -2},
        )

        body = response.json()
        assert response.status_code == 200
        assert set(body) == {"code", "msg"}
        assert body["code"] == 400
        assert isinstance(body["msg"], str) and body["msg"]

    def test_ticks(self, client):
        timestamps = [f"2024-03-05T14:{minute:02d}:00" for minute in range(0, 60, 5)]
        timestamps.append("2024-03-05T15:00:00")

        response = client.post("/api/v1.0/timeline/ticks", json={"timestamps": timestamps})

        data = response.json()["data"]
        assert [t["label"] for t in data] == ["14:00", "14:15", "14:30", "14:45"]
        assert all(t["granularity"] == "time" for t in data)

    def test_ticks_invalid_count(self, client):
        response = client.post(
            "/api/v1.0/timeline/ticks",
            json={"timestamps": ["2024-03-05T14:00:00"], "desired_tick_count": 0},
        )

        assert response.json()["code"] == 400

    def test_ticks_empty_series(self, client):
        response = client.post("/api/v1.0/timeline/ticks", json={"timestamps": []})

        assert response.json()["code"] == 400

    def test_version_timeline(self, client, version_count_timeline):
        response = client.post(
            "/api/v1.0/timeline/versions",
            json={"timeline": version_count_timeline, "reference_version": "3510.2.0"},
        )

        data = response.json()["data"]
        assert data["chart"]["keys"] == ["3374.2.5", "3510.2.0"]
        assert data["breakdown"][0] == {
            "version": "3510.2.0",
            "instances": 36,
            "percentage": 90.0,
            "color_role": "success",
        }

    def test_status_timeline(self, client, status_count_timeline):
        response = client.post(
            "/api/v1.0/timeline/statuses",
            json={"timeline": status_count_timeline, "selected": 0},
        )

        data = response.json()["data"]
        assert data["chart"]["colors"]["3"] == "danger"
        assert data["breakdown"][0]["instances"] == 20

    def test_status_timeline_non_integer_key(self, client):
        response = client.post(
            "/api/v1.0/timeline/statuses",
            json={"timeline": {"2024-03-05T00:00:00Z": {"abc": {"1.0.0": 1}}}},
        )

        assert response.status_code == 200
        assert response.json() == {
            "code": 400,
            "msg": "Invalid status key 'abc', expected an integer",
        }

    def test_intervals(self, client):
        response = client.get("/api/v1.0/intervals")

        assert [i["query_value"] for i in response.json()["data"]] == ["30d", "7d", "1d", "1h"]
