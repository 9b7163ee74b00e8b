"""
REST API 엔드포인트 테스트
"""

import random
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from station_lottery.api.deps import get_lottery_service, get_station_search_service
from station_lottery.main import app
from station_lottery.services.lottery_service import LotteryService
from station_lottery.services.station_search_service import StationSearchService

SHINJUKU = {"latitude": 35.6895, "longitude": 139.6917}


@pytest.fixture
def provider(stub_provider_factory, sample_stations):
    yoyogi = sample_stations["yoyogi"]
    return stub_provider_factory(
        lines_by_region={"東京都": ["JR山手線"]},
        stations_by_line={"JR山手線": [yoyogi]},
        stations_by_name={"新宿": [sample_stations["shinjuku"]]},
    )


@pytest.fixture
def client(provider):
    app.dependency_overrides[get_lottery_service] = lambda: LotteryService(
        provider, rng=random.Random(42)
    )
    app.dependency_overrides[get_station_search_service] = (
        lambda: StationSearchService(provider)
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def override_provider(provider):
    app.dependency_overrides[get_lottery_service] = lambda: LotteryService(provider)
    app.dependency_overrides[get_station_search_service] = (
        lambda: StationSearchService(provider)
    )


class TestDrawEndpoint:

    def test_draw_found(self, client):
        response = client.post(
            "/v1/lottery/draw", json={**SHINJUKU, "max_time": 30, "region": "東京都"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "found"
        assert data["station"]["name"] == "代々木"
        assert data["region"] == "東京都"
        assert data["max_retries"] == 100

    def test_draw_by_station_name(self, client, provider):
        response = client.post(
            "/v1/lottery/draw",
            json={"departure_station": "新宿", "max_time": 30, "region": "東京都"},
        )

        assert response.status_code == 200
        assert response.json()["departure"]["name"] == "新宿"
        assert provider.name_calls == ["新宿"]

    def test_draw_exhausted_is_not_error(self, client):
        response = client.post(
            "/v1/lottery/draw",
            json={**SHINJUKU, "max_time": 1, "region": "東京都", "max_retries": 3},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "exhausted"
        assert data["attempts"] == 3
        assert data["station"] is None

    def test_draw_unknown_departure(self, client):
        response = client.post(
            "/v1/lottery/draw", json={"departure_station": "存在しない駅", "max_time": 30}
        )

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "DEPARTURE_UNRESOLVED"

    def test_draw_invalid_region(self, client):
        response = client.post(
            "/v1/lottery/draw", json={**SHINJUKU, "region": "Atlantis"}
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_REGION"

    def test_draw_line_list_unavailable_is_exhausted(self, client, stub_provider_factory):
        override_provider(stub_provider_factory(fail_lines=True))

        response = client.post(
            "/v1/lottery/draw",
            json={**SHINJUKU, "max_time": 30, "region": "東京都", "max_retries": 3},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "exhausted"
        assert response.json()["attempts"] == 3

    def test_region_lines_provider_unavailable(self, client, stub_provider_factory):
        override_provider(stub_provider_factory(fail_lines=True))

        response = client.get("/v1/stations/lines", params={"region": "東京都"})

        assert response.status_code == 503
        assert response.json()["detail"]["code"] == "PROVIDER_UNAVAILABLE"

    @pytest.mark.parametrize(
        "body",
        [
            {**SHINJUKU, "max_time": -1},
            {**SHINJUKU, "max_retries": 0},
            {**SHINJUKU, "max_retries": 101},
            {"latitude": 91, "longitude": 0},
        ],
    )
    def test_draw_validation(self, client, body):
        response = client.post("/v1/lottery/draw", json=body)

        assert response.status_code == 422


class TestRegionsEndpoint:

    def test_reachable_regions(self, client):
        response = client.get(
            "/v1/lottery/regions", params={**SHINJUKU, "max_time": 30}
        )

        assert response.status_code == 200
        data = response.json()
        assert "東京都" in data["regions"]
        assert "東京都(23区)" in data["regions"]
        assert "大阪府" not in data["regions"]
        assert data["count"] == len(data["regions"])

    def test_unlimited_returns_all(self, client):
        response = client.get("/v1/lottery/regions", params=SHINJUKU)

        # 47 도도부현 + 세분화 2개
        assert response.json()["count"] == 49

    def test_missing_coordinates(self, client):
        response = client.get("/v1/lottery/regions", params={"max_time": 30})

        assert response.status_code == 422


class TestStationsEndpoint:

    def test_search(self, client):
        response = client.get("/v1/stations/search", params={"q": "新宿駅"})

        assert response.status_code == 200
        data = response.json()
        assert data["keyword"] == "新宿駅"
        assert data["count"] == 1
        assert data["results"][0]["name"] == "新宿"

    def test_search_provider_unavailable(self, client, stub_provider_factory):
        override_provider(stub_provider_factory(fail_names=True))

        response = client.get("/v1/stations/search", params={"q": "新宿"})

        assert response.status_code == 503

    def test_region_lines(self, client):
        response = client.get("/v1/stations/lines", params={"region": "東京都"})

        assert response.status_code == 200
        assert response.json()["lines"] == ["JR山手線"]

    def test_subdivision_lines_use_parent(self, client, provider):
        response = client.get("/v1/stations/lines", params={"region": "東京都(多摩)"})

        assert response.status_code == 200
        assert response.json()["region"] == "東京都(多摩)"
        assert provider.line_calls == ["東京都"]

    def test_nationwide_lines_empty(self, client, provider):
        response = client.get("/v1/stations/lines", params={"region": "全国"})

        assert response.json()["count"] == 0
        assert provider.line_calls == []

    def test_unknown_region_lines(self, client):
        response = client.get("/v1/stations/lines", params={"region": "Atlantis"})

        assert response.status_code == 400


class TestHealthEndpoints:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health_cache_disabled(self, client):
        with patch("station_lottery.main.get_line_cache", return_value=None):
            response = client.get("/health")

        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["line_cache"] == "disabled"

    def test_health_cache_up(self, client, mock_line_cache):
        with patch("station_lottery.main.get_line_cache", return_value=mock_line_cache):
            response = client.get("/health")

        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["line_cache"] == "healthy"

    def test_health_cache_down_is_degraded(self, client, mock_line_cache):
        mock_line_cache.ping.return_value = False

        with patch("station_lottery.main.get_line_cache", return_value=mock_line_cache):
            response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["components"]["line_cache"] == "unhealthy"
