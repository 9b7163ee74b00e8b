"""
성능 모니터링 미들웨어 테스트
"""

import json
import random
from unittest.mock import patch

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from station_lottery.api.deps import get_lottery_service
from station_lottery.api.v1.router import api_router
from station_lottery.core.config import settings
from station_lottery.middleware.performance_monitoring import (
    PerformanceMonitoringMiddleware,
)
from station_lottery.services.lottery_service import LotteryService

SHINJUKU = {"latitude": 35.6895, "longitude": 139.6917}


def performance_metrics(caplog):
    return [
        json.loads(r.message[len("PERFORMANCE: "):])
        for r in caplog.records
        if r.message.startswith("PERFORMANCE:")
    ]


@pytest.fixture
def client(stub_provider_factory, sample_stations):
    provider = stub_provider_factory(
        lines_by_region={"東京都": ["JR山手線"]},
        stations_by_line={"JR山手線": [sample_stations["yoyogi"]]},
    )

    app = FastAPI()
    app.add_middleware(PerformanceMonitoringMiddleware)
    app.include_router(api_router, prefix="/v1")
    app.dependency_overrides[get_lottery_service] = lambda: LotteryService(
        provider, rng=random.Random(42)
    )

    @app.get("/boom")
    async def boom():
        raise HTTPException(status_code=503, detail="down")

    return TestClient(app)


class TestPerformanceMonitoringMiddleware:

    def test_process_time_header(self, client):
        response = client.get("/v1/lottery/regions", params=SHINJUKU)

        assert response.status_code == 200
        assert float(response.headers["X-Process-Time-Ms"]) >= 0

    def test_draw_metrics_include_outcome(self, client, caplog):
        with caplog.at_level("INFO"):
            response = client.post(
                "/v1/lottery/draw",
                json={**SHINJUKU, "max_time": 30, "region": "東京都"},
            )

        assert response.headers["X-Lottery-Status"] == "found"
        metrics = performance_metrics(caplog)
        assert len(metrics) == 1
        assert metrics[0]["path"] == "/v1/lottery/draw"
        assert metrics[0]["lottery_status"] == "found"
        assert metrics[0]["attempts"] == 1

    def test_exhausted_draw_metrics(self, client, caplog):
        with caplog.at_level("INFO"):
            client.post(
                "/v1/lottery/draw",
                json={**SHINJUKU, "max_time": 1, "region": "東京都", "max_retries": 3},
            )

        metrics = performance_metrics(caplog)[0]
        assert metrics["lottery_status"] == "exhausted"
        assert metrics["attempts"] == 3

    def test_other_paths_have_no_outcome(self, client, caplog):
        with caplog.at_level("INFO"):
            client.get("/v1/lottery/regions", params={**SHINJUKU, "max_time": 30})

        metrics = performance_metrics(caplog)[0]
        assert "lottery_status" not in metrics
        assert metrics["query_params"]["max_time"] == "30"

    def test_server_error_logged_as_error(self, client, caplog):
        with caplog.at_level("INFO"):
            response = client.get("/boom")

        assert response.status_code == 503
        records = [r for r in caplog.records if r.message.startswith("PERFORMANCE:")]
        assert records[0].levelname == "ERROR"

    def test_draw_uses_lottery_threshold(self):
        middleware = PerformanceMonitoringMiddleware(FastAPI())
        middleware.slow_threshold_ms = 3000
        middleware.draw_slow_threshold_ms = 30000

        assert middleware.threshold_for("/v1/lottery/draw") == 30000
        assert middleware.threshold_for("/v1/lottery/regions") == 3000

    def test_slow_draw_warning(self, client, caplog):
        """기준 -1ms => 모든 추첨 요청이 느린 요청 (미들웨어는 첫 요청 때 생성)"""
        with patch.object(settings, "LOTTERY_SLOW_REQUEST_THRESHOLD_MS", -1):
            with caplog.at_level("INFO"):
                client.post(
                    "/v1/lottery/draw",
                    json={**SHINJUKU, "max_time": 30, "region": "東京都"},
                )

        assert performance_metrics(caplog)[0]["slow_request"] is True
        assert any(r.levelname == "WARNING" for r in caplog.records)
