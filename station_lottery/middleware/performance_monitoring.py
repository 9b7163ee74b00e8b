# 성능 모니터링 미들웨어

import time
import logging
import json
from typing import Any, Callable, Dict
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from station_lottery.core.config import settings

logger = logging.getLogger(__name__)

# 추첨 엔드포인트가 응답 헤더로 남기는 결과 (found / exhausted, 시도 횟수)
LOTTERY_STATUS_HEADER = "X-Lottery-Status"
LOTTERY_ATTEMPTS_HEADER = "X-Lottery-Attempts"

DRAW_PATH = "/v1/lottery/draw"


class PerformanceMonitoringMiddleware(BaseHTTPMiddleware):
    """
    요청 응답 시간 측정 + PERFORMANCE 로그

    추첨 요청은 시도마다 외부 조회를 하므로 느린 요청 기준을 따로 두고,
    결과(status)와 시도 횟수를 함께 기록 => 시도 수 대비 응답 시간 분석용
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.slow_threshold_ms = settings.SLOW_REQUEST_THRESHOLD_MS
        self.draw_slow_threshold_ms = settings.LOTTERY_SLOW_REQUEST_THRESHOLD_MS

    def threshold_for(self, path: str) -> int:
        if path == DRAW_PATH:
            return self.draw_slow_threshold_ms
        return self.slow_threshold_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_time_ms = (time.time() - start_time) * 1000
            logger.error(
                f"요청 처리 중 예외 발생: {request.method} {request.url.path}, "
                f"소요시간={elapsed_time_ms:.2f}ms, 예외={str(e)}",
                exc_info=True,
            )
            raise

        elapsed_time_ms = (time.time() - start_time) * 1000
        response.headers["X-Process-Time-Ms"] = f"{elapsed_time_ms:.2f}"

        path = request.url.path
        threshold_ms = self.threshold_for(path)
        metrics: Dict[str, Any] = {
            "event": "http_request",
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "elapsed_time_ms": round(elapsed_time_ms, 2),
            "slow_request": elapsed_time_ms > threshold_ms,
        }

        lottery_status = response.headers.get(LOTTERY_STATUS_HEADER)
        if lottery_status is not None:
            metrics["lottery_status"] = lottery_status
            attempts = response.headers.get(LOTTERY_ATTEMPTS_HEADER)
            if attempts is not None and attempts.isdigit():
                metrics["attempts"] = int(attempts)

        if request.query_params:
            metrics["query_params"] = dict(request.query_params)

        if metrics["slow_request"]:
            logger.warning(
                f"⚠️ 느린 요청 감지: {request.method} {path}, "
                f"소요시간={elapsed_time_ms:.2f}ms (기준: {threshold_ms}ms)"
            )

        # 5xx만 ERROR (추첨 소진/입력 오류는 정상 흐름)
        log_level = logging.ERROR if response.status_code >= 500 else logging.INFO
        logger.log(log_level, f"PERFORMANCE: {json.dumps(metrics, ensure_ascii=False)}")
        return response
