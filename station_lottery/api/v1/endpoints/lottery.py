"""
역 추첨 REST API 엔드포인트
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response
import logging

from station_lottery.api.deps import get_lottery_service, to_http_exception
from station_lottery.core.exceptions import StationLotteryException
from station_lottery.middleware.performance_monitoring import (
    LOTTERY_ATTEMPTS_HEADER,
    LOTTERY_STATUS_HEADER,
)
from station_lottery.models.domain import Coordinate
from station_lottery.models.requests import DrawRequest
from station_lottery.models.responses import DrawResponse, ReachableRegionsResponse
from station_lottery.services.lottery_service import LotteryService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/draw", response_model=DrawResponse)
async def draw_station(
    request: DrawRequest,
    response: Response,
    service: LotteryService = Depends(get_lottery_service),
):
    """
    역 추첨 (REST API)

    조건을 만족하는 역을 찾지 못해도 오류가 아님 => status="exhausted"

    - **departure_station**: 출발역 이름 (또는 latitude/longitude)
    - **max_time**: 이동 시간 상한(분), 0은 무제한
    - **region**: 全国 / 도도부현 / 東京都(23区)
    - **line**: すべて / 노선 이름 (전국 모드에서는 무시)

    Example:
        POST /v1/lottery/draw
        {
            "departure_station": "新宿",
            "max_time": 60,
            "region": "全国"
        }
    """
    try:
        result = await service.draw(
            departure_station=request.departure_station,
            latitude=request.latitude,
            longitude=request.longitude,
            max_time=request.max_time,
            region=request.region,
            line=request.line,
            max_retries=request.max_retries,
        )
        # 성능 모니터링 미들웨어에서 추첨 결과별로 집계
        response.headers[LOTTERY_STATUS_HEADER] = result["status"]
        response.headers[LOTTERY_ATTEMPTS_HEADER] = str(result["attempts"])
        return result
    except StationLotteryException as e:
        logger.error(f"추첨 실패: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"예상치 못한 오류: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"추첨 중 오류 발생: {str(e)}")


@router.get("/regions", response_model=ReachableRegionsResponse)
async def get_reachable_regions(
    latitude: float = Query(..., ge=-90, le=90, description="출발 위도"),
    longitude: float = Query(..., ge=-180, le=180, description="출발 경도"),
    max_time: int = Query(0, ge=0, description="이동 시간 상한(분), 0 => 무제한"),
    service: LotteryService = Depends(get_lottery_service),
):
    """
    도달 가능 지역 목록 (지역 선택지)

    Example:
        GET /v1/lottery/regions?latitude=35.6895&longitude=139.6917&max_time=60
    """
    regions = service.reachable_region_options(
        Coordinate(latitude, longitude), max_time
    )
    return {"max_time": max_time, "count": len(regions), "regions": regions}
