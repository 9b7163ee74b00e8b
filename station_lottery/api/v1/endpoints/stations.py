"""
역 검색 / 노선 조회 REST API 엔드포인트
"""

from fastapi import APIRouter, Depends, HTTPException, Query
import logging

from station_lottery.api.deps import (
    get_lottery_service,
    get_station_search_service,
    to_http_exception,
)
from station_lottery.core.exceptions import StationLotteryException
from station_lottery.models.responses import RegionLinesResponse, StationSearchResponse
from station_lottery.services.lottery_service import LotteryService, parent_region
from station_lottery.services.station_search_service import StationSearchService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/search", response_model=StationSearchResponse)
async def search_stations(
    q: str = Query(..., description="검색 키워드", min_length=1, max_length=50),
    limit: int = Query(10, ge=1, le=50, description="최대 결과 수"),
    service: StationSearchService = Depends(get_station_search_service),
):
    """
    출발역 검색 (자동완성용)

    Example:
        GET /v1/stations/search?q=新宿&limit=5
    """
    try:
        logger.info(f"역 검색: keyword={q}, limit={limit}")
        results = await service.search(q, limit)

        return {"keyword": q, "count": len(results), "results": results}
    except StationLotteryException as e:
        logger.error(f"역 검색 실패: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"역 검색 오류: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"검색 중 오류 발생: {str(e)}")


@router.get("/lines", response_model=RegionLinesResponse)
async def get_region_lines(
    region: str = Query(..., min_length=1, description="도도부현 또는 세분화 지역"),
    service: LotteryService = Depends(get_lottery_service),
):
    """
    지역 노선 목록 조회 (노선 선택지)

    세분화 지역은 상위 도도부현의 노선 목록을 반환

    Example:
        GET /v1/stations/lines?region=東京都
    """
    try:
        selector = service.parse_region(region)
        name = parent_region(selector)
        lines = await service.get_region_lines(name) if name else []

        return {"region": region, "count": len(lines), "lines": lines}
    except StationLotteryException as e:
        logger.error(f"노선 목록 조회 실패: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"노선 목록 조회 오류: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"조회 중 오류 발생: {str(e)}")
