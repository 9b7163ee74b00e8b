import logging
from functools import lru_cache
from typing import Optional

from fastapi import HTTPException, status

from station_lottery.core.config import settings
from station_lottery.core.exceptions import (
    StationLotteryException,
    DepartureUnresolvedException,
    InvalidRegionException,
    ProviderUnavailableException,
)
from station_lottery.db.redis_client import RedisLineCache, init_redis
from station_lottery.providers.heartrails import HeartRailsClient
from station_lottery.services.lottery_service import LotteryService
from station_lottery.services.station_search_service import StationSearchService

logger = logging.getLogger(__name__)

# Lazy initialization: httpx client는 앱 전체에서 하나만 사용, lifespan 종료 시 close
_station_provider: Optional[HeartRailsClient] = None


def get_station_provider() -> HeartRailsClient:
    global _station_provider
    if _station_provider is None:
        _station_provider = HeartRailsClient()
    return _station_provider


async def close_station_provider() -> None:
    global _station_provider
    if _station_provider is not None:
        await _station_provider.close()
        _station_provider = None
    # 닫힌 client를 들고 있는 서비스 싱글톤도 함께 폐기
    get_lottery_service.cache_clear()
    get_station_search_service.cache_clear()


@lru_cache()
def get_line_cache() -> Optional[RedisLineCache]:
    if not settings.ENABLE_LINE_CACHE:
        return None
    return init_redis()


# lru_cache 사용하여 싱글톤 패턴과 유사한 효과, 의존성 주입
@lru_cache()
def get_lottery_service() -> LotteryService:
    return LotteryService(get_station_provider(), line_cache=get_line_cache())


@lru_cache()
def get_station_search_service() -> StationSearchService:
    return StationSearchService(get_station_provider())


# 도메인 예외 -> HTTP 상태 코드
_STATUS_BY_EXCEPTION = {
    DepartureUnresolvedException: status.HTTP_404_NOT_FOUND,
    InvalidRegionException: status.HTTP_400_BAD_REQUEST,
    ProviderUnavailableException: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def to_http_exception(exc: StationLotteryException) -> HTTPException:
    status_code = _STATUS_BY_EXCEPTION.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return HTTPException(
        status_code=status_code, detail={"message": exc.message, "code": exc.code}
    )
