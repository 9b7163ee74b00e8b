# 역 추첨 서비스

import logging
import time
import json
import random
from typing import Any, Dict, List, Optional, Tuple

from station_lottery.algorithms.lottery_engine import (
    Found,
    LotteryEngine,
    LotteryQuery,
    ProgressObserver,
)
from station_lottery.algorithms.reachability import reachable_regions, region_catalogue
from station_lottery.core.config import (
    settings,
    ALL_LINES,
    NATIONWIDE,
    REGION_SUBDIVISIONS,
)
from station_lottery.core.exceptions import (
    DepartureUnresolvedException,
    InvalidRegionException,
    ProviderUnavailableException,
)
from station_lottery.db.redis_client import RedisLineCache
from station_lottery.models.domain import (
    AnyLine,
    Coordinate,
    LineSelector,
    Nationwide,
    PostalPrefixRule,
    Region,
    RegionSelector,
    RegionSubdivision,
    SpecificLine,
)
from station_lottery.providers.base import StationProvider

logger = logging.getLogger(__name__)


def parent_region(region: RegionSelector) -> Optional[str]:
    """단일 지역 선택자의 도도부현 이름 (전국 모드는 None)"""
    if isinstance(region, Region):
        return region.name
    if isinstance(region, RegionSubdivision):
        return region.parent
    return None


def subdivision_selectors() -> List[RegionSubdivision]:
    """설정된 모든 지역 세분화 선택자"""
    return [
        RegionSubdivision(parent=parent, name=name, rule=PostalPrefixRule(start, end))
        for parent, divisions in REGION_SUBDIVISIONS.items()
        for name, (start, end) in divisions.items()
    ]


class LotteryService:

    def __init__(
        self,
        provider: StationProvider,
        line_cache: Optional[RedisLineCache] = None,
        rng: Optional[random.Random] = None,
    ):
        self.provider = provider
        self.line_cache = line_cache
        self.engine = LotteryEngine(provider, rng=rng)
        self.regions = region_catalogue()
        logger.info(
            f"LotteryService 초기화 완료 (지역 {len(self.regions)}개, "
            f"노선 캐시={'활성' if line_cache else '비활성'})"
        )

    # ========== 입력 해석 ==========

    def parse_region(self, region: Optional[str]) -> RegionSelector:
        """
        지역 문자열 -> 선택자

        - None / "" / "全国" => Nationwide
        - "東京都" => Region
        - "東京都:23区" 또는 "東京都(23区)" => RegionSubdivision

        Raises:
            InvalidRegionException: 알 수 없는 지역/세분화
        """
        if not region or region == NATIONWIDE:
            return Nationwide()

        for subdivision in subdivision_selectors():
            if region in (
                subdivision.label,
                f"{subdivision.parent}:{subdivision.name}",
            ):
                return subdivision

        if region in self.regions:
            return Region(region)

        raise InvalidRegionException(f"알 수 없는 지역입니다: {region}")

    def parse_line(self, line: Optional[str]) -> LineSelector:
        if not line or line == ALL_LINES:
            return AnyLine()
        return SpecificLine(line)

    def choose_max_retries(
        self, line: LineSelector, requested: Optional[int] = None
    ) -> int:
        if requested is not None:
            return requested
        if isinstance(line, SpecificLine):
            return settings.LOTTERY_MAX_RETRIES_SIMPLE
        return settings.LOTTERY_MAX_RETRIES_FILTERED

    # ========== 출발역 ==========

    async def resolve_departure(
        self,
        station_name: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> Tuple[str, Coordinate]:
        """
        출발역 좌표 확인 => 실패 시 재시도 없이 즉시 실패

        Raises:
            DepartureUnresolvedException: 좌표를 확인할 수 없을 때
        """
        if latitude is not None and longitude is not None:
            return station_name or "", Coordinate(latitude, longitude)

        if not station_name or not station_name.strip():
            raise DepartureUnresolvedException("출발역을 입력해주세요")

        name = station_name.strip()
        try:
            stations = await self.provider.find_stations(name)
        except ProviderUnavailableException as e:
            logger.error(f"출발역 조회 실패: {name}, 오류: {e.message}")
            raise DepartureUnresolvedException(
                f"출발역 좌표를 가져오지 못했습니다: {name}"
            )

        if not stations:
            raise DepartureUnresolvedException(f"출발역을 찾을 수 없습니다: {name}")

        # 정확 일치 우선, 없으면 첫 번째 결과
        station = next((s for s in stations if s.name == name), stations[0])
        return station.name, station.coordinate

    # ========== 지역 / 노선 ==========

    def reachable_regions(self, departure: Coordinate, budget: int) -> List[str]:
        return reachable_regions(departure, budget, self.regions)

    def reachable_region_options(self, departure: Coordinate, budget: int) -> List[str]:
        """선택지용 지역 목록 (세분화는 상위 지역이 도달 가능할 때만 포함)"""
        reachable = self.reachable_regions(departure, budget)
        options = list(reachable)
        for subdivision in subdivision_selectors():
            if subdivision.parent in reachable:
                options.append(subdivision.label)
        return options

    def normalize_region(
        self, region: RegionSelector, reachable: List[str]
    ) -> Tuple[RegionSelector, bool]:
        """선택한 단일 지역이 도달 가능 지역 밖이면 전국으로 되돌림"""
        parent = parent_region(region)
        if parent is not None and parent not in reachable:
            logger.info(f"도달 불가 지역 선택 해제: {region.label} -> {NATIONWIDE}")
            return Nationwide(), True
        return region, False

    async def get_region_lines(self, region_name: str) -> List[str]:
        """
        지역 노선 목록 (단일 지역 모드의 노선 풀)

        Raises:
            InvalidRegionException: 알 수 없는 지역
            ProviderUnavailableException: 제공자 조회 실패
        """
        if region_name not in self.regions:
            raise InvalidRegionException(f"알 수 없는 지역입니다: {region_name}")

        if self.line_cache is not None and settings.ENABLE_LINE_CACHE:
            cached = self.line_cache.get_cached_lines(region_name)
            if cached is not None:
                return cached

        lines = await self.provider.list_lines(region_name)

        if self.line_cache is not None and settings.ENABLE_LINE_CACHE and lines:
            if not self.line_cache.cache_lines(region_name, lines):
                logger.warning(f"노선 캐싱 실패 (계속 진행): {region_name}")

        return lines

    async def _draw_line_pool(
        self, region: RegionSelector, line: LineSelector
    ) -> List[str]:
        """
        단일 지역 모드의 노선 풀

        노선 지정 시 엔진이 [노선]으로 고정하므로 조회하지 않음
        조회 실패는 추첨 중단이 아님 => 빈 풀로 진행, 시도마다 실패로 집계
        """
        if isinstance(line, SpecificLine):
            return []

        try:
            return await self.get_region_lines(parent_region(region))
        except ProviderUnavailableException as e:
            logger.warning(
                f"노선 목록 조회 실패 (빈 노선 풀로 진행): {region.label}, 오류: {e.message}"
            )
            return []

    # ========== 추첨 ==========

    async def draw(
        self,
        departure_station: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        max_time: int = 0,
        region: Optional[str] = None,
        line: Optional[str] = None,
        max_retries: Optional[int] = None,
        on_progress: Optional[ProgressObserver] = None,
    ) -> Dict[str, Any]:
        """
        역 추첨 실행

        Returns:
            추첨 결과 딕셔너리 (status: found / exhausted)

        Raises:
            DepartureUnresolvedException: 출발역 좌표 확인 실패
            InvalidRegionException: 알 수 없는 지역
        """
        start_time = time.time()

        departure_name, departure = await self.resolve_departure(
            departure_station, latitude, longitude
        )

        region_selector = self.parse_region(region)
        line_selector = self.parse_line(line)

        reachable = self.reachable_regions(departure, max_time)
        region_selector, region_reset = self.normalize_region(
            region_selector, reachable
        )

        if isinstance(region_selector, Nationwide):
            if isinstance(line_selector, SpecificLine):
                logger.warning(f"전국 모드에서는 노선 지정 무시: {line_selector.name}")
                line_selector = AnyLine()
            line_pool: List[str] = []
        else:
            line_pool = await self._draw_line_pool(region_selector, line_selector)

        retries = self.choose_max_retries(line_selector, max_retries)

        logger.info(
            f"추첨 요청: 출발={departure_name or departure}, 예산={max_time}분, "
            f"지역={region_selector.label}, 노선="
            f"{line_selector.name if isinstance(line_selector, SpecificLine) else ALL_LINES}, "
            f"최대 시도={retries}"
        )

        query = LotteryQuery(
            departure=departure,
            budget=max_time,
            region=region_selector,
            line=line_selector,
            max_retries=retries,
            region_pool=tuple(reachable),
            line_pool=tuple(line_pool),
        )
        state = await self.engine.run(query, on_progress=on_progress)

        result: Dict[str, Any] = {
            "departure": {
                "name": departure_name,
                "latitude": departure.latitude,
                "longitude": departure.longitude,
            },
            "max_time": max_time,
            "region": region_selector.label,
            "region_reset": region_reset,
            "line": (
                line_selector.name
                if isinstance(line_selector, SpecificLine)
                else ALL_LINES
            ),
            "attempts": state.attempts,
            "max_retries": retries,
        }

        if isinstance(state, Found):
            result.update(
                {
                    "status": "found",
                    "station": state.result.station.to_dict(),
                    "estimated_minutes": state.result.estimated_travel_minutes,
                    "message": (
                        f"{state.result.station.name}역이 당첨되었습니다 "
                        f"(약 {state.result.estimated_travel_minutes}분)"
                    ),
                }
            )
        else:
            result.update(
                {
                    "status": "exhausted",
                    "station": None,
                    "estimated_minutes": None,
                    "message": "조건에 맞는 역을 찾지 못했습니다. 이동 시간이나 지역 조건을 완화해주세요",
                }
            )

        elapsed_time = time.time() - start_time
        self._log_draw_metrics(result, response_time_ms=elapsed_time * 1000)
        return result

    def _log_draw_metrics(self, result: Dict[str, Any], response_time_ms: float) -> None:
        """
        추첨 메트릭 로깅 => 로그 수집기에서 분석하기
        """
        if not settings.ENABLE_DRAW_METRICS:
            return

        metrics = {
            "event": "station_draw",
            "status": result["status"],
            "attempts": result["attempts"],
            "max_retries": result["max_retries"],
            "max_time": result["max_time"],
            "region": result["region"],
            "region_reset": result["region_reset"],
            "response_time_ms": round(response_time_ms, 2),
        }

        if result.get("estimated_minutes") is not None:
            metrics["estimated_minutes"] = result["estimated_minutes"]

        logger.info(f"METRICS: {json.dumps(metrics, ensure_ascii=False)}")
