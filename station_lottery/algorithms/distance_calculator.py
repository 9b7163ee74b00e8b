import math
from functools import lru_cache
from typing import Tuple, Optional

from station_lottery.core.config import settings
from station_lottery.models.domain import Coordinate

EARTH_RADIUS_KM = 6371.0


# 출발 좌표는 요청마다 달라짐 => 최근 좌표 쌍만 유지
@lru_cache(maxsize=settings.DISTANCE_CACHE_SIZE)
def _haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    # radian convertion
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])

    # haversine formula
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.asin(math.sqrt(a))
    return EARTH_RADIUS_KM * c


class DistanceCalculator:
    EARTH_RADIUS_KM = EARTH_RADIUS_KM

    def __init__(
        self,
        detour_factor: Optional[float] = None,
        average_speed_kmh: Optional[float] = None,
    ):
        self.detour_factor = (
            settings.DETOUR_FACTOR if detour_factor is None else detour_factor
        )
        self.average_speed_kmh = (
            settings.AVERAGE_SPEED_KMH
            if average_speed_kmh is None
            else average_speed_kmh
        )

    def calculate_distance_km(self, a: Coordinate, b: Coordinate) -> float:
        """두 좌표 간 대권 거리 계산(km)"""
        return self.haversine(
            (a.latitude, a.longitude), (b.latitude, b.longitude)
        )

    def haversine(
        self, coord1: Tuple[float, float], coord2: Tuple[float, float]
    ) -> float:
        """하버사인 공식으로 지구의 곡률 고려하여 두 좌표 간 거리 계산 (LRU 캐시)"""
        return _haversine_km(*coord1, *coord2)

    @staticmethod
    def cache_info():
        return _haversine_km.cache_info()

    @staticmethod
    def cache_clear() -> None:
        _haversine_km.cache_clear()

    def estimate_travel_minutes(self, a: Coordinate, b: Coordinate) -> int:
        """
        대권 거리 * 우회 계수 / 평균 속도 => 분 단위 소요시간 (반올림)

        round()는 banker's rounding이므로 사용하지 않음 (2.5분 -> 3분)
        """
        if a == b:
            return 0

        path_km = self.calculate_distance_km(a, b) * self.detour_factor
        minutes = path_km / self.average_speed_kmh * 60
        return int(math.floor(minutes + 0.5))


_distance_calculator: Optional[DistanceCalculator] = None


def get_distance_calculator() -> DistanceCalculator:
    """distance calculator 싱글톤 인스턴스 반환"""
    global _distance_calculator
    if _distance_calculator is None:
        _distance_calculator = DistanceCalculator()
    return _distance_calculator


def estimate_travel_minutes(a: Coordinate, b: Coordinate) -> int:
    return get_distance_calculator().estimate_travel_minutes(a, b)
