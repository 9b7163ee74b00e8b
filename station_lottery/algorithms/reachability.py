"""
시간 예산 기반 도달 가능 지역 필터

지역 대표 좌표(도도부현청)가 반경 안에 있는지만 보므로 의도적으로 넉넉한 상위집합
=> 최종 판정은 엔진의 역 단위 소요시간 검사
"""

import logging
from typing import Dict, List, Mapping, Optional

from station_lottery.algorithms.distance_calculator import (
    DistanceCalculator,
    get_distance_calculator,
)
from station_lottery.core.config import settings, PREFECTURES
from station_lottery.models.domain import Coordinate

logger = logging.getLogger(__name__)


def region_catalogue() -> Dict[str, Coordinate]:
    """설정의 도도부현 대표 좌표를 Coordinate로 변환"""
    return {name: Coordinate(lat, lon) for name, (lat, lon) in PREFECTURES.items()}


def max_reachable_distance_km(budget: int) -> float:
    """시간 예산(분) -> 평균 속도 기준 최대 직선 거리 + 여유 반경"""
    return (budget / 60) * settings.AVERAGE_SPEED_KMH + settings.REACHABILITY_SLACK_KM


def reachable_regions(
    departure: Coordinate,
    budget: int,
    all_regions: Mapping[str, Coordinate],
    calculator: Optional[DistanceCalculator] = None,
) -> List[str]:
    # 무제한(0) => 필터링 의미 없음
    if budget == 0:
        return list(all_regions)

    calculator = calculator or get_distance_calculator()
    limit_km = max_reachable_distance_km(budget)

    reachable = [
        name
        for name, point in all_regions.items()
        if calculator.calculate_distance_km(departure, point) <= limit_km
    ]
    logger.debug(
        f"도달 가능 지역: {len(reachable)}/{len(all_regions)}개 "
        f"(예산={budget}분, 반경={limit_km:.1f}km)"
    )
    return reachable
