"""
역 추첨 알고리즘 및 유틸리티 함수
"""

from station_lottery.algorithms.distance_calculator import (
    DistanceCalculator,
    estimate_travel_minutes,
)
from station_lottery.algorithms.reachability import reachable_regions
from station_lottery.algorithms.candidates import build_candidates
from station_lottery.algorithms.lottery_engine import (
    LotteryEngine,
    LotteryQuery,
    Searching,
    Found,
    Exhausted,
)

__all__ = [
    "DistanceCalculator",
    "estimate_travel_minutes",
    "reachable_regions",
    "build_candidates",
    "LotteryEngine",
    "LotteryQuery",
    "Searching",
    "Found",
    "Exhausted",
]
