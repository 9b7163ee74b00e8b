"""
Core 설정 및 utilities, 커스텀 예외
"""

from station_lottery.core.config import settings

from station_lottery.core.exceptions import (
    StationLotteryException,
    DepartureUnresolvedException,
    EmptyCandidateSetException,
    ProviderUnavailableException,
    InvalidRegionException,
)

__all__ = [
    "settings",
    "StationLotteryException",
    "DepartureUnresolvedException",
    "EmptyCandidateSetException",
    "ProviderUnavailableException",
    "InvalidRegionException",
]
