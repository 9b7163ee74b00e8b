"""
외부 역/노선 데이터 제공자
"""

from station_lottery.providers.base import StationProvider
from station_lottery.providers.heartrails import HeartRailsClient

__all__ = [
    "StationProvider",
    "HeartRailsClient",
]
