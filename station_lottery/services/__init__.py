"""
Business logic services
"""

from station_lottery.services.lottery_service import LotteryService
from station_lottery.services.station_search_service import StationSearchService

__all__ = [
    "LotteryService",
    "StationSearchService",
]
