import logging
from typing import Dict, List

from station_lottery.providers.base import StationProvider

logger = logging.getLogger(__name__)


class StationSearchService:
    """출발역 자동완성 서비스"""

    def __init__(self, provider: StationProvider):
        self.provider = provider

    async def search(self, keyword: str, limit: int = 10) -> List[Dict]:
        """
        역 이름 검색 => 정확 일치 > 접두 일치 > 부분 일치 순 정렬

        같은 역이라도 노선이 다르면 별도 항목 (출발 노선 선택용)

        Raises:
            ProviderUnavailableException: 제공자 조회 실패
        """
        keyword = keyword.strip()
        if not keyword:
            return []

        # '駅' 접미사 제거
        if len(keyword) > 1 and keyword.endswith("駅"):
            keyword = keyword[:-1]

        stations = await self.provider.find_stations(keyword)

        results = []
        seen = set()
        for station in stations:
            key = (station.name, station.line)
            if key in seen:
                continue
            seen.add(key)

            if station.name == keyword:
                priority = 1
            elif station.name.startswith(keyword):
                priority = 2
            else:
                priority = 3
            results.append((priority, station))

        results.sort(key=lambda x: (x[0], len(x[1].name), x[1].name))
        logger.debug(f"역 검색: keyword={keyword}, 결과={len(results)}개")

        return [station.to_dict() for _, station in results[:limit]]
