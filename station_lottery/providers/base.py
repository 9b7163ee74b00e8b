"""Station data provider port."""

from typing import List, Protocol

from station_lottery.models.domain import Station


class StationProvider(Protocol):
    """
    엔진이 사용하는 외부 조회 인터페이스

    모든 메서드는 읽기 전용, 멱등이며 전송 오류 시 ProviderUnavailableException
    """

    async def list_lines(self, region: str) -> List[str]:
        """지역(도도부현)을 지나는 노선 이름 목록. 빈 리스트도 정상 응답"""
        ...

    async def list_stations(self, line: str) -> List[Station]:
        """노선의 전체 역 목록"""
        ...

    async def find_stations(self, name: str) -> List[Station]:
        """역 이름으로 역 조회 (출발역 좌표 확인, 자동완성)"""
        ...
