from typing import List

from station_lottery.models.domain import (
    Nationwide,
    Region,
    RegionSelector,
    RegionSubdivision,
    Station,
)


def build_candidates(stations: List[Station], region: RegionSelector) -> List[Station]:
    """
    지역 선택자로 노선의 역 목록을 추첨 후보로 필터링

    - Nationwide: 그대로 반환
    - Region: 도도부현 이름 일치
    - RegionSubdivision: 상위 지역 일치 + 우편번호 규칙 충족
      (어느 세분화 규칙에도 맞지 않는 역은 제외 -> 상류 데이터 공백으로 취급)

    빈 리스트는 오류가 아님 => 엔진이 해당 시도를 실패로 처리
    """
    if isinstance(region, Nationwide):
        return stations

    if isinstance(region, Region):
        return [s for s in stations if s.region == region.name]

    if isinstance(region, RegionSubdivision):
        return [
            s
            for s in stations
            if s.region == region.parent and region.rule(s.postal_code)
        ]

    raise TypeError(f"지원하지 않는 지역 선택자: {region!r}")
