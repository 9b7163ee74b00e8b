"""
Pytest 설정 및 공통 Fixture
"""

import os
import random
import sys
from pathlib import Path
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest

# 테스트 모드 환경 변수 설정 (모듈 임포트 전에 설정해야 함)
os.environ["TESTING"] = "true"
os.environ.setdefault("ENABLE_LINE_CACHE", "false")
os.environ.setdefault("ENABLE_PERFORMANCE_MONITORING", "false")

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from station_lottery.core.exceptions import ProviderUnavailableException  # noqa: E402
from station_lottery.models.domain import Coordinate, Station  # noqa: E402


class StubStationProvider:
    """
    테스트용 provider (네트워크 없음)

    호출 기록을 남겨 조회 횟수 검증에 사용
    """

    def __init__(
        self,
        lines_by_region: Optional[Dict[str, List[str]]] = None,
        stations_by_line: Optional[Dict[str, List[Station]]] = None,
        stations_by_name: Optional[Dict[str, List[Station]]] = None,
        fail_lines: bool = False,
        fail_stations: bool = False,
        fail_names: bool = False,
    ):
        self.lines_by_region = lines_by_region or {}
        self.stations_by_line = stations_by_line or {}
        self.stations_by_name = stations_by_name or {}
        self.fail_lines = fail_lines
        self.fail_stations = fail_stations
        self.fail_names = fail_names
        self.line_calls: List[str] = []
        self.station_calls: List[str] = []
        self.name_calls: List[str] = []

    async def list_lines(self, region: str) -> List[str]:
        self.line_calls.append(region)
        if self.fail_lines:
            raise ProviderUnavailableException("stub: lines unavailable")
        return list(self.lines_by_region.get(region, []))

    async def list_stations(self, line: str) -> List[Station]:
        self.station_calls.append(line)
        if self.fail_stations:
            raise ProviderUnavailableException("stub: stations unavailable")
        return list(self.stations_by_line.get(line, []))

    async def find_stations(self, name: str) -> List[Station]:
        self.name_calls.append(name)
        if self.fail_names:
            raise ProviderUnavailableException("stub: name lookup unavailable")
        return list(self.stations_by_name.get(name, []))


def make_station(
    name: str,
    lat: float,
    lon: float,
    line: str = "JR山手線",
    region: str = "東京都",
    postal_code: str = "",
    prev: Optional[str] = None,
    next_: Optional[str] = None,
) -> Station:
    return Station(
        name=name,
        line=line,
        region=region,
        coordinate=Coordinate(lat, lon),
        postal_code=postal_code,
        previous_station_name=prev,
        next_station_name=next_,
    )


@pytest.fixture
def shinjuku():
    """출발지: 新宿 (35.6895, 139.6917)"""
    return Coordinate(35.6895, 139.6917)


@pytest.fixture
def rng():
    """결정적 난수원"""
    return random.Random(42)


@pytest.fixture
def station_factory():
    return make_station


@pytest.fixture
def sample_stations():
    """테스트용 샘플 역 데이터"""
    return {
        "shinjuku": make_station(
            "新宿", 35.689607, 139.700571, postal_code="1600022", next_="新大久保"
        ),
        "yoyogi": make_station(
            "代々木", 35.6938, 139.7034, postal_code="1510053", prev="新宿"
        ),
        "tachikawa": make_station(
            "立川", 35.698353, 139.413309, line="JR中央線", postal_code="1900012"
        ),
        "hachioji": make_station(
            "八王子", 35.655555, 139.338998, line="JR中央線", postal_code="1920083"
        ),
        "unknown_postal": make_station(
            "謎駅", 35.7, 139.5, line="JR中央線", postal_code=""
        ),
        "yokohama": make_station(
            "横浜",
            35.465798,
            139.622314,
            line="JR東海道本線",
            region="神奈川県",
            postal_code="2200011",
        ),
        "osaka": make_station(
            "大阪",
            34.702398,
            135.495188,
            line="JR大阪環状線",
            region="大阪府",
            postal_code="5300001",
        ),
    }


@pytest.fixture
def stub_provider_factory():
    return StubStationProvider


@pytest.fixture
def mock_redis_client():
    """Mock Redis 클라이언트"""
    mock = MagicMock()
    mock.get.return_value = None
    mock.setex.return_value = True
    mock.delete.return_value = 1
    return mock


@pytest.fixture
def mock_line_cache(mocker):
    """Mock RedisLineCache (기본: 캐시 MISS, 캐싱 성공)"""
    mock_cache = mocker.MagicMock()
    mock_cache.get_cached_lines.return_value = None
    mock_cache.cache_lines.return_value = True
    mock_cache.ping.return_value = True
    return mock_cache
