from typing import Any, Callable, Dict, Optional, Union
from dataclasses import dataclass, field

from station_lottery.core.config import NATIONWIDE

# domain 정의
# provider 데이터를 그대로 담는 불변 객체 => engine은 좌표를 검증하지 않음


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Station:
    name: str
    line: str
    region: str  # 도도부현 이름 (prefecture)
    coordinate: Coordinate
    postal_code: str = ""
    previous_station_name: Optional[str] = None
    next_station_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "line": self.line,
            "region": self.region,
            "latitude": self.coordinate.latitude,
            "longitude": self.coordinate.longitude,
            "postal_code": self.postal_code,
            "prev": self.previous_station_name,
            "next": self.next_station_name,
        }


@dataclass(frozen=True)
class PostalPrefixRule:
    """우편번호 앞 3자리가 [start, end] 범위에 있는지 판정"""

    start: int
    end: int

    def __call__(self, postal_code: str) -> bool:
        digits = (postal_code or "").replace("-", "").strip()
        if len(digits) < 3 or not digits[:3].isdigit():
            return False
        return self.start <= int(digits[:3]) <= self.end


# ========== 지역 선택자 ==========


@dataclass(frozen=True)
class Nationwide:
    @property
    def label(self) -> str:
        return NATIONWIDE


@dataclass(frozen=True)
class Region:
    name: str

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True)
class RegionSubdivision:
    parent: str
    name: str
    rule: Callable[[str], bool] = field(compare=False, repr=False)

    @property
    def label(self) -> str:
        return f"{self.parent}({self.name})"


RegionSelector = Union[Nationwide, Region, RegionSubdivision]


# ========== 노선 선택자 ==========


@dataclass(frozen=True)
class AnyLine:
    pass


@dataclass(frozen=True)
class SpecificLine:
    name: str


LineSelector = Union[AnyLine, SpecificLine]


@dataclass(frozen=True)
class SelectionResult:
    station: Station
    estimated_travel_minutes: int
