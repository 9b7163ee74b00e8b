"""
pydantic models for 요청, 응답, 도메인 객체
"""


from station_lottery.models.requests import DrawRequest
from station_lottery.models.responses import (
    DrawResponse,
    ReachableRegionsResponse,
    RegionLinesResponse,
    StationSearchResponse,
    ErrorResponse,
)
from station_lottery.models.domain import (
    Coordinate,
    Station,
    Nationwide,
    Region,
    RegionSubdivision,
    AnyLine,
    SpecificLine,
    SelectionResult,
)

__all__ = [
    "DrawRequest",
    "DrawResponse",
    "ReachableRegionsResponse",
    "RegionLinesResponse",
    "StationSearchResponse",
    "ErrorResponse",
    "Coordinate",
    "Station",
    "Nationwide",
    "Region",
    "RegionSubdivision",
    "AnyLine",
    "SpecificLine",
    "SelectionResult",
]
