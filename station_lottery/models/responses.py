from typing import List, Optional, Dict
from pydantic import BaseModel, Field

# service 별 응답 구조 정의


# 추첨 응답
class DrawResponse(BaseModel):
    status: str = Field(..., description="found / exhausted")
    departure: Dict = Field(..., description="출발역 이름과 좌표")
    max_time: int = Field(..., description="이동 시간 상한 (분)")
    region: str = Field(..., description="실제 적용된 지역")
    region_reset: bool = Field(
        default=False, description="도달 불가 지역이어서 전국으로 되돌렸는지 여부"
    )
    line: str = Field(..., description="적용된 노선")
    attempts: int = Field(..., description="시도 횟수")
    max_retries: int = Field(..., description="최대 시도 횟수")
    station: Optional[Dict] = Field(None, description="당첨 역 정보")
    estimated_minutes: Optional[int] = Field(None, description="예상 소요시간 (분)")
    message: str = Field(..., description="안내 메시지")


# 도달 가능 지역 응답
class ReachableRegionsResponse(BaseModel):
    max_time: int = Field(..., description="이동 시간 상한 (분)")
    count: int = Field(..., description="지역 수")
    regions: List[str] = Field(default_factory=list, description="선택 가능한 지역 목록")


# 지역 노선 응답
class RegionLinesResponse(BaseModel):
    region: str = Field(..., description="지역")
    count: int = Field(..., description="노선 수")
    lines: List[str] = Field(default_factory=list, description="노선 목록")


# 역 검색 응답 (자동완성)
class StationSearchResponse(BaseModel):
    keyword: str = Field(..., description="검색 키워드")
    count: int = Field(..., description="검색 결과 수")
    results: List[Dict] = Field(default_factory=list, description="역 정보 리스트")


# 에러 응답
class ErrorResponse(BaseModel):
    error: str = Field(..., description="에러 메시지")
    code: Optional[str] = Field(None, description="에러 코드")
