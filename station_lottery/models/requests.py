from typing import Optional
from pydantic import BaseModel, Field

# service별 requests 구조 정의


# 역 추첨 요청 (REST, WebSocket 공통)
class DrawRequest(BaseModel):
    departure_station: Optional[str] = Field(
        default=None, max_length=50, description="출발역 이름 (좌표 미지정 시 필수)"
    )
    latitude: Optional[float] = Field(default=None, ge=-90, le=90, description="출발 위도")
    longitude: Optional[float] = Field(
        default=None, ge=-180, le=180, description="출발 경도"
    )
    max_time: int = Field(default=0, ge=0, description="이동 시간 상한(분), 0 => 무제한")
    region: Optional[str] = Field(
        default=None, description="지역 (全国 / 도도부현 / 東京都(23区) 등)"
    )
    line: Optional[str] = Field(default=None, description="노선 (すべて / 노선 이름)")
    max_retries: Optional[int] = Field(
        default=None, ge=1, le=100, description="최대 시도 횟수 (미지정 시 서버 기본값)"
    )
