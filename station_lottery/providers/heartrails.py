# HeartRails Express API 클라이언트
# https://express.heartrails.com/api.html

import logging
from typing import Any, Dict, List, Optional

import httpx

from station_lottery.core.config import settings
from station_lottery.core.exceptions import ProviderUnavailableException
from station_lottery.models.domain import Coordinate, Station

logger = logging.getLogger(__name__)


class HeartRailsClient:
    """
    HeartRails Express 역/노선 조회 클라이언트 (StationProvider 구현)

    - getLines?prefecture=  -> {"response": {"line": [...]}}
    - getStations?line=     -> {"response": {"station": [...]}}
    - getStations?name=     -> {"response": {"station": [...]}}
    오류 시 {"response": {"error": "..."}}
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url or settings.PROVIDER_BASE_URL
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=timeout or settings.PROVIDER_TIMEOUT_SECONDS
        )

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def list_lines(self, region: str) -> List[str]:
        payload = await self._request({"method": "getLines", "prefecture": region})
        lines = payload.get("line") or []
        logger.debug(f"노선 조회: {region} -> {len(lines)}개")
        return list(lines)

    async def list_stations(self, line: str) -> List[Station]:
        payload = await self._request({"method": "getStations", "line": line})
        return self._parse_stations(payload)

    async def find_stations(self, name: str) -> List[Station]:
        # 이름 조회의 "not found"는 빈 결과로 취급
        payload = await self._request(
            {"method": "getStations", "name": name}, allow_not_found=True
        )
        return self._parse_stations(payload)

    async def _request(
        self, params: Dict[str, str], allow_not_found: bool = False
    ) -> Dict[str, Any]:
        try:
            response = await self.client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.warning(f"provider 요청 실패: {params}, 오류: {e}")
            raise ProviderUnavailableException(f"역 데이터 조회 실패: {e}")
        except ValueError as e:
            logger.error(f"provider 응답 파싱 실패: {params}, 오류: {e}")
            raise ProviderUnavailableException("역 데이터 응답 형식이 올바르지 않습니다")

        payload = data.get("response") if isinstance(data, dict) else None
        if not isinstance(payload, dict):
            raise ProviderUnavailableException("역 데이터 응답 형식이 올바르지 않습니다")

        error = payload.get("error")
        if error:
            if allow_not_found and "not found" in str(error).lower():
                return {}
            logger.warning(f"provider 오류 응답: {params}, error={error}")
            raise ProviderUnavailableException(f"역 데이터 제공자 오류: {error}")

        return payload

    def _parse_stations(self, payload: Dict[str, Any]) -> List[Station]:
        stations = []
        for item in payload.get("station") or []:
            try:
                stations.append(
                    Station(
                        name=item["name"],
                        line=item.get("line", ""),
                        region=item.get("prefecture", ""),
                        coordinate=Coordinate(
                            latitude=float(item["y"]), longitude=float(item["x"])
                        ),
                        postal_code=str(item.get("postal") or ""),
                        previous_station_name=item.get("prev") or None,
                        next_station_name=item.get("next") or None,
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                # 좌표 없는 항목만 건너뜀
                logger.warning(f"역 데이터 항목 무시: {item}, 오류: {e}")
        return stations
