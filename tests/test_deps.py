"""
API 의존성 (provider / 서비스 싱글톤) 테스트
"""

import pytest

from station_lottery.api import deps
from station_lottery.core.exceptions import (
    DepartureUnresolvedException,
    EmptyCandidateSetException,
    InvalidRegionException,
    ProviderUnavailableException,
)


@pytest.fixture(autouse=True)
def reset_singletons():
    deps.get_lottery_service.cache_clear()
    deps.get_station_search_service.cache_clear()
    yield
    deps.get_lottery_service.cache_clear()
    deps.get_station_search_service.cache_clear()


class TestProviderLifecycle:

    @pytest.mark.asyncio
    async def test_services_share_provider(self):
        try:
            lottery = deps.get_lottery_service()
            search = deps.get_station_search_service()

            assert lottery.provider is search.provider
            assert deps.get_lottery_service() is lottery
        finally:
            await deps.close_station_provider()

    @pytest.mark.asyncio
    async def test_restart_rebuilds_services(self):
        """종료 후 재시작 => 닫힌 client 대신 새 provider 사용"""
        first = deps.get_lottery_service()
        first_search = deps.get_station_search_service()
        await deps.close_station_provider()

        assert first.provider.client.is_closed

        try:
            second = deps.get_lottery_service()
            second_search = deps.get_station_search_service()

            assert second is not first
            assert second_search is not first_search
            assert second.provider is not first.provider
            assert not second.provider.client.is_closed
        finally:
            await deps.close_station_provider()

    @pytest.mark.asyncio
    async def test_close_without_provider(self):
        await deps.close_station_provider()
        await deps.close_station_provider()

        assert deps._station_provider is None


class TestToHttpException:

    @pytest.mark.parametrize(
        "exc, status_code",
        [
            (DepartureUnresolvedException(), 404),
            (InvalidRegionException(), 400),
            (ProviderUnavailableException(), 503),
            (EmptyCandidateSetException(), 400),
        ],
    )
    def test_status_mapping(self, exc, status_code):
        http_exc = deps.to_http_exception(exc)

        assert http_exc.status_code == status_code
        assert http_exc.detail == {"message": exc.message, "code": exc.code}
