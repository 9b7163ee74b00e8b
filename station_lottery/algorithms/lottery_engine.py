"""
역 추첨 엔진

상태 머신: Searching(attempt) -> Found(result) | Exhausted
한 번의 step = 한 번의 시도 (지역 -> 노선 -> 역 추첨 후 소요시간 판정)

- 시도는 순차 실행 (노선 선택이 보이는 역 목록을 결정)
- 외부 조회 실패/빈 후보는 해당 시도의 실패로만 처리하고 재시도 횟수에 포함
- 전국 모드는 매 시도마다 지역을 다시 뽑고 노선 목록을 다시 조회
  => 시도마다 다른 지역이 표본으로 뽑히도록 캐시하지 않음
"""

import inspect
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence, Union

from station_lottery.algorithms.candidates import build_candidates
from station_lottery.algorithms.distance_calculator import (
    DistanceCalculator,
    get_distance_calculator,
)
from station_lottery.core.exceptions import (
    EmptyCandidateSetException,
    ProviderUnavailableException,
)
from station_lottery.models.domain import (
    AnyLine,
    Coordinate,
    LineSelector,
    Nationwide,
    RegionSelector,
    SelectionResult,
    SpecificLine,
)
from station_lottery.providers.base import StationProvider

logger = logging.getLogger(__name__)


# ========== 상태 ==========


@dataclass(frozen=True)
class Searching:
    attempt: int


@dataclass(frozen=True)
class Found:
    result: SelectionResult
    attempts: int


@dataclass(frozen=True)
class Exhausted:
    attempts: int


LotteryState = Union[Searching, Found, Exhausted]


@dataclass(frozen=True)
class AttemptProgress:
    attempt: int
    max_retries: int
    label: str


ProgressObserver = Callable[[AttemptProgress], Union[None, Awaitable[None]]]


@dataclass(frozen=True)
class LotteryQuery:
    """한 번의 추첨 호출 입력"""

    departure: Coordinate
    budget: int  # 분, 0 => 무제한
    region: RegionSelector
    line: LineSelector
    max_retries: int
    region_pool: Sequence[str] = ()  # 전국 모드: 도달 가능 지역
    line_pool: Sequence[str] = ()  # 단일 지역 모드: 지역의 노선 목록


class LotteryEngine:
    def __init__(
        self,
        provider: StationProvider,
        rng: Optional[random.Random] = None,
        calculator: Optional[DistanceCalculator] = None,
    ):
        self.provider = provider
        self.rng = rng or random.Random()
        self.calculator = calculator or get_distance_calculator()

    def initial_state(self, query: LotteryQuery) -> LotteryState:
        if query.max_retries <= 0:
            return Exhausted(attempts=0)
        return Searching(attempt=1)

    async def step(self, state: LotteryState, query: LotteryQuery) -> LotteryState:
        """Searching 상태에서 한 번의 시도를 수행하고 다음 상태 반환"""
        if not isinstance(state, Searching):
            return state

        try:
            result = await self._attempt(query)
        except (EmptyCandidateSetException, ProviderUnavailableException) as e:
            logger.debug(f"시도 {state.attempt} 실패 ({e.code}): {e.message}")
            result = None

        if result is not None:
            return Found(result=result, attempts=state.attempt)

        next_attempt = state.attempt + 1
        if next_attempt > query.max_retries:
            return Exhausted(attempts=query.max_retries)
        return Searching(attempt=next_attempt)

    async def run(
        self, query: LotteryQuery, on_progress: Optional[ProgressObserver] = None
    ) -> Union[Found, Exhausted]:
        """종료 상태(Found/Exhausted)에 도달할 때까지 step 반복"""
        state = self.initial_state(query)

        while isinstance(state, Searching):
            if on_progress is not None:
                progress = AttemptProgress(
                    attempt=state.attempt,
                    max_retries=query.max_retries,
                    label=f"추첨 중... ({state.attempt}/{query.max_retries}회차)",
                )
                notified = on_progress(progress)
                if inspect.isawaitable(notified):
                    await notified

            state = await self.step(state, query)

        if isinstance(state, Found):
            logger.info(
                f"추첨 성공: {state.result.station.name}({state.result.station.line}), "
                f"약 {state.result.estimated_travel_minutes}분, 시도={state.attempts}"
            )
        else:
            logger.info(f"추첨 소진: {state.attempts}회 시도 후 조건을 만족하는 역 없음")
        return state

    async def select(
        self,
        departure: Coordinate,
        budget: int,
        region: RegionSelector,
        line: LineSelector = AnyLine(),
        max_retries: int = 10,
        region_pool: Sequence[str] = (),
        line_pool: Sequence[str] = (),
        on_progress: Optional[ProgressObserver] = None,
    ) -> Union[SelectionResult, Exhausted]:
        query = LotteryQuery(
            departure=departure,
            budget=budget,
            region=region,
            line=line,
            max_retries=max_retries,
            region_pool=tuple(region_pool),
            line_pool=tuple(line_pool),
        )
        state = await self.run(query, on_progress=on_progress)
        if isinstance(state, Found):
            return state.result
        return state

    async def _resolve_line_pool(self, query: LotteryQuery) -> List[str]:
        # 전국 모드: 매 시도마다 지역 추첨 + 노선 목록 재조회
        if isinstance(query.region, Nationwide):
            if not query.region_pool:
                return []
            region = self.rng.choice(query.region_pool)
            lines = await self.provider.list_lines(region)
            logger.debug(f"지역 추첨: {region}, 노선 {len(lines)}개")
            return lines

        if isinstance(query.line, SpecificLine):
            return [query.line.name]
        return list(query.line_pool)

    async def _attempt(self, query: LotteryQuery) -> Optional[SelectionResult]:
        line_pool = await self._resolve_line_pool(query)
        if not line_pool:
            raise EmptyCandidateSetException("추첨할 노선이 없습니다")

        line = self.rng.choice(line_pool)
        stations = await self.provider.list_stations(line)

        candidates = build_candidates(stations, query.region)
        if not candidates:
            raise EmptyCandidateSetException(f"{line}: 조건에 맞는 역이 없습니다")

        station = self.rng.choice(candidates)
        minutes = self.calculator.estimate_travel_minutes(
            query.departure, station.coordinate
        )

        if query.budget == 0 or minutes <= query.budget:
            return SelectionResult(station=station, estimated_travel_minutes=minutes)

        logger.debug(
            f"시간 초과로 기각: {station.name}({line}) 약 {minutes}분 > {query.budget}분"
        )
        return None
