"""
FAST API Websocket endpoint

추첨 진행 상황(시도 회차)을 실시간으로 전달
"""

import asyncio
import logging
from typing import Dict
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError

from station_lottery.algorithms.lottery_engine import AttemptProgress
from station_lottery.api.deps import get_lottery_service
from station_lottery.core.exceptions import StationLotteryException
from station_lottery.models.requests import DrawRequest  # rest api에서 쓰던 모델 재사용
from station_lottery.services.lottery_service import LotteryService

logger = logging.getLogger(__name__)

router = APIRouter()


class ConnectionManager:
    """websocket 연결 관리자"""

    # 임시 최대 동시 연결 수
    MAX_CONNECTIONS = 1000

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}
        # 연결별 진행 중인 추첨 => 새 추첨 요청이 오면 이전 추첨은 취소
        self.draw_tasks: Dict[str, asyncio.Task] = {}

    async def connect(self, websocket: WebSocket, client_id: str) -> bool:
        if len(self.active_connections) >= self.MAX_CONNECTIONS:
            await websocket.close(
                code=status.WS_1008_POLICY_VIOLATION,
                reason="서버 연결 한계에 도달했습니다.",
            )
            logger.warning(
                f"연결 거부(한계 도달): client={client_id}, "
                f"current={len(self.active_connections)}"
            )
            return False

        await websocket.accept()
        self.active_connections[client_id] = websocket
        logger.info(
            f"클라이언트 연결: {client_id} "
            f"총 {len(self.active_connections)}/{self.MAX_CONNECTIONS} 개 연결"
        )
        return True

    def disconnect(self, client_id: str):
        self.cancel_draw(client_id)
        if client_id in self.active_connections:
            del self.active_connections[client_id]
            logger.info(
                f"클라이언트 연결 해제: {client_id}, 남은 연결: {len(self.active_connections)}개"
            )

    def start_draw(self, client_id: str, coro) -> asyncio.Task:
        """이전 추첨을 취소하고 새 추첨 시작 (이전 결과는 버림)"""
        self.cancel_draw(client_id)
        task = asyncio.create_task(coro)
        self.draw_tasks[client_id] = task
        return task

    def cancel_draw(self, client_id: str):
        task = self.draw_tasks.pop(client_id, None)
        if task is not None and not task.done():
            task.cancel()
            logger.info(f"이전 추첨 취소: {client_id}")

    async def send_message(self, client_id: str, message: dict):
        """특정 클라이언트에게 메시지 전송"""
        if client_id in self.active_connections:
            try:
                await self.active_connections[client_id].send_json(message)
            except Exception as e:
                logger.error(f"메시지 전송 실패 (client={client_id}): {e}")

    async def send_error(self, client_id: str, error_message: str, code: str = None):
        """에러 메시지 전송"""
        await self.send_message(
            client_id,
            {"type": "error", "message": error_message, "code": code},
        )

    def get_connection_count(self) -> int:
        """활성 연결 수 반환"""
        return len(self.active_connections)


manager = ConnectionManager()


@router.websocket("/ws/lottery/{client_id}")
async def websocket_endpoint(
    websocket: WebSocket,
    client_id: str,
    service: LotteryService = Depends(get_lottery_service),
):
    """
    Websocket main endpoint

    /v1/ws/lottery/{client_id}

    client -> {"type": "draw", "data": {...DrawRequest}}
    server -> {"type": "progress", ...} * n, {"type": "result", "data": {...}}
    """
    if not await manager.connect(websocket, client_id):
        return

    try:
        await manager.send_message(
            client_id, {"type": "connected", "client_id": client_id}
        )

        while True:
            data = await websocket.receive_json()
            message_type = data.get("type")

            logger.debug(f"메시지 수신: client={client_id}, type={message_type}")

            if message_type == "draw":
                manager.start_draw(
                    client_id, handle_draw(client_id, data.get("data") or {}, service)
                )

            elif message_type == "cancel":
                manager.cancel_draw(client_id)

            elif message_type == "ping":
                await manager.send_message(client_id, {"type": "pong"})

            else:
                await manager.send_error(
                    client_id,
                    f"알 수 없는 메시지 타입: {message_type}",
                    "UNKNOWN_MESSAGE_TYPE",
                )

    except WebSocketDisconnect:
        logger.info(f"WebSocket 정상 종료: {client_id}")
        manager.disconnect(client_id)
    except Exception as e:
        logger.error(f"WebSocket 오류 (client={client_id}): {e}", exc_info=True)
        await manager.send_error(
            client_id, "서버 오류가 발생했습니다", "INTERNAL_SERVER_ERROR"
        )
        manager.disconnect(client_id)


async def handle_draw(client_id: str, data: dict, service: LotteryService):
    """추첨 실행 + 시도마다 진행 메시지 전송"""

    # 입력값 검증
    try:
        request_model = DrawRequest(**data)
    except ValidationError as e:
        await manager.send_error(
            client_id, f"입력값이 올바르지 않습니다: {e.errors()}", "INVALID_PARAMETERS"
        )
        return

    async def on_progress(progress: AttemptProgress):
        await manager.send_message(
            client_id,
            {
                "type": "progress",
                "attempt": progress.attempt,
                "max_retries": progress.max_retries,
                "label": progress.label,
            },
        )

    try:
        result = await service.draw(
            departure_station=request_model.departure_station,
            latitude=request_model.latitude,
            longitude=request_model.longitude,
            max_time=request_model.max_time,
            region=request_model.region,
            line=request_model.line,
            max_retries=request_model.max_retries,
            on_progress=on_progress,
        )
        await manager.send_message(client_id, {"type": "result", "data": result})

    except StationLotteryException as e:
        logger.error(f"추첨 실패 (client={client_id}): {e.message}")
        await manager.send_error(client_id, e.message, e.code)
    except asyncio.CancelledError:
        logger.info(f"추첨 중단 (client={client_id})")
        raise
    except Exception as e:
        logger.error(f"추첨 중 오류 (client={client_id}): {e}", exc_info=True)
        await manager.send_error(
            client_id, "추첨 중 오류가 발생했습니다", "INTERNAL_SERVER_ERROR"
        )
