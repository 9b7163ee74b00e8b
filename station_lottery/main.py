"""
Station Lottery Backend - FastAPI Application

출발역과 이동 시간 조건으로 갈 수 있는 역을 무작위로 추첨하는 서비스
"""

import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from station_lottery.core.config import settings
from station_lottery.api.deps import (
    close_station_provider,
    get_line_cache,
    get_station_provider,
)
from station_lottery.api.v1.router import api_router
from station_lottery.middleware.performance_monitoring import PerformanceMonitoringMiddleware

# 로깅 설정
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    애플리케이션 생명주기 관리

    시작: 역 데이터 provider(httpx client) 생성
    종료: httpx client 종료
    """
    logger.info("=" * 60)
    logger.info("Station Lottery Backend 시작 중...")
    logger.info("=" * 60)

    get_station_provider()
    logger.info(f"역 데이터 provider: {settings.PROVIDER_BASE_URL}")

    yield

    logger.info("Station Lottery Backend 종료 중...")
    try:
        await close_station_provider()
        logger.info("✓ Station Lottery Backend 종료 완료")
    except Exception as e:
        logger.error(f"❌ 종료 중 오류: {e}", exc_info=True)


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="""
    ## 駅ガチャ - 무작위 역 추첨

    ### 주요 기능
    - 🎲 출발역 기준 이동 시간 안의 역 추첨
    - 🗾 전국 / 도도부현 / 세분화 지역(東京都(23区) 등) 필터
    - 🚃 노선 지정 추첨
    - 📡 WebSocket 추첨 진행 상황 스트리밍
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 성능 모니터링 미들웨어 추가
if settings.ENABLE_PERFORMANCE_MONITORING:
    app.add_middleware(PerformanceMonitoringMiddleware)
    logger.info("✓ 성능 모니터링 미들웨어 활성화")

# API 라우터 등록
app.include_router(api_router, prefix="/v1")


# ========== Health Check Endpoints ==========


@app.get("/")
async def root():
    """서비스 기본 정보 반환"""
    return {
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "status": "running",
        "docs": "/docs",
        "websocket": f"ws://localhost:{settings.PORT}/v1/ws/lottery/{{client_id}}",
    }


@app.get("/health")
async def health_check():
    """
    헬스 체크 엔드포인트

    노선 캐시(redis)는 선택 요소 => 장애여도 degraded (provider 직접 조회로 동작)
    """
    line_cache = get_line_cache()
    if line_cache is None:
        cache_status = "disabled"
    else:
        cache_status = "healthy" if line_cache.ping() else "unhealthy"

    return JSONResponse(
        status_code=200,
        content={
            "status": "degraded" if cache_status == "unhealthy" else "healthy",
            "version": settings.VERSION,
            "timestamp": time.time(),
            "components": {
                "line_cache": cache_status,
                "provider": settings.PROVIDER_BASE_URL,
            },
        },
    )


# ========== Exception Handlers ==========


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """전역 예외 핸들러 -> 예상치 못한 오류 처리"""
    logger.error(f"예상치 못한 오류: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "message": "서버 내부 오류가 발생했습니다",
            "detail": str(exc) if settings.DEBUG else "Internal Server Error",
        },
    )


# ========== Development Server ==========

if __name__ == "__main__":
    import uvicorn

    logger.info("개발 서버 시작...")

    uvicorn.run(
        "station_lottery.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
        access_log=True,
        ws_ping_interval=20.0,
        ws_ping_timeout=20.0,
    )
