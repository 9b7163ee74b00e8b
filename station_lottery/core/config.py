import os
from typing import Dict, Tuple
from dotenv import load_dotenv

load_dotenv()  # 환경변수 읽어오기


class Settings:
    PROJECT_NAME: str = "Station Lottery Backend"
    VERSION: str = "2.1.0"  # 지역 세분화(RegionSubdivision) 일반화

    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    PORT: int = int(os.getenv("PORT", 8001))

    # 역/노선 데이터 제공자 (HeartRails Express)
    PROVIDER_BASE_URL: str = os.getenv(
        "PROVIDER_BASE_URL", "https://express.heartrails.com/api/json"
    )
    # 개별 조회 timeout은 provider 책임 -> 엔진은 재시도 횟수로만 제한
    PROVIDER_TIMEOUT_SECONDS: float = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", 10))

    REDIS_HOST: str = os.getenv("REDIS_HOST", "redis")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", 6379))

    # 지역별 노선 목록 캐시 TTL (노선 데이터는 거의 변하지 않음)
    LINE_CACHE_TTL_SECONDS: int = int(
        os.getenv("LINE_CACHE_TTL_SECONDS", 86400)
    )  # 1일
    ENABLE_LINE_CACHE: bool = os.getenv("ENABLE_LINE_CACHE", "true").lower() == "true"

    # 추첨 메트릭 활성화 플래그
    ENABLE_DRAW_METRICS: bool = (
        os.getenv("ENABLE_DRAW_METRICS", "true").lower() == "true"
    )

    # 성능 모니터링
    ENABLE_PERFORMANCE_MONITORING: bool = (
        os.getenv("ENABLE_PERFORMANCE_MONITORING", "true").lower() == "true"
    )
    SLOW_REQUEST_THRESHOLD_MS: int = int(os.getenv("SLOW_REQUEST_THRESHOLD_MS", 3000))
    # 추첨 요청은 시도마다 외부 조회 => 별도 기준
    LOTTERY_SLOW_REQUEST_THRESHOLD_MS: int = int(
        os.getenv("LOTTERY_SLOW_REQUEST_THRESHOLD_MS", 30000)
    )

    # 추첨 재시도 상한
    # 노선 지정(단일 노선) => 10, 전국/지역 필터 => 100 (탐색 공간이 넓음)
    LOTTERY_MAX_RETRIES_SIMPLE: int = int(os.getenv("LOTTERY_MAX_RETRIES_SIMPLE", 10))
    LOTTERY_MAX_RETRIES_FILTERED: int = int(
        os.getenv("LOTTERY_MAX_RETRIES_FILTERED", 100)
    )

    # 소요시간 추정 파라미터
    DETOUR_FACTOR: float = float(os.getenv("DETOUR_FACTOR", 1.3))  # 선로는 직선이 아님
    AVERAGE_SPEED_KMH: float = float(os.getenv("AVERAGE_SPEED_KMH", 40))  # 정차 시간 포함
    REACHABILITY_SLACK_KM: float = float(os.getenv("REACHABILITY_SLACK_KM", 80))
    # 거리 계산 LRU 캐시 크기 (좌표 쌍 개수)
    DISTANCE_CACHE_SIZE: int = int(os.getenv("DISTANCE_CACHE_SIZE", 4096))

    # CORS 설정
    ALLOWED_ORIGINS: list[str] = os.getenv(
        "ALLOWED_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000",
    ).split(",")


settings = Settings()  # 모듈화


# 전국 모드 / 노선 전체 선택 라벨
NATIONWIDE = "全国"
ALL_LINES = "すべて"

# 도도부현 대표 좌표 (도도부현청 소재지, (위도, 경도))
PREFECTURES: Dict[str, Tuple[float, float]] = {
    "北海道": (43.0642, 141.3469),
    "青森県": (40.8244, 140.7400),
    "岩手県": (39.7036, 141.1527),
    "宮城県": (38.2688, 140.8721),
    "秋田県": (39.7186, 140.1024),
    "山形県": (38.2404, 140.3633),
    "福島県": (37.7503, 140.4676),
    "茨城県": (36.3418, 140.4468),
    "栃木県": (36.5657, 139.8836),
    "群馬県": (36.3907, 139.0604),
    "埼玉県": (35.8570, 139.6489),
    "千葉県": (35.6051, 140.1233),
    "東京都": (35.6895, 139.6917),
    "神奈川県": (35.4478, 139.6425),
    "新潟県": (37.9026, 139.0236),
    "富山県": (36.6953, 137.2113),
    "石川県": (36.5947, 136.6256),
    "福井県": (36.0652, 136.2216),
    "山梨県": (35.6642, 138.5684),
    "長野県": (36.6513, 138.1810),
    "岐阜県": (35.3912, 136.7223),
    "静岡県": (34.9769, 138.3831),
    "愛知県": (35.1802, 136.9066),
    "三重県": (34.7303, 136.5086),
    "滋賀県": (35.0045, 135.8686),
    "京都府": (35.0214, 135.7556),
    "大阪府": (34.6863, 135.5200),
    "兵庫県": (34.6913, 135.1830),
    "奈良県": (34.6851, 135.8329),
    "和歌山県": (34.2260, 135.1675),
    "鳥取県": (35.5039, 134.2377),
    "島根県": (35.4723, 133.0505),
    "岡山県": (34.6618, 133.9344),
    "広島県": (34.3966, 132.4596),
    "山口県": (34.1859, 131.4714),
    "徳島県": (34.0658, 134.5593),
    "香川県": (34.3401, 134.0434),
    "愛媛県": (33.8416, 132.7657),
    "高知県": (33.5597, 133.5311),
    "福岡県": (33.6064, 130.4181),
    "佐賀県": (33.2494, 130.2988),
    "長崎県": (32.7448, 129.8737),
    "熊本県": (32.7898, 130.7417),
    "大分県": (33.2382, 131.6126),
    "宮崎県": (31.9111, 131.4239),
    "鹿児島県": (31.5602, 130.5581),
    "沖縄県": (26.2124, 127.6809),
}

# 큰 지역의 세분화 정의: {상위 지역: {세분화 이름: (우편번호 앞 3자리 시작, 끝)}}
# 범위 밖 역은 어느 세분화에도 속하지 않음 (데이터 공백으로 취급)
REGION_SUBDIVISIONS: Dict[str, Dict[str, Tuple[int, int]]] = {
    "東京都": {
        "23区": (100, 179),
        "多摩": (180, 209),
    },
}
