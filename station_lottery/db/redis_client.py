import redis
import json
from typing import List, Optional
import logging

from station_lottery.core.config import settings

logger = logging.getLogger(__name__)


class RedisLineCache:
    """
    단일 지역 모드의 노선 목록 캐시

    노선 목록은 통째로 교체(setex)만 하고 부분 수정하지 않음
    => 동시 요청 간 공유해도 안전
    redis 장애 시 None/False 반환 -> provider 직접 조회로 fallback
    """

    KEY_PREFIX = "lines:"

    def __init__(self, client: Optional[redis.Redis] = None):
        self.redis_client = client or redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=0,
            decode_responses=True,
        )

    def _key(self, region: str) -> str:
        return f"{self.KEY_PREFIX}{region}"

    def get_cached_lines(self, region: str) -> Optional[List[str]]:
        """캐시된 노선 목록 조회 => 캐시 hit/miss 로그로 기록"""
        cache_key = self._key(region)
        try:
            cached_data = self.redis_client.get(cache_key)
            if cached_data:
                logger.debug(f"캐시 HIT:{cache_key}")
                return json.loads(cached_data)
            logger.debug(f"캐시 MISS: {cache_key}")
            return None
        except redis.RedisError as e:
            logger.warning(f"Redis 캐시 조회 실패 (fallback: provider 조회): {e}")
            return None
        except json.JSONDecodeError as e:
            logger.error(f"캐시 데이터 파싱 실패: {cache_key}, 오류: {e}")
            return None

    def cache_lines(
        self, region: str, lines: List[str], ttl: Optional[int] = None
    ) -> bool:
        """노선 목록 redis에 캐싱"""
        cache_key = self._key(region)
        ttl = ttl or settings.LINE_CACHE_TTL_SECONDS
        try:
            serialized_data = json.dumps(lines, ensure_ascii=False)
            self.redis_client.setex(cache_key, ttl, serialized_data)
            logger.debug(f"노선 캐싱 성공: {cache_key}, TTL={ttl}")
            return True
        except redis.RedisError as e:
            logger.error(f"redis 캐싱 실패: {cache_key}, 오류: {e}")
            return False
        except (TypeError, ValueError) as e:
            logger.error(f"노선 데이터 직렬화 실패: {e}")
            return False

    def ping(self) -> bool:
        try:
            return bool(self.redis_client.ping())
        except redis.RedisError as e:
            logger.error(f"Redis ping 실패: {e}")
            return False


def init_redis() -> RedisLineCache:
    return RedisLineCache()
