"""
redis 캐시
"""

from station_lottery.db.redis_client import RedisLineCache, init_redis

__all__ = [
    "RedisLineCache",
    "init_redis",
]
