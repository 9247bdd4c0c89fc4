import logging

from redis.asyncio import Redis
from redis.exceptions import RedisError

from roomchat.app.common.exceptions import BackendError
from roomchat.config.database.redis import get_redis_cache

# 로거 설정
logger = logging.getLogger(__name__)


# Redis 키 생성 함수
def get_redis_key_jti(jti: str) -> str:
    return f"jti:{jti}"


async def mark_jti_revoked(jti: str, expiry: int, client: Redis | None = None):
    client = client or get_redis_cache()
    try:
        # 만료된 토큰은 어차피 거부되므로 남은 유효기간만큼만 보관
        await client.set(get_redis_key_jti(jti), "revoked", ex=max(expiry, 1))
    except RedisError as e:
        logger.error(f"Redis 저장 오류 (JTI: {jti}): {e}")
        raise BackendError(f"Failed to revoke token: {e}")


async def is_jti_revoked(jti: str | None, client: Redis | None = None) -> bool:
    if not jti:
        return False
    client = client or get_redis_cache()
    try:
        return await client.get(get_redis_key_jti(jti)) is not None
    except RedisError as e:
        logger.error(f"Redis 조회 오류 (JTI: {jti}): {e}")
        raise BackendError(f"Failed to check token state: {e}")
