import os

from dotenv import load_dotenv
from redis.asyncio import Redis


load_dotenv()

REDIS_HOST = os.environ.get("REDIS_HOST", "localhost")
REDIS_PORT = int(os.environ.get("REDIS_PORT", "6379"))
REDIS_DB_CACHE = int(os.environ.get("REDIS_DB_CACHE", "0"))

redis_cache: Redis = Redis(
    host=REDIS_HOST,
    port=REDIS_PORT,
    db=REDIS_DB_CACHE,
    decode_responses=True,
)

# 변경 피드 전용 연결 (Pub/Sub)
room_redis = Redis.from_url(f"redis://{REDIS_HOST}:{REDIS_PORT}", decode_responses=True)

# 채널 이름: changes:<table>
CHANGE_CHANNEL_PREFIX = "changes"


def get_redis_cache() -> Redis:
    return redis_cache


def change_channel(table: str) -> str:
    return f"{CHANGE_CHANNEL_PREFIX}:{table}"
