from redis.asyncio import Redis

from .settings import settings

# Клиент Redis: сессии и очереди задач
redis_client = Redis.from_url(
    settings.REDIS_URL,
    encoding="utf-8",
    decode_responses=True,
    socket_connect_timeout=5
)

async def get_redis() -> Redis:
    return redis_client
