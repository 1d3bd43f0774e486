"""
Сессии входа.

Сессия - один ключ Redis ``auth_<token>`` со значением id пользователя и TTL.
Использование сессию не продлевает; отсутствие ключа (выход или истечение
срока) означает анонимный запрос.
"""
import logging
from typing import Optional

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from errors import Unauthenticated
from models.user import get_user
from .utils import generate_token, verify_password

logger = logging.getLogger(__name__)

KEY_PREFIX = "auth_"


def session_key(token: str) -> str:
    return f"{KEY_PREFIX}{token}"


class SessionManager:
    def __init__(self, redis: Redis, ttl_seconds: int = settings.SESSION_TTL_SECONDS):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    async def login(self, db: AsyncSession, email: str, password: str) -> str:
        """Проверяет email и пароль, открывает сессию и возвращает её токен"""
        if not email or not password:
            raise Unauthenticated()

        user = await get_user(db, email)
        if user is None or not verify_password(password, user.hashed_password):
            logger.info(f"Rejected login for {email}")
            raise Unauthenticated()

        token = generate_token()
        await self.redis.set(session_key(token), str(user.id), ex=self.ttl_seconds)
        return token

    async def resolve(self, token: Optional[str]) -> Optional[int]:
        if not token:
            return None
        value = await self.redis.get(session_key(token))
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            logger.error(f"Malformed session value for token {token[:8]}...")
            return None

    async def logout(self, token: str) -> None:
        await self.redis.delete(session_key(token))
