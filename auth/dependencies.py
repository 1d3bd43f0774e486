from typing import Optional

from fastapi import Depends
from fastapi.security import APIKeyHeader
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from config.database import get_db
from config.redis import get_redis
from errors import Unauthenticated
from models.user import User, get_user_by_id
from .sessions import SessionManager

token_header = APIKeyHeader(name="X-Token", auto_error=False)

async def get_session_manager(redis: Redis = Depends(get_redis)) -> SessionManager:
    return SessionManager(redis)

async def get_current_user(
    token: Optional[str] = Depends(token_header),
    sessions: SessionManager = Depends(get_session_manager),
    db: AsyncSession = Depends(get_db)
) -> User:
    user_id = await sessions.resolve(token)
    if user_id is None:
        raise Unauthenticated()

    user = await get_user_by_id(db, user_id)
    if user is None:
        raise Unauthenticated()
    return user

async def get_optional_user_id(
    token: Optional[str] = Depends(token_header),
    sessions: SessionManager = Depends(get_session_manager)
) -> Optional[int]:
    """Для публичных файлов: анонимный запрос не ошибка"""
    return await sessions.resolve(token)
