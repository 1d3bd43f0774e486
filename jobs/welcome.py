import logging
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from models.user import get_user_by_id
from models.file import parse_id

logger = logging.getLogger(__name__)


class WelcomeProcessor:
    """Приветствует новых пользователей"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def __call__(self, payload: Dict[str, Any]) -> bool:
        user_id = parse_id(payload.get("userId"))
        if user_id is None:
            logger.error(f"Dropping welcome job {payload!r}: user ID is missing or invalid")
            return False

        async with self.session_factory() as db:
            user = await get_user_by_id(db, user_id)

        if user is None:
            logger.error(f"Dropping welcome job: user {user_id} not found")
            return False

        logger.info(f"Welcome {user.email}!")
        return True
