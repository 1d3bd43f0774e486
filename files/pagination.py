from typing import Any, List

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from models.file import FileModel, get_files_of_parent

# OFFSET в PostgreSQL и SQLite - знаковое 64-битное число
MAX_OFFSET = 2 ** 63 - 1


def normalize_page(page: Any) -> int:
    """Номер страницы с нуля; отрицательное или нечисловое значение - страница 0"""
    try:
        value = int(page)
    except (TypeError, ValueError):
        return 0
    return value if value > 0 else 0


async def get_page(
    db: AsyncSession,
    parent_id: int,
    page: Any = 0,
    page_size: int = settings.PAGE_SIZE
) -> List[FileModel]:
    skip = normalize_page(page) * page_size
    if skip > MAX_OFFSET:
        # Таких записей в хранилище быть не может
        return []
    return await get_files_of_parent(db, parent_id, skip=skip, limit=page_size)
