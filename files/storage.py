import logging
import uuid
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from config.settings import settings

logger = logging.getLogger(__name__)


class BlobStorage:
    """Содержимое файлов на локальном диске, по одному blob с уникальным именем на загрузку"""

    def __init__(self, root: str):
        self.root = Path(root)

    async def write(self, data: bytes) -> str:
        """Записывает data под новым именем и возвращает абсолютный путь"""
        await aiofiles.os.makedirs(self.root, exist_ok=True)
        path = str(self.root.absolute() / str(uuid.uuid4()))
        await self.write_at(path, data)
        return path

    async def write_at(self, path: str, data: bytes) -> None:
        # Перезаписывает: миниатюры пишутся заново при каждом запуске
        async with aiofiles.open(path, "wb") as f:
            await f.write(data)

    async def read(self, path: str) -> Optional[bytes]:
        """None, если blob отсутствует"""
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except (FileNotFoundError, IsADirectoryError):
            return None

    async def delete(self, path: str) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass

    @staticmethod
    def variant_path(local_path: str, width: int) -> str:
        return f"{local_path}_{width}"


def get_storage() -> BlobStorage:
    return BlobStorage(settings.FOLDER_PATH)
