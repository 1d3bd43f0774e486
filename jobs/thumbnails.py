"""
Миниатюры загруженных изображений.

Задача создает по одной уменьшенной копии на каждую ширину и пишет её рядом
с оригиналом как ``<localPath>_<width>``. Ширины обрабатываются независимо:
ошибка одной логируется, остальные продолжаются. Имена файлов фиксированы,
повторный запуск просто перезаписывает те же файлы.
"""
import asyncio
import io
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.settings import settings
from files.storage import BlobStorage
from models.file import get_file, parse_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThumbnailJob:
    file_id: int
    user_id: int

    def to_payload(self) -> Dict[str, str]:
        return {"fileId": str(self.file_id), "userId": str(self.user_id)}

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ThumbnailJob":
        file_id = parse_id(payload.get("fileId"))
        if file_id is None:
            raise ValueError("File ID is missing or invalid")
        user_id = parse_id(payload.get("userId"))
        if user_id is None:
            raise ValueError("Owner ID is missing or invalid")
        return cls(file_id=file_id, user_id=user_id)


@dataclass
class ThumbnailResult:
    width: int
    path: str
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def make_thumbnail(data: bytes, width: int) -> bytes:
    """Уменьшает изображение до ширины width с сохранением пропорций и формата"""
    with Image.open(io.BytesIO(data)) as img:
        fmt = img.format or "PNG"
        height = max(1, round(img.height * width / img.width))
        resized = img.resize((width, height), Image.Resampling.LANCZOS)

    if fmt == "JPEG" and resized.mode not in ("RGB", "L"):
        resized = resized.convert("RGB")

    output = io.BytesIO()
    resized.save(output, format=fmt)
    return output.getvalue()


class ThumbnailProcessor:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        storage: BlobStorage,
        widths: List[int] = settings.THUMBNAIL_WIDTHS
    ):
        self.session_factory = session_factory
        self.storage = storage
        self.widths = sorted(widths, reverse=True)

    async def __call__(self, payload: Dict[str, Any]) -> List[ThumbnailResult]:
        """
        Обрабатывает одну задачу. Возвращает результат по каждой ширине или
        пустой список, если задача отброшена (плохие id, нет записи, нет blob).
        """
        try:
            job = ThumbnailJob.from_payload(payload)
        except ValueError as e:
            logger.error(f"Dropping thumbnail job {payload!r}: {str(e)}")
            return []

        async with self.session_factory() as db:
            record = await get_file(db, job.file_id, user_id=job.user_id)

        if record is None or not record.local_path:
            logger.error(f"Dropping thumbnail job: file {job.file_id} of user {job.user_id} not found")
            return []

        source = await self.storage.read(record.local_path)
        if source is None:
            logger.error(f"Dropping thumbnail job: blob of file {job.file_id} is missing")
            return []

        return list(await asyncio.gather(
            *(self._generate(source, record.local_path, width) for width in self.widths)
        ))

    async def _generate(self, source: bytes, local_path: str, width: int) -> ThumbnailResult:
        path = BlobStorage.variant_path(local_path, width)
        try:
            thumbnail = await asyncio.to_thread(make_thumbnail, source, width)
            await self.storage.write_at(path, thumbnail)
        except Exception as e:
            logger.error(f"Error creating thumbnail of width {width} for {local_path}: {str(e)}")
            return ThumbnailResult(width=width, path=path, error=e)

        logger.info(f"Thumbnail {path} created")
        return ThumbnailResult(width=width, path=path)
