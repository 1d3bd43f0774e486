"""
Жизненный цикл файлов: создание, поиск, список, публикация и чтение содержимого.

Сервис работает с уже известным id вызывающего; токен сессии в id
превращают зависимости из auth.
"""
import base64
import binascii
import logging
from typing import Any, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from errors import InternalError, NotFound, ValidationError
from jobs.queue import JobQueue
from jobs.thumbnails import ThumbnailJob
from models.file import FILE_TYPES, FOLDER, IMAGE, ROOT_PARENT_ID, FileModel, get_file, parse_id
from .pagination import get_page
from .policy import can_read, can_write
from .schemas import FileCreate
from .storage import BlobStorage

logger = logging.getLogger(__name__)


def parse_parent_id(value: Any) -> Optional[int]:
    if value in (None, "", ROOT_PARENT_ID, str(ROOT_PARENT_ID)):
        return ROOT_PARENT_ID
    return parse_id(value)


class FileService:
    def __init__(
        self,
        db: AsyncSession,
        storage: BlobStorage,
        thumbnail_queue: JobQueue,
        thumbnail_widths: List[int] = settings.THUMBNAIL_WIDTHS
    ):
        self.db = db
        self.storage = storage
        self.thumbnail_queue = thumbnail_queue
        self.thumbnail_widths = thumbnail_widths

    async def upload(self, user_id: int, payload: FileCreate) -> FileModel:
        if not payload.name:
            raise ValidationError("Missing name")
        if payload.type not in FILE_TYPES:
            raise ValidationError("Missing type")
        if payload.type != FOLDER and not payload.data:
            raise ValidationError("Missing data")

        parent_id = parse_parent_id(payload.parent_id)
        if parent_id is None:
            raise ValidationError("Parent not found")
        if parent_id != ROOT_PARENT_ID:
            parent = await get_file(self.db, parent_id)
            if parent is None:
                raise ValidationError("Parent not found")
            if not parent.is_folder:
                raise ValidationError("Parent is not a folder")

        record = FileModel(
            user_id=user_id,
            name=payload.name,
            type=payload.type,
            is_public=payload.is_public,
            parent_id=parent_id,
        )

        if payload.type == FOLDER:
            await self._save(record)
            return record

        try:
            content = base64.b64decode(payload.data, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError("Invalid data")

        try:
            record.local_path = await self.storage.write(content)
        except OSError as e:
            logger.error(f"Blob write failed for {payload.name}: {str(e)}", exc_info=True)
            raise InternalError("Cannot store file")

        try:
            await self._save(record)
        except InternalError:
            await self.storage.delete(record.local_path)
            raise

        if record.type == IMAGE:
            try:
                await self.thumbnail_queue.enqueue(
                    ThumbnailJob(file_id=record.id, user_id=record.user_id).to_payload()
                )
            except Exception as e:
                # Запись уже сохранена, без миниатюр отдается оригинал
                logger.error(f"Failed to queue thumbnails for file {record.id}: {str(e)}", exc_info=True)
        return record

    async def get_by_id(self, user_id: int, file_id: Any) -> FileModel:
        """Здесь запись видит только владелец, независимо от видимости"""
        record_id = parse_id(file_id)
        if record_id is None:
            raise NotFound()
        record = await get_file(self.db, record_id, user_id=user_id)
        if record is None:
            raise NotFound()
        return record

    async def list_files(self, parent_id: Any = ROOT_PARENT_ID, page: Any = 0) -> List[FileModel]:
        """
        Одна страница записей внутри parent_id.

        Возвращаются записи всех владельцев. Неизвестный родитель или
        родитель, не являющийся папкой, дает пустую страницу.
        """
        parent = parse_parent_id(parent_id)
        if parent is None:
            return []
        if parent != ROOT_PARENT_ID:
            folder = await get_file(self.db, parent)
            if folder is None or not folder.is_folder:
                return []
        return await get_page(self.db, parent, page)

    async def publish(self, user_id: int, file_id: Any) -> FileModel:
        return await self.set_visibility(user_id, file_id, True)

    async def unpublish(self, user_id: int, file_id: Any) -> FileModel:
        return await self.set_visibility(user_id, file_id, False)

    async def set_visibility(self, user_id: int, file_id: Any, is_public: bool) -> FileModel:
        record_id = parse_id(file_id)
        record = await get_file(self.db, record_id) if record_id is not None else None
        if record is None or not can_write(record, user_id):
            raise NotFound()

        record.is_public = is_public
        await self._save(record)
        return record

    async def get_content(
        self,
        file_id: Any,
        caller_id: Optional[int],
        size: Any = None
    ) -> Tuple[FileModel, bytes]:
        record_id = parse_id(file_id)
        record = await get_file(self.db, record_id) if record_id is not None else None
        if record is None or not can_read(record, caller_id):
            raise NotFound()

        if record.is_folder:
            raise ValidationError("A folder doesn't have content")

        path = record.local_path
        width = parse_id(size)
        if width in self.thumbnail_widths:
            path = BlobStorage.variant_path(record.local_path, width)

        data = await self.storage.read(path) if path else None
        if data is None:
            raise NotFound()
        return record, data

    async def _save(self, record: FileModel) -> None:
        try:
            self.db.add(record)
            await self.db.commit()
            await self.db.refresh(record)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to save file record {record.name}: {str(e)}", exc_info=True)
            raise InternalError("Cannot save file")
