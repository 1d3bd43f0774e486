from typing import Optional
import mimetypes

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import get_current_user, get_optional_user_id
from config.database import get_db
from jobs.dependencies import get_thumbnail_queue
from jobs.queue import JobQueue
from models.user import User
from .schemas import FileCreate
from .service import FileService
from .storage import BlobStorage, get_storage

router = APIRouter(prefix="/files", tags=["files"])

async def get_file_service(
    db: AsyncSession = Depends(get_db),
    storage: BlobStorage = Depends(get_storage),
    thumbnail_queue: JobQueue = Depends(get_thumbnail_queue)
) -> FileService:
    return FileService(db, storage, thumbnail_queue)

@router.post("", status_code=status.HTTP_201_CREATED, summary="Создать файл или папку")
async def upload(
    payload: FileCreate,
    user: User = Depends(get_current_user),
    service: FileService = Depends(get_file_service)
):
    record = await service.upload(user.id, payload)
    return record.to_dict()

@router.get("", summary="Список файлов папки")
async def list_files(
    parent_id: str = Query("0", alias="parentId"),
    page: str = Query("0"),
    user: User = Depends(get_current_user),
    service: FileService = Depends(get_file_service)
):
    """Постраничный список (по 20 записей) дочерних записей parentId"""
    records = await service.list_files(parent_id, page)
    return [record.to_dict() for record in records]

@router.get("/{file_id}", summary="Получить файл")
async def get_show(
    file_id: str,
    user: User = Depends(get_current_user),
    service: FileService = Depends(get_file_service)
):
    record = await service.get_by_id(user.id, file_id)
    return record.to_dict()

@router.put("/{file_id}/publish", summary="Сделать файл публичным")
async def publish(
    file_id: str,
    user: User = Depends(get_current_user),
    service: FileService = Depends(get_file_service)
):
    record = await service.publish(user.id, file_id)
    return record.to_dict()

@router.put("/{file_id}/unpublish", summary="Сделать файл приватным")
async def unpublish(
    file_id: str,
    user: User = Depends(get_current_user),
    service: FileService = Depends(get_file_service)
):
    record = await service.unpublish(user.id, file_id)
    return record.to_dict()

@router.get("/{file_id}/data", summary="Содержимое файла")
async def get_data(
    file_id: str,
    size: Optional[str] = Query(None),
    user_id: Optional[int] = Depends(get_optional_user_id),
    service: FileService = Depends(get_file_service)
):
    """Публичный файл доступен и без токена; size выбирает миниатюру"""
    record, data = await service.get_content(file_id, user_id, size)
    media_type = mimetypes.guess_type(record.name)[0] or "application/octet-stream"
    return Response(content=data, media_type=media_type)
