"""
Кто может видеть и изменять запись файла.

Видимость задаётся для каждой записи отдельно: публичный файл в приватной папке
остаётся публичным, приватный файл в публичной папке - приватным. Отказ
выглядит так же, как отсутствие записи (NotFound).
"""
from typing import Optional

from models.file import FileModel


def can_read(record: FileModel, caller_id: Optional[int]) -> bool:
    return bool(record.is_public) or (caller_id is not None and record.user_id == caller_id)


def can_write(record: FileModel, caller_id: Optional[int]) -> bool:
    return caller_id is not None and record.user_id == caller_id
