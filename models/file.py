from typing import List, Optional

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession
from config.database import Base

ROOT_PARENT_ID = 0

FOLDER = "folder"
FILE = "file"
IMAGE = "image"
FILE_TYPES = (FOLDER, FILE, IMAGE)

# Верхняя граница Integer (int4) в PostgreSQL
MAX_ID = 2 ** 31 - 1

class FileModel(Base):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    is_public = Column(Boolean, nullable=False, default=False)
    # 0 - корень, иначе id папки
    parent_id = Column(Integer, nullable=False, default=ROOT_PARENT_ID, index=True)
    local_path = Column(String, nullable=True)  # у папок всегда NULL

    owner = relationship("User", back_populates="files")

    @property
    def is_folder(self) -> bool:
        return self.type == FOLDER

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "type": self.type,
            "isPublic": self.is_public,
            "parentId": self.parent_id,
        }

async def get_file(db: AsyncSession, file_id: int, user_id: Optional[int] = None) -> Optional[FileModel]:
    """Ищет запись по id; с user_id - только среди записей владельца"""
    stmt = select(FileModel).where(FileModel.id == file_id)
    if user_id is not None:
        stmt = stmt.where(FileModel.user_id == user_id)
    result = await db.execute(stmt)
    return result.scalars().first()

async def get_files_of_parent(db: AsyncSession, parent_id: int, skip: int, limit: int) -> List[FileModel]:
    result = await db.execute(
        select(FileModel)
        .where(FileModel.parent_id == parent_id)
        .order_by(FileModel.id)
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all())

def parse_id(value) -> Optional[int]:
    """Целочисленный id записи или None, если значение им быть не может"""
    if isinstance(value, bool):
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return None
    return parsed if 0 < parsed <= MAX_ID else None
