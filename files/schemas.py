from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FileCreate(BaseModel):
    """Тело запроса на создание файла или папки"""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    type: Optional[str] = None
    parent_id: Union[int, str] = Field(0, alias="parentId")
    is_public: bool = Field(False, alias="isPublic")
    data: Optional[str] = None  # base64, только для file/image
