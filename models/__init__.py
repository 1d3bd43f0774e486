from config.database import Base
from .user import User, get_user, get_user_by_id
from .file import FileModel, get_file, get_files_of_parent, parse_id

__all__ = ['Base', 'User', 'FileModel', 'get_user', 'get_user_by_id', 'get_file', 'get_files_of_parent', 'parse_id']
