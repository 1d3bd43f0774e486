from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from config.database import get_db
from errors import InternalError, Unauthenticated, ValidationError
from jobs.dependencies import get_user_queue
from jobs.queue import JobQueue
from models.user import User, get_user
from .dependencies import get_current_user, get_session_manager, token_header
from .sessions import SessionManager
from .utils import get_password_hash

router = APIRouter(tags=["auth"])
logger = logging.getLogger(__name__)

basic_auth = HTTPBasic(auto_error=False)

# Модели запросов
class UserCreate(BaseModel):
    """Модель для регистрации пользователя"""
    email: Optional[str] = None
    password: Optional[str] = None

# Эндпоинты
@router.post("/users", status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
    user_queue: JobQueue = Depends(get_user_queue)
):
    """Регистрация нового пользователя"""
    if not user_data.email:
        raise ValidationError("Missing email")
    if not user_data.password:
        raise ValidationError("Missing password")

    # Проверяем, существует ли пользователь
    if await get_user(db, user_data.email):
        raise ValidationError("Already exist")

    new_user = User(
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password)
    )
    try:
        db.add(new_user)
        await db.commit()
        await db.refresh(new_user)
    except IntegrityError:
        # Тот же email успел зарегистрировать параллельный запрос
        await db.rollback()
        raise ValidationError("Already exist")
    except Exception as e:
        await db.rollback()
        logger.error(f"User creation failed: {str(e)}", exc_info=True)
        raise InternalError("Error creating user")

    try:
        await user_queue.enqueue({"userId": str(new_user.id)})
    except Exception as e:
        logger.error(f"Failed to queue welcome job for user {new_user.id}: {str(e)}", exc_info=True)
    return new_user.to_dict()

@router.get("/users/me")
async def get_me(user: User = Depends(get_current_user)):
    return user.to_dict()

@router.get("/connect")
async def connect(
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_auth),
    sessions: SessionManager = Depends(get_session_manager),
    db: AsyncSession = Depends(get_db)
):
    """Аутентификация и получение токена"""
    if credentials is None:
        raise Unauthenticated()
    token = await sessions.login(db, credentials.username, credentials.password)
    return {"token": token}

@router.get("/disconnect", status_code=status.HTTP_204_NO_CONTENT)
async def disconnect(
    token: Optional[str] = Depends(token_header),
    sessions: SessionManager = Depends(get_session_manager)
):
    if await sessions.resolve(token) is None:
        raise Unauthenticated()
    await sessions.logout(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
