from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
from pathlib import Path
import logging
from redis.asyncio import Redis
from fastapi_cache import FastAPICache
from fastapi_cache.backends.redis import RedisBackend
from fastapi_cache.decorator import cache
from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from config.database import engine, Base, get_db
from config.redis import redis_client, get_redis
from errors import ServiceError, request_validation_handler, service_error_handler
from models import User, FileModel
from auth.router import router as auth_router
from files.router import router as files_router

# Настройка логгера
logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Обработчик событий жизненного цикла приложения"""
    # Startup логика
    try:
        # Создаем папку для файлов
        storage_path = Path(settings.FOLDER_PATH)
        storage_path.mkdir(exist_ok=True, parents=True)
        logger.info(f"Storage directory ready at: {storage_path.absolute()}")

        # Инициализация БД
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")

        try:
            if await redis_client.ping():
                logger.info("Successfully connected to Redis server")
                FastAPICache.init(RedisBackend(redis_client), prefix="fastapi-cache")
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {str(e)}")
            raise

    except Exception as e:
        logger.error(f"Startup error: {str(e)}")
        raise

    yield  # Приложение работает

    # Shutdown логика
    await redis_client.aclose()
    await engine.dispose()

app = FastAPI(
    title="Files Manager API",
    version="1.0.0",
    lifespan=lifespan
)
app.add_exception_handler(ServiceError, service_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

# Подключение роутеров
app.include_router(auth_router)
app.include_router(files_router)

@app.get("/status", tags=["app"])
async def get_status(
    redis: Redis = Depends(get_redis),
    db: AsyncSession = Depends(get_db)
):
    """Доступность Redis и базы данных"""
    try:
        redis_alive = bool(await redis.ping())
    except Exception as e:
        logger.error(f"Redis is unreachable: {str(e)}")
        redis_alive = False

    try:
        await db.execute(text("SELECT 1"))
        db_alive = True
    except Exception as e:
        logger.error(f"Database is unreachable: {str(e)}")
        db_alive = False

    return {"redis": redis_alive, "db": db_alive}

def stats_key_builder(func, namespace: str = "", *, request=None, response=None, args=(), kwargs=None) -> str:
    # Сессия БД в kwargs меняется на каждый запрос, в ключ её не берём
    return f"{namespace}:{func.__module__}:{func.__name__}"

@app.get("/stats", tags=["app"])
@cache(expire=settings.STATS_CACHE_SECONDS, namespace="stats", key_builder=stats_key_builder)
async def get_stats(db: AsyncSession = Depends(get_db)):
    """Количество пользователей и файлов"""
    users = await db.scalar(select(func.count()).select_from(User))
    files = await db.scalar(select(func.count()).select_from(FileModel))
    return {"users": users, "files": files}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL
    )
