from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Основные настройки приложения
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "info"
    FOLDER_PATH: str = "/tmp/files_manager"

    # Сессии
    SESSION_TTL_SECONDS: int = 24 * 3600

    # Настройки PostgreSQL
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_HOST: str = "localhost"
    DB_PORT: str = "5432"
    DB_DATABASE: str = "files_manager"
    DB_URL: Optional[str] = None

    # Настройки Redis
    REDIS_URL: str = "redis://localhost:6379/0"

    # Листинг
    PAGE_SIZE: int = 20

    # Фоновые задачи (Celery)
    CELERY_BROKER_URL: Optional[str] = None
    THUMBNAIL_WIDTHS: List[int] = [500, 250, 100]
    THUMBNAIL_QUEUE: str = "fileQueue"
    USER_QUEUE: str = "userQueue"
    WORKER_CONCURRENCY: int = 2
    STATS_CACHE_SECONDS: int = 10

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def DATABASE_URL(self) -> str:
        if self.DB_URL:
            return self.DB_URL
        return f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_DATABASE}"

    @property
    def BROKER_URL(self) -> str:
        return self.CELERY_BROKER_URL or self.REDIS_URL

settings = Settings()
