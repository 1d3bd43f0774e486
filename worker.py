import asyncio
import logging
from typing import Any, Callable, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from config.settings import settings
from files.storage import get_storage
from jobs.queue import THUMBNAIL_TASK, WELCOME_TASK, celery_app
from jobs.thumbnails import ThumbnailProcessor
from jobs.welcome import WelcomeProcessor

logger = logging.getLogger(__name__)

def run_job(make_processor: Callable, payload: Dict[str, Any]) -> Any:
    """Выполняет асинхронный обработчик внутри синхронной задачи Celery"""
    async def _run():
        # У каждой задачи свой цикл событий, поэтому соединения не переиспользуются
        engine = create_async_engine(settings.DATABASE_URL, poolclass=NullPool)
        try:
            session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
            return await make_processor(session_factory)(payload)
        finally:
            await engine.dispose()

    return asyncio.run(_run())

@celery_app.task(name=THUMBNAIL_TASK)
def generate_thumbnails(payload: Dict[str, Any]) -> List[int]:
    results = run_job(lambda session_factory: ThumbnailProcessor(session_factory, get_storage()), payload)
    return [result.width for result in results if result.ok]

@celery_app.task(name=WELCOME_TASK)
def send_welcome(payload: Dict[str, Any]) -> bool:
    return run_job(WelcomeProcessor, payload)

if __name__ == "__main__":
    celery_app.worker_main([
        "worker",
        f"--queues={settings.THUMBNAIL_QUEUE},{settings.USER_QUEUE}",
        f"--concurrency={settings.WORKER_CONCURRENCY}",
        f"--loglevel={settings.LOG_LEVEL.upper()}",
    ])
