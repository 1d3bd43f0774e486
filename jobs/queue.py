"""
Очереди фоновых задач поверх Celery.

Брокер - Redis. Задача подтверждается только после выполнения (acks_late),
поэтому задача упавшего воркера возвращается в очередь и будет выполнена
ещё раз. Повторно выполнять задачу должно быть безопасно.
"""
import asyncio
import logging
from typing import Any, Dict

from celery import Celery

from config.settings import settings

logger = logging.getLogger(__name__)

THUMBNAIL_TASK = "files_manager.thumbnails"
WELCOME_TASK = "files_manager.welcome"

celery_app = Celery("files_manager", broker=settings.BROKER_URL)
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    task_ignore_result=True,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
    # Воркер переподключается к брокеру, а не завершается
    broker_connection_retry_on_startup=True,
    broker_connection_max_retries=None,
    task_routes={
        THUMBNAIL_TASK: {"queue": settings.THUMBNAIL_QUEUE},
        WELCOME_TASK: {"queue": settings.USER_QUEUE},
    },
)


class JobQueue:
    """Отправляет задачу ``task`` в очередь ``name``"""

    def __init__(self, app: Celery, name: str, task: str):
        self.app = app
        self.name = name
        self.task = task

    async def enqueue(self, payload: Dict[str, Any]) -> None:
        # send_task блокирует поток до ответа брокера
        await asyncio.to_thread(self.app.send_task, self.task, args=[payload], queue=self.name)
        logger.info(f"Queued {self.task} on {self.name}: {payload}")
