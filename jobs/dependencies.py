from config.settings import settings
from .queue import THUMBNAIL_TASK, WELCOME_TASK, JobQueue, celery_app

def get_thumbnail_queue() -> JobQueue:
    return JobQueue(celery_app, settings.THUMBNAIL_QUEUE, THUMBNAIL_TASK)

def get_user_queue() -> JobQueue:
    return JobQueue(celery_app, settings.USER_QUEUE, WELCOME_TASK)
