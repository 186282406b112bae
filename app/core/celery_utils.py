"""
Celery utility functions for reliable task queueing from request handlers.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Tuple
from celery import Task
from kombu import Connection
from app.core.config import settings

logger = logging.getLogger(__name__)

# Thread pool for queueing tasks from request handlers
# Keeps uvicorn's event loop away from Celery's connection pool
_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="celery_queue")


def _queue_task_sync(task: Task, args: tuple, kwargs: dict) -> Tuple[bool, str, str]:
    """
    Queue a task on a fresh Kombu connection.

    Returns:
        Tuple[bool, str, str]: (success, task_id, error_message)
    """
    try:
        # Fresh Kombu connection; the celery_app cached connection can go stale
        with Connection(settings.REDIS_URL) as conn:
            # Send task using the fresh connection
            result = task.apply_async(
                args=args,
                kwargs=kwargs,
                connection=conn,
                retry=True,
                retry_policy={
                    'max_retries': 3,
                    'interval_start': 0,
                    'interval_step': 0.2,
                    'interval_max': 0.2,
                }
            )
            return (True, result.id, "")
    except Exception as e:
        return (False, "", str(e))


def queue_task_safely(task: Task, *args, **kwargs) -> bool:
    """
    Queue a Celery task without letting broker trouble reach the caller.

    Args:
        task: The Celery task to queue
        *args: Positional arguments for the task
        **kwargs: Keyword arguments for the task

    Returns:
        bool: True if task was queued successfully, False otherwise

    Example:
        from app.tasks.notification_tasks import send_status_change_notification_task
        queued = queue_task_safely(
            send_status_change_notification_task,
            application_id='4f1c...',
            user_id='cand-1',
            title='Backend developer',
            company='Acme',
            new_status='INTERVIEW'
        )
    """
    # Queue task in a separate thread so the caller's event loop is never blocked
    # on broker connection handling
    future = _executor.submit(_queue_task_sync, task, args, kwargs)
    success, task_id, error = future.result(timeout=5)

    if success:
        logger.info(f"Task {task.name} queued successfully: {task_id}")
        return True
    else:
        logger.error(f"Failed to queue task {task.name}: {error}")
        return False
