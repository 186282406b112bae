"""
Celery tasks package.

- notification_tasks: e-mail a candidate when their application changes status,
  and either side of a conversation when they receive a message
"""

from app.tasks import notification_tasks

__all__ = ["notification_tasks"]
