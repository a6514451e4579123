"""
Celery Tasks

Background tasks for the upload gateway.
"""

from .cleanup_task import cleanup_expired_uploads

__all__ = ["cleanup_expired_uploads"]
