"""
Cleanup Task

Celery beat task for the periodic upload expiry sweep.
Thin wrapper that delegates to FileManager.
"""

import logging

from celery import shared_task

from watermark_backend.config.celery_config import CLEANUP_TASK_NAME

logger = logging.getLogger(__name__)


def _empty_stats():
    return {
        "expired_files_cleaned": 0,
        "orphaned_files_cleaned": 0,
        "errors": [],
    }


@shared_task(name=CLEANUP_TASK_NAME)
def cleanup_expired_uploads():
    """
    Remove expired uploads and orphaned files.

    Runs every 5 minutes from the beat schedule. Expiry records live in
    Redis, so uploads made before a restart are still swept. Each phase is
    isolated; a failure in one is recorded and the other still runs.

    Returns:
        dict: Cleanup statistics with counts and errors
    """
    logger.info("Starting upload cleanup")

    cleanup_stats = _empty_stats()

    try:
        # Services come from the container; never instantiate them here
        from celery_app import flask_app
        from watermark_backend.config.upload_config import UploadConfig
        from watermark_backend.domain.file_storage import FileManager

        container = flask_app.container
        file_manager = container.resolve(FileManager)
        upload_config = container.resolve(UploadConfig)
    except Exception as e:
        error_msg = f"Cleanup task failed: {e}"
        logger.error(error_msg, exc_info=True)
        stats = _empty_stats()
        stats["errors"].append(error_msg)
        return stats

    try:
        cleanup_stats["expired_files_cleaned"] = file_manager.cleanup_expired_files()
    except Exception as e:
        error_msg = f"Error cleaning up expired files: {e}"
        cleanup_stats["errors"].append(error_msg)
        logger.error(error_msg, exc_info=True)

    try:
        cleanup_stats["orphaned_files_cleaned"] = file_manager.cleanup_orphaned_files(
            upload_config.orphan_max_age
        )
    except Exception as e:
        error_msg = f"Error cleaning up orphaned files: {e}"
        cleanup_stats["errors"].append(error_msg)
        logger.error(error_msg, exc_info=True)

    logger.info(
        f"Cleanup completed - Expired: {cleanup_stats['expired_files_cleaned']}, "
        f"Orphaned: {cleanup_stats['orphaned_files_cleaned']}, "
        f"Errors: {len(cleanup_stats['errors'])}"
    )

    return cleanup_stats
