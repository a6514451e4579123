"""
Application Factory

Creates and configures the Flask application with all dependencies.
The factory pattern keeps the app testable: configuration objects and
container overrides can be supplied per instance.
"""

import logging
import os
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from watermark_backend.application.dependency_container import DependencyContainer
from watermark_backend.application.upload_service import UploadService, to_iso
from watermark_backend.application.watermark_service import WatermarkService
from watermark_backend.config.celery_config import make_celery
from watermark_backend.config.logging_config import setup_logging
from watermark_backend.config.redis_config import (
    get_redis_repository,
    init_redis,
    redis_health_check,
)
from watermark_backend.config.upload_config import UploadConfig
from watermark_backend.config.watermark_config import WatermarkApiConfig
from watermark_backend.domain.file_storage import FileManager, FileRepository, IFileStorageRepository
from watermark_backend.infrastructure.redis_file_repository import RedisFileRepository
from watermark_backend.infrastructure.redis_repository import RedisRepository
from watermark_backend.infrastructure.storage_factory import StorageFactory
from watermark_backend.infrastructure.watermark_api_client import WatermarkApiClient

logger = logging.getLogger(__name__)

SERVICE_NAME = "watermark-upload-backend"
SERVICE_VERSION = "1.0.0"

# Multipart framing around the file part; the file itself is capped while streaming
MULTIPART_OVERHEAD_BYTES = 1024 * 1024


class AppConfig:
    """Application configuration."""

    def __init__(
        self,
        upload: Optional[UploadConfig] = None,
        watermark: Optional[WatermarkApiConfig] = None,
    ):
        self.flask_env = os.getenv("FLASK_ENV", "development")
        self.is_production = self.flask_env == "production"
        self.cors_origins = os.getenv("CORS_ORIGINS", "*")
        self.upload = upload or UploadConfig()
        self.watermark = watermark or WatermarkApiConfig.from_env()


def create_app(config: Optional[AppConfig] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Application configuration, uses default if None

    Returns:
        Configured Flask application
    """
    setup_logging()

    if config is None:
        config = AppConfig()

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.upload.max_upload_bytes + MULTIPART_OVERHEAD_BYTES

    CORS(
        app,
        resources={
            r"/*": {
                "origins": config.cors_origins,
                "methods": ["GET", "POST", "DELETE", "OPTIONS"],
                "allow_headers": ["Content-Type", "Authorization"],
                "supports_credentials": True,
                "max_age": 3600,
            }
        },
    )

    _initialize_infrastructure(app)
    _initialize_services(app, config)
    _register_blueprints(app)
    _register_health_endpoint(app)

    return app


def _initialize_infrastructure(app: Flask) -> None:
    """
    Initialize Redis and Celery.

    Neither connects eagerly; an unreachable Redis shows up in /api/health
    rather than failing startup.
    """
    init_redis()
    logger.info("Redis initialized")

    try:
        app.celery = make_celery(app)
        logger.info("Celery initialized")
    except Exception as e:
        logger.warning(f"Could not initialize Celery: {e}")
        app.celery = None


def _initialize_services(app: Flask, config: AppConfig) -> None:
    """
    Build the services and register them in the DependencyContainer.

    Resources and tasks resolve everything through ``app.container``.
    WatermarkService is only registered when credentials are configured;
    its endpoints answer 503 otherwise.
    """
    container = DependencyContainer()

    container.register_singleton(UploadConfig, config.upload)
    container.register_singleton(WatermarkApiConfig, config.watermark)

    # Infrastructure
    redis_repo = get_redis_repository()
    file_repository = RedisFileRepository(redis_repo)
    storage_repository = StorageFactory.create_storage(config.upload)

    container.register_singleton(RedisRepository, redis_repo)
    container.register_singleton(FileRepository, file_repository)
    container.register_singleton(IFileStorageRepository, storage_repository)

    # Domain
    file_manager = FileManager(
        file_repository,
        storage_repository,
        retention=config.upload.retention,
        max_upload_bytes=config.upload.max_upload_bytes,
    )
    container.register_singleton(FileManager, file_manager)

    # Application
    container.register_singleton(UploadService, UploadService(file_manager, config.upload))

    if config.watermark.is_configured:
        client = WatermarkApiClient(config.watermark)
        container.register_singleton(WatermarkApiClient, client)
        container.register_singleton(WatermarkService, WatermarkService(client))
        logger.info(f"Watermark service configured at {config.watermark.base_url}")
    else:
        logger.warning(
            "WATERMARK_ACCESS_KEY / WATERMARK_SECRET_KEY not set; watermark endpoints disabled"
        )

    app.container = container
    logger.info(f"Registered {container.registered_count()} services")


def _register_blueprints(app: Flask) -> None:
    from watermark_backend.api import api_bp
    from watermark_backend.api.files import files_bp

    app.register_blueprint(api_bp)
    app.register_blueprint(files_bp)

    logger.info("API registered at /api with Swagger UI at /api/docs")


def _get_health_status() -> tuple[dict, int]:
    """
    Get health status of the service and Redis.

    Returns:
        Tuple of (health_status_dict, http_status_code)
    """
    health_status = {
        "success": True,
        "status": "ok",
        "timestamp": to_iso(datetime.now(timezone.utc)),
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "redis": "unknown",
    }

    try:
        if redis_health_check():
            health_status["redis"] = "connected"
        else:
            health_status["redis"] = "disconnected"
            health_status["status"] = "degraded"
    except Exception as e:
        health_status["redis"] = f"error: {e}"
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


def _register_health_endpoint(app: Flask) -> None:
    @app.route("/api/health", methods=["GET"])
    def health():
        """Overall health of the service and its dependencies."""
        health_status, status_code = _get_health_status()
        return jsonify(health_status), status_code
