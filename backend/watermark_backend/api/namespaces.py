"""
API Namespaces - Organized endpoint groups
"""

from flask import current_app, request
from flask_restx import Namespace, Resource
from werkzeug.exceptions import RequestEntityTooLarge

from watermark_backend.api.models import (
    error_response,
    extract_task_request,
    file_info_response,
    message_response,
    upload_response,
    watermark_response,
    watermark_task_request,
)
from watermark_backend.application.upload_service import UploadService
from watermark_backend.application.watermark_service import WatermarkService
from watermark_backend.config.upload_config import UploadConfig
from watermark_backend.domain.errors import (
    DomainError,
    ErrorCategory,
    FileTooLargeError,
    InvalidRequestError,
    StorageError,
    create_error_response,
)
from watermark_backend.infrastructure.watermark_api_client import VISIBLE_WATERMARK


def domain_error_response(error: DomainError):
    """Map a domain error to its ``{success: false, ...}`` body and status."""
    if isinstance(error, StorageError):
        current_app.logger.error(f"Storage failure: {error.message}")
    else:
        current_app.logger.warning(f"{error.category.value}: {error.message}")
    return create_error_response(error.category, error.message)


def unexpected_error_response(where: str, error: Exception):
    current_app.logger.exception(f"Unexpected error in {where}: {error}")
    return create_error_response(ErrorCategory.SYSTEM_ERROR, f"Internal server error: {error}")


def too_large_response():
    # MAX_CONTENT_LENGTH includes multipart framing; report the file ceiling
    limit = current_app.container.resolve(UploadConfig).max_upload_bytes
    return domain_error_response(FileTooLargeError(limit))


def request_base_url() -> str:
    return request.host_url.rstrip("/")


# =============================================================================
# Upload Namespace - Temporary public file hosting
# =============================================================================

upload_ns = Namespace("upload", description="File upload operations")


@upload_ns.route("/public")
class PublicUpload(Resource):
    """Upload a file and get a public URL"""

    @upload_ns.doc("upload_public_file")
    @upload_ns.response(200, "Success", upload_response)
    @upload_ns.response(400, "Bad Request", error_response)
    @upload_ns.response(500, "Storage Failure", error_response)
    def post(self):
        """
        Upload a file

        Accepts a multipart form with a single ``file`` part. The file is
        published under /files/ until it expires.
        """
        try:
            upload = request.files.get("file")
            upload_service = current_app.container.resolve(UploadService)

            if upload is None:
                result = upload_service.upload(None, None, None, request_base_url())
            else:
                result = upload_service.upload(
                    upload.stream,
                    upload.filename,
                    upload.mimetype,
                    request_base_url(),
                    content_length=upload.content_length or None,
                )
            return result, 200

        except RequestEntityTooLarge:
            return too_large_response()
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            return unexpected_error_response("/upload/public", e)


@upload_ns.route("/info/<string:file_id>")
@upload_ns.param("file_id", "The file identifier returned by the upload")
class FileInfo(Resource):
    """Uploaded file metadata"""

    @upload_ns.doc("get_file_info")
    @upload_ns.response(200, "Success", file_info_response)
    @upload_ns.response(404, "File Not Found", error_response)
    @upload_ns.response(500, "Storage Failure", error_response)
    def get(self, file_id):
        """Get metadata of a live upload"""
        try:
            upload_service = current_app.container.resolve(UploadService)
            return upload_service.get_file_info(file_id, request_base_url()), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            return unexpected_error_response("/upload/info", e)


@upload_ns.route("/<string:file_id>")
@upload_ns.param("file_id", "The file identifier returned by the upload")
class UploadedFile(Resource):
    """Uploaded file removal"""

    @upload_ns.doc("delete_file")
    @upload_ns.response(200, "Deleted", message_response)
    @upload_ns.response(404, "File Not Found", error_response)
    @upload_ns.response(500, "Storage Failure", error_response)
    def delete(self, file_id):
        """Delete an upload before it expires"""
        try:
            upload_service = current_app.container.resolve(UploadService)
            return upload_service.delete_file(file_id), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            return unexpected_error_response("/upload/<file_id>", e)


# =============================================================================
# Watermark Namespace - Signed proxy to the watermark task service
# =============================================================================

watermark_ns = Namespace("watermark", description="Watermark task operations")


def _watermark_service():
    """Resolve the service, or None when no credentials are configured."""
    if not current_app.container.is_registered(WatermarkService):
        return None
    return current_app.container.resolve(WatermarkService)


def _not_configured_response():
    return create_error_response(
        ErrorCategory.SYSTEM_ERROR,
        "Watermark service is not configured",
        status_code=503,
    )


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRequestError("Request body must be a JSON object")
    return data


def _watermark_type(data: dict) -> int:
    value = data.get("type", VISIBLE_WATERMARK)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequestError(f"Invalid watermark type: {value}")
    return value


@watermark_ns.route("/tasks")
class WatermarkTasks(Resource):
    """Add-watermark tasks"""

    @watermark_ns.doc("create_watermark_task")
    @watermark_ns.expect(watermark_task_request)
    @watermark_ns.response(200, "Task created", watermark_response)
    @watermark_ns.response(400, "Bad Request", error_response)
    @watermark_ns.response(502, "Watermark Service Failure", error_response)
    @watermark_ns.response(503, "Not Configured", error_response)
    def post(self):
        """
        Create an add-watermark task

        Signs the request and retries transient failures with exponential
        backoff.
        """
        service = _watermark_service()
        if service is None:
            return _not_configured_response()

        try:
            data = _json_body()
            result = service.create_watermark_task(
                data.get("file_url"),
                data.get("content"),
                data.get("biz_id"),
                _watermark_type(data),
            )
            return {"success": True, "data": result}, 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            return unexpected_error_response("/watermark/tasks", e)


@watermark_ns.route("/tasks/<string:task_id>")
@watermark_ns.param("task_id", "Task identifier issued by the watermark service")
class WatermarkTask(Resource):
    """Task status"""

    @watermark_ns.doc("get_watermark_task")
    @watermark_ns.response(200, "Success", watermark_response)
    @watermark_ns.response(502, "Watermark Service Failure", error_response)
    def get(self, task_id):
        """Query the status of a watermark task"""
        service = _watermark_service()
        if service is None:
            return _not_configured_response()

        try:
            return {"success": True, "data": service.query_task_status(task_id)}, 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            return unexpected_error_response("/watermark/tasks/<task_id>", e)


@watermark_ns.route("/extract-tasks")
class ExtractTasks(Resource):
    """Extract-watermark tasks"""

    @watermark_ns.doc("create_extract_task")
    @watermark_ns.expect(extract_task_request)
    @watermark_ns.response(200, "Task created", watermark_response)
    @watermark_ns.response(400, "Bad Request", error_response)
    @watermark_ns.response(502, "Watermark Service Failure", error_response)
    def post(self):
        """Create a task that reads the watermark back out of a file"""
        service = _watermark_service()
        if service is None:
            return _not_configured_response()

        try:
            data = _json_body()
            result = service.create_extract_watermark_task(data.get("file_url"), data.get("biz_id"))
            return {"success": True, "data": result}, 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            return unexpected_error_response("/watermark/extract-tasks", e)


@watermark_ns.route("/health")
class WatermarkHealth(Resource):
    """Watermark service reachability"""

    @watermark_ns.doc("watermark_health")
    @watermark_ns.response(200, "Success", watermark_response)
    def get(self):
        """Probe the watermark service base URL"""
        service = _watermark_service()
        if service is None:
            return _not_configured_response()
        return {"success": True, "data": service.health_check()}, 200
