"""
Unit tests for the HTTP surface.

Builds the app through the factory, then swaps the Redis-backed services
for in-memory ones through container overrides. Validates request
handling, response formatting and status codes.
"""

import io
from unittest.mock import Mock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

import app_factory
from app_factory import AppConfig, create_app
from tests.fixtures.mock_repositories import MockFileRepository
from watermark_backend.application.upload_service import UploadService
from watermark_backend.application.watermark_service import WatermarkService
from watermark_backend.config.upload_config import UploadConfig
from watermark_backend.config.watermark_config import WatermarkApiConfig
from watermark_backend.domain.errors import RemoteApiError, RetryExhaustedError
from watermark_backend.domain.file_storage import FileManager
from watermark_backend.infrastructure.local_file_storage_repository import LocalFileStorageRepository
from watermark_backend.infrastructure.redis_file_repository import RedisFileRepository
from watermark_backend.infrastructure.redis_repository import RedisRepository


@pytest.fixture
def upload_config(tmp_path):
    return UploadConfig(storage_mode="local", upload_dir=str(tmp_path / "uploads"))


@pytest.fixture
def file_manager(upload_config):
    return FileManager(MockFileRepository(), LocalFileStorageRepository(upload_config.upload_dir))


@pytest.fixture
def mock_watermark_service():
    service = Mock()
    service.create_watermark_task.return_value = {"code": 0, "data": {"task_id": "t-1"}}
    service.query_task_status.return_value = {"code": 0, "data": {"status": "finished"}}
    service.create_extract_watermark_task.return_value = {"code": 0, "data": {"task_id": "t-2"}}
    service.health_check.return_value = {
        "status": "healthy",
        "base_url": "https://watermark.test",
        "accessible": True,
    }
    return service


@pytest.fixture
def flask_app(upload_config, file_manager, mock_watermark_service, watermark_config):
    app = create_app(AppConfig(upload=upload_config, watermark=watermark_config))
    app.config["TESTING"] = True

    app.container.override(FileManager, file_manager)
    app.container.override(UploadService, UploadService(file_manager, upload_config))
    app.container.override(WatermarkService, mock_watermark_service)
    return app


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()


def upload(client, data=b"hello", filename="notes.txt", mimetype="text/plain"):
    return client.post(
        "/api/upload/public",
        data={"file": (io.BytesIO(data), filename, mimetype)},
        content_type="multipart/form-data",
    )


class TestUploadEndpoint:
    def test_upload_success(self, client):
        response = upload(client)

        assert response.status_code == 200
        body = response.get_json()
        assert body["success"] is True
        assert body["fileName"] == "notes.txt"
        assert body["fileSize"] == 5
        assert body["mimetype"] == "text/plain"
        assert body["fileUrl"].startswith("http://localhost/files/")

    def test_no_file_part(self, client):
        response = client.post(
            "/api/upload/public", data={"other": "x"}, content_type="multipart/form-data"
        )

        assert response.status_code == 400
        assert response.get_json() == {
            "success": False,
            "error": "No file uploaded",
            "category": "no_file",
        }

    def test_unsupported_type(self, client, upload_config):
        response = upload(client, filename="a.zip", mimetype="application/zip")

        assert response.status_code == 400
        body = response.get_json()
        assert body["category"] == "unsupported_type"
        assert "application/zip" in body["error"]

    def test_file_over_limit(self, flask_app, client, upload_config):
        small = FileManager(
            MockFileRepository(), LocalFileStorageRepository(upload_config.upload_dir), max_upload_bytes=4
        )
        flask_app.container.override(UploadService, UploadService(small, upload_config))

        response = upload(client, data=b"12345")

        assert response.status_code == 400
        assert response.get_json()["category"] == "file_too_large"

    def test_request_over_content_length(self, flask_app, client):
        flask_app.config["MAX_CONTENT_LENGTH"] = 64

        response = upload(client, data=b"x" * 1024)

        assert response.status_code == 400
        assert response.get_json() == {
            "success": False,
            "error": "File size exceeds the limit (50MB)",
            "category": "file_too_large",
        }

    def test_public_base_url(self, flask_app, client, file_manager, tmp_path):
        config = UploadConfig(
            storage_mode="local",
            upload_dir=str(tmp_path / "uploads"),
            public_base_url="https://files.example.com",
        )
        flask_app.container.override(UploadService, UploadService(file_manager, config))

        body = upload(client).get_json()

        assert body["fileUrl"].startswith("https://files.example.com/files/")


class TestInfoAndDeleteEndpoints:
    def test_info_after_upload(self, client):
        uploaded = upload(client).get_json()

        response = client.get(f"/api/upload/info/{uploaded['fileId']}")

        assert response.status_code == 200
        body = response.get_json()
        assert body["fileId"] == uploaded["fileId"]
        assert body["publicUrl"] == uploaded["fileUrl"]
        assert body["size"] == 5
        assert body["exists"] is True

    def test_info_unknown(self, client):
        response = client.get("/api/upload/info/1700000000000_" + "0" * 32)

        assert response.status_code == 404
        assert response.get_json()["category"] == "file_not_found"

    def test_delete_then_info(self, client):
        uploaded = upload(client).get_json()

        response = client.delete(f"/api/upload/{uploaded['fileId']}")
        assert response.status_code == 200
        assert response.get_json() == {"success": True, "message": "File deleted successfully"}

        assert client.get(f"/api/upload/info/{uploaded['fileId']}").status_code == 404
        assert client.delete(f"/api/upload/{uploaded['fileId']}").status_code == 404


class TestMetadataStoreOutage:
    FILE_ID = "1700000000000_" + "0" * 32

    @pytest.fixture
    def client(self, flask_app, upload_config):
        redis_client = Mock()
        redis_client.get.side_effect = RedisConnectionError("Connection refused")
        redis_client.zrangebyscore.side_effect = RedisConnectionError("Connection refused")
        manager = FileManager(
            RedisFileRepository(RedisRepository(redis_client)),
            LocalFileStorageRepository(upload_config.upload_dir),
        )
        flask_app.container.override(UploadService, UploadService(manager, upload_config))
        return flask_app.test_client()

    def test_info_is_storage_error(self, client):
        response = client.get(f"/api/upload/info/{self.FILE_ID}")

        assert response.status_code == 500
        assert response.get_json()["category"] == "storage_error"

    def test_delete_is_storage_error(self, client):
        response = client.delete(f"/api/upload/{self.FILE_ID}")

        assert response.status_code == 500
        assert response.get_json()["category"] == "storage_error"

    def test_files_is_storage_error(self, client):
        response = client.get(f"/files/{self.FILE_ID}.pdf")

        assert response.status_code == 500
        assert response.get_json()["category"] == "storage_error"


class TestFilesEndpoint:
    def test_serves_uploaded_bytes(self, client):
        uploaded = upload(client, data=b"%PDF-1.4", filename="r.pdf", mimetype="application/pdf").get_json()
        path = uploaded["fileUrl"].replace("http://localhost", "")

        response = client.get(path)

        assert response.status_code == 200
        assert response.data == b"%PDF-1.4"
        assert response.mimetype == "application/pdf"
        response.close()

    def test_unknown_file(self, client):
        response = client.get("/files/1700000000000_" + "0" * 32 + ".pdf")

        assert response.status_code == 404
        assert response.get_json()["success"] is False

    def test_traversal_rejected(self, client):
        assert client.get("/files/..%2F..%2Fetc%2Fpasswd").status_code == 404

    def test_deleted_file_not_served(self, client):
        uploaded = upload(client).get_json()
        client.delete(f"/api/upload/{uploaded['fileId']}")

        assert client.get(uploaded["fileUrl"].replace("http://localhost", "")).status_code == 404


class TestWatermarkEndpoints:
    def test_create_task(self, client, mock_watermark_service):
        response = client.post(
            "/api/watermark/tasks",
            json={"file_url": "https://h/files/a.pdf", "content": "CONFIDENTIAL", "biz_id": "b-1"},
        )

        assert response.status_code == 200
        assert response.get_json() == {"success": True, "data": {"code": 0, "data": {"task_id": "t-1"}}}
        mock_watermark_service.create_watermark_task.assert_called_once_with(
            "https://h/files/a.pdf", "CONFIDENTIAL", "b-1", 1
        )

    def test_create_task_with_type(self, client, mock_watermark_service):
        client.post(
            "/api/watermark/tasks",
            json={"file_url": "u", "content": "c", "biz_id": "b", "type": 2},
        )

        assert mock_watermark_service.create_watermark_task.call_args.args[3] == 2

    @pytest.mark.parametrize("payload", [None, [], {"file_url": "u", "content": "c", "biz_id": "b", "type": True}])
    def test_invalid_body(self, client, payload):
        response = client.post("/api/watermark/tasks", json=payload)

        assert response.status_code == 400
        assert response.get_json()["category"] == "invalid_request"

    def test_remote_failure_is_bad_gateway(self, client, mock_watermark_service):
        mock_watermark_service.query_task_status.side_effect = RetryExhaustedError(
            3, RemoteApiError("503 Service Unavailable", status_code=503)
        )

        response = client.get("/api/watermark/tasks/t-1")

        assert response.status_code == 502
        body = response.get_json()
        assert body["category"] == "remote_error"
        assert "3 attempts" in body["error"]

    def test_query_task(self, client, mock_watermark_service):
        response = client.get("/api/watermark/tasks/t-1")

        assert response.status_code == 200
        mock_watermark_service.query_task_status.assert_called_once_with("t-1")

    def test_extract_task(self, client, mock_watermark_service):
        response = client.post("/api/watermark/extract-tasks", json={"file_url": "u", "biz_id": "b"})

        assert response.status_code == 200
        mock_watermark_service.create_extract_watermark_task.assert_called_once_with("u", "b")

    def test_health(self, client):
        response = client.get("/api/watermark/health")

        assert response.status_code == 200
        assert response.get_json()["data"]["status"] == "healthy"

    def test_not_configured(self, upload_config):
        config = AppConfig(
            upload=upload_config,
            watermark=WatermarkApiConfig(base_url="https://watermark.test", access_key="", secret_key=""),
        )
        app = create_app(config)

        response = app.test_client().get("/api/watermark/tasks/t-1")

        assert response.status_code == 503
        assert response.get_json()["success"] is False


class TestHealthEndpoint:
    def test_healthy(self, client, monkeypatch):
        monkeypatch.setattr(app_factory, "redis_health_check", lambda: True)

        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.get_json()
        assert body["success"] is True
        assert body["status"] == "ok"
        assert body["service"] == "watermark-upload-backend"
        assert body["version"] == "1.0.0"
        assert body["redis"] == "connected"
        assert body["timestamp"].endswith("Z")

    def test_degraded_without_redis(self, client, monkeypatch):
        monkeypatch.setattr(app_factory, "redis_health_check", lambda: False)

        response = client.get("/api/health")

        assert response.status_code == 503
        assert response.get_json()["status"] == "degraded"

    def test_swagger_docs(self, client):
        assert client.get("/api/docs").status_code == 200
