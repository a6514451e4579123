"""
API Models for request/response documentation
"""

from flask_restx import fields

from watermark_backend.api import api

# =============================================================================
# Request Models
# =============================================================================

watermark_task_request = api.model(
    "WatermarkTaskRequest",
    {
        "file_url": fields.String(
            required=True,
            description="Publicly reachable URL of the file to watermark",
            example="https://example.com/files/1700000000000_0123456789abcdef0123456789abcdef.pdf",
        ),
        "content": fields.String(required=True, description="Watermark text", example="CONFIDENTIAL"),
        "biz_id": fields.String(required=True, description="Caller's business identifier", example="order-42"),
        "type": fields.Integer(
            description="Watermark type: 1 visible, 2 invisible", default=1, enum=[1, 2]
        ),
    },
)

extract_task_request = api.model(
    "ExtractTaskRequest",
    {
        "file_url": fields.String(required=True, description="URL of the watermarked file"),
        "biz_id": fields.String(required=True, description="Caller's business identifier"),
    },
)

# =============================================================================
# Response Models
# =============================================================================

upload_response = api.model(
    "UploadResponse",
    {
        "success": fields.Boolean(example=True),
        "fileId": fields.String(description="Identifier used by the info and delete endpoints"),
        "fileUrl": fields.String(description="Public URL of the stored file"),
        "fileName": fields.String(description="Original client filename"),
        "fileSize": fields.Integer(description="Size in bytes"),
        "mimetype": fields.String(description="Declared media type"),
        "uploadTime": fields.String(description="Upload time (ISO timestamp)"),
        "expiresAt": fields.String(description="When the file is removed (ISO timestamp)"),
    },
)

file_info_response = api.model(
    "FileInfoResponse",
    {
        "success": fields.Boolean(example=True),
        "fileId": fields.String(),
        "filename": fields.String(description="Stored filename"),
        "publicUrl": fields.String(),
        "size": fields.Integer(description="Size in bytes"),
        "uploadTime": fields.String(),
        "expiresAt": fields.String(),
        "exists": fields.Boolean(),
    },
)

message_response = api.model(
    "MessageResponse",
    {
        "success": fields.Boolean(example=True),
        "message": fields.String(),
    },
)

watermark_response = api.model(
    "WatermarkResponse",
    {
        "success": fields.Boolean(example=True),
        "data": fields.Raw(description="Body returned by the watermark service"),
    },
)

error_response = api.model(
    "ErrorResponse",
    {
        "success": fields.Boolean(example=False),
        "error": fields.String(description="Error message"),
        "category": fields.String(description="Error category"),
    },
)
