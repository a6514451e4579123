"""
Upload and watermark REST API

Flask-RESTX API with OpenAPI/Swagger documentation, mounted under /api.
"""

from flask import Blueprint
from flask_restx import Api

api_bp = Blueprint("api", __name__, url_prefix="/api")

api = Api(
    api_bp,
    version="1.0",
    title="Watermark Upload API",
    description="Temporary public file hosting and signed access to the watermark task service",
    doc="/docs",  # Swagger UI at /api/docs
)

# Imported after api is created to avoid circular imports
from .namespaces import upload_ns, watermark_ns  # noqa: E402

api.add_namespace(upload_ns, path="/upload")
api.add_namespace(watermark_ns, path="/watermark")
