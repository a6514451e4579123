"""
Public file serving

Serves live uploads under /files/<stored_name>. Only names with a live
metadata record are served; everything else is a 404.
"""

from flask import Blueprint, current_app, jsonify, send_file

from watermark_backend.application.upload_service import UploadService
from watermark_backend.domain.errors import DomainError, create_error_response

files_bp = Blueprint("files", __name__, url_prefix="/files")


@files_bp.route("/<path:stored_name>", methods=["GET"])
def serve_file(stored_name: str):
    upload_service = current_app.container.resolve(UploadService)

    try:
        file = upload_service.resolve_public_file(stored_name)
    except DomainError as e:
        body, status = create_error_response(e.category, e.message)
        return jsonify(body), status

    return send_file(
        file.storage_path,
        mimetype=file.mime_type,
        download_name=file.original_name,
        max_age=0,
    )
