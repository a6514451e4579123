"""
Upload Configuration

Storage location and retention for uploaded files, selected by environment.

STORAGE_MODE=local keeps files in UPLOAD_DIR (default: ./uploads) for 24
hours. STORAGE_MODE=ephemeral keeps them in the process temp area for one
hour, for hosts that recycle temp storage anyway. Ephemeral mode is picked
automatically when VERCEL or SERVERLESS is set.
"""

import os
import tempfile
from datetime import timedelta
from typing import Optional

from watermark_backend.domain.file_storage.value_objects import MAX_UPLOAD_BYTES

LOCAL_MODE = "local"
EPHEMERAL_MODE = "ephemeral"

DEFAULT_RETENTION_HOURS = {
    LOCAL_MODE: 24,
    EPHEMERAL_MODE: 1,
}


def _detect_storage_mode() -> str:
    mode = os.getenv("STORAGE_MODE")
    if mode:
        mode = mode.strip().lower()
        if mode not in DEFAULT_RETENTION_HOURS:
            raise ValueError(f"Unknown STORAGE_MODE: {mode}")
        return mode
    if os.getenv("VERCEL") or os.getenv("SERVERLESS"):
        return EPHEMERAL_MODE
    return LOCAL_MODE


class UploadConfig:
    """Upload gateway configuration settings."""

    def __init__(
        self,
        storage_mode: Optional[str] = None,
        upload_dir: Optional[str] = None,
        retention: Optional[timedelta] = None,
        public_base_url: Optional[str] = None,
    ):
        self.storage_mode = storage_mode or _detect_storage_mode()

        if upload_dir:
            self.upload_dir = upload_dir
        elif self.storage_mode == EPHEMERAL_MODE:
            self.upload_dir = os.path.join(tempfile.gettempdir(), "watermark-uploads")
        else:
            self.upload_dir = os.getenv("UPLOAD_DIR", os.path.abspath("uploads"))

        if retention is not None:
            self.retention = retention
        else:
            hours = os.getenv("FILE_RETENTION_HOURS")
            self.retention = timedelta(
                hours=float(hours) if hours else DEFAULT_RETENTION_HOURS[self.storage_mode]
            )

        self.max_upload_bytes = int(os.getenv("MAX_UPLOAD_BYTES", MAX_UPLOAD_BYTES))

        # Overrides the scheme://host taken from each request, e.g. behind a proxy
        self.public_base_url = public_base_url or os.getenv("PUBLIC_BASE_URL")

        # Files without a record older than this are removed by the sweep
        self.orphan_max_age = timedelta(
            minutes=int(os.getenv("ORPHAN_MAX_AGE_MINUTES", 60))
        )
