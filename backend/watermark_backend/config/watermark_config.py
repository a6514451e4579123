"""
Watermark Service Configuration

Connection and credential settings for the remote watermark service.
Built once from the environment and handed to the API client; nothing here
is read again at call time.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

DEFAULT_BASE_URL = "https://cs.sase.pre.eagleyun.com"

DEFAULT_ENDPOINTS = {
    "add_watermark_task": "/dlp/file_process/add_watermark_task",
    "query_task": "/dlp/file_process/task",
    "extract_watermark_task": "/dlp/file_process/extract_watermark_task",
}


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class WatermarkApiConfig:
    """Watermark service settings."""

    base_url: str
    access_key: str
    secret_key: str = field(repr=False)
    endpoints: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ENDPOINTS))
    timeout: float = 30.0
    health_check_timeout: float = 5.0
    max_retries: int = 3
    retry_all_errors: bool = False

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url and self.access_key and self.secret_key)

    def endpoint(self, name: str) -> str:
        return self.endpoints[name]

    @classmethod
    def from_env(cls, base_url: Optional[str] = None) -> "WatermarkApiConfig":
        """
        Build configuration from environment variables.

        Environment Variables:
            WATERMARK_API_BASE_URL: Service base URL
            WATERMARK_ACCESS_KEY: HMAC access key id
            WATERMARK_SECRET_KEY: HMAC shared secret
            WATERMARK_TIMEOUT_SECONDS: Request timeout (default: 30)
            WATERMARK_MAX_RETRIES: Attempts per call (default: 3)
            WATERMARK_RETRY_ALL_ERRORS: Retry client errors too (default: false)
        """
        return cls(
            base_url=(base_url or os.getenv("WATERMARK_API_BASE_URL", DEFAULT_BASE_URL)).rstrip("/"),
            access_key=os.getenv("WATERMARK_ACCESS_KEY", ""),
            secret_key=os.getenv("WATERMARK_SECRET_KEY", ""),
            timeout=float(os.getenv("WATERMARK_TIMEOUT_SECONDS", 30)),
            max_retries=int(os.getenv("WATERMARK_MAX_RETRIES", 3)),
            retry_all_errors=_env_bool("WATERMARK_RETRY_ALL_ERRORS"),
        )
