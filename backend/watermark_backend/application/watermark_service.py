"""
Watermark Service

Application service proxying task calls to the watermark service. Each
call runs through the retry wrapper with the configured attempt count and
error classification.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

from watermark_backend.domain.errors import InvalidRequestError
from watermark_backend.domain.watermark.retry import (
    is_retryable_error,
    retry_all_errors,
    retry_request,
)
from watermark_backend.infrastructure.watermark_api_client import (
    INVISIBLE_WATERMARK,
    VISIBLE_WATERMARK,
    WatermarkApiClient,
)

logger = logging.getLogger(__name__)


def _require(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequestError(f"Missing required field: {name}")
    return value.strip()


class WatermarkService:
    """Validated, retried access to the watermark task API."""

    def __init__(
        self,
        client: WatermarkApiClient,
        max_retries: Optional[int] = None,
        retry_all: Optional[bool] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            client: Signed API client
            max_retries: Attempts per call (default: client config)
            retry_all: Retry client errors too (default: client config)
            sleep: Sleep function used between attempts
        """
        self.client = client
        self.max_retries = max_retries if max_retries is not None else client.config.max_retries
        if retry_all is None:
            retry_all = client.config.retry_all_errors
        self.should_retry = retry_all_errors if retry_all else is_retryable_error
        self._sleep = sleep

    def _call(self, request_fn: Callable[[], Any]) -> Any:
        return retry_request(
            request_fn,
            max_retries=self.max_retries,
            should_retry=self.should_retry,
            sleep=self._sleep,
        )

    def create_watermark_task(
        self,
        file_url: str,
        content: str,
        biz_id: str,
        watermark_type: int = VISIBLE_WATERMARK,
    ) -> Any:
        """
        Raises:
            InvalidRequestError: On missing fields or an unknown watermark type
            RemoteApiError, RetryExhaustedError: On remote failure
        """
        file_url = _require(file_url, "file_url")
        content = _require(content, "content")
        biz_id = _require(biz_id, "biz_id")
        if watermark_type not in (VISIBLE_WATERMARK, INVISIBLE_WATERMARK):
            raise InvalidRequestError(f"Invalid watermark type: {watermark_type}")

        logger.info("Creating watermark task for %s (biz_id=%s)", file_url, biz_id)
        result = self._call(
            lambda: self.client.create_watermark_task(file_url, content, biz_id, watermark_type)
        )
        logger.info("Watermark task created for biz_id=%s", biz_id)
        return result

    def query_task_status(self, task_id: str) -> Any:
        task_id = _require(task_id, "task_id")
        logger.info("Querying watermark task %s", task_id)
        return self._call(lambda: self.client.query_task_status(task_id))

    def create_extract_watermark_task(self, file_url: str, biz_id: str) -> Any:
        file_url = _require(file_url, "file_url")
        biz_id = _require(biz_id, "biz_id")

        logger.info("Creating watermark extraction task for %s (biz_id=%s)", file_url, biz_id)
        return self._call(lambda: self.client.create_extract_watermark_task(file_url, biz_id))

    def health_check(self) -> Dict[str, Any]:
        return self.client.health_check()
