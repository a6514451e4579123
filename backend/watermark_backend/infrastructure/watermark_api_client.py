"""
Watermark API Client

httpx client for the remote watermark service. Every call except the
health check is signed with HMAC-SHA256 (see domain.watermark.signing).
Retries are not done here; WatermarkService wraps these calls.
"""

import json
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote

import httpx

from watermark_backend.config.watermark_config import WatermarkApiConfig
from watermark_backend.domain.errors import RemoteApiError
from watermark_backend.domain.watermark.signing import RequestSigner, SigningRequest

logger = logging.getLogger(__name__)

VISIBLE_WATERMARK = 1
INVISIBLE_WATERMARK = 2


def parse_response_body(text: str) -> Any:
    """
    Parse a response body as JSON.

    Bodies that are not valid JSON come back as ``{"rawResponse": text}``
    instead of raising.
    """
    try:
        return json.loads(text)
    except ValueError as e:
        logger.warning("Watermark API response is not valid JSON: %s", e)
        return {"rawResponse": text}


class WatermarkApiClient:
    """Client for the watermark service's task API."""

    def __init__(
        self,
        config: WatermarkApiConfig,
        http_client: Optional[httpx.Client] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            config: Service settings, including credentials
            http_client: Preconfigured httpx client (tests pass one with a
                MockTransport); a new one is created from config otherwise
            clock: Returns the moment used for the Date header
        """
        self.config = config
        self.signer = RequestSigner(config.access_key, config.secret_key)
        self._client = http_client or httpx.Client(base_url=config.base_url, timeout=config.timeout)
        self._clock = clock

    def _url(self, endpoint: str) -> str:
        return f"{self.config.base_url}{endpoint}"

    def make_authenticated_request(
        self, method: str, endpoint: str, data: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Send one signed request and return the parsed response body.

        Args:
            method: HTTP method
            endpoint: Path relative to the base URL; it is also the signed path
            data: JSON payload, or None for no body

        Returns:
            Parsed JSON body, or ``{"rawResponse": text}`` for non-JSON bodies

        Raises:
            RemoteApiError: On transport failure or a non-2xx status
        """
        signing_request = SigningRequest.capture(
            method, endpoint, data, moment=self._clock() if self._clock else None
        )
        envelope = self.signer.sign(signing_request)

        logger.debug(
            "Signed %s %s canonical=%r signature=%s",
            signing_request.method,
            endpoint,
            signing_request.canonical_string,
            envelope.signature,
        )

        content = signing_request.body.encode("utf-8") if data is not None else None

        try:
            response = self._client.request(
                signing_request.method,
                self._url(endpoint),
                headers=envelope.headers(),
                content=content,
                timeout=self.config.timeout,
            )
        except httpx.HTTPError as e:
            logger.error("Watermark API %s %s failed: %s", signing_request.method, endpoint, e)
            raise RemoteApiError(f"Watermark API request failed: {e}", original_error=e) from e

        text = response.text
        logger.info(
            "Watermark API %s %s -> %d %s",
            signing_request.method,
            endpoint,
            response.status_code,
            response.reason_phrase,
        )

        result = parse_response_body(text)

        if not response.is_success:
            raise RemoteApiError(
                f"Watermark API request failed: {response.status_code} "
                f"{response.reason_phrase} - {text}",
                status_code=response.status_code,
                status_text=response.reason_phrase,
                body=text,
            )

        return result

    def create_watermark_task(
        self, file_url: str, content: str, biz_id: str, watermark_type: int = VISIBLE_WATERMARK
    ) -> Any:
        """
        Create an add-watermark task.

        Args:
            file_url: Publicly reachable URL of the source file
            content: Watermark text
            biz_id: Caller's business identifier
            watermark_type: 1 visible, 2 invisible
        """
        payload = {
            "file_url": file_url,
            "content": content,
            "biz_id": biz_id,
            "type": watermark_type,
            "timing": {"enabled": False},
        }
        return self.make_authenticated_request(
            "POST", self.config.endpoint("add_watermark_task"), payload
        )

    def query_task_status(self, task_id: str) -> Any:
        endpoint = f"{self.config.endpoint('query_task')}/{quote(str(task_id), safe='')}"
        return self.make_authenticated_request("GET", endpoint)

    def create_extract_watermark_task(self, file_url: str, biz_id: str) -> Any:
        payload = {"file_url": file_url, "biz_id": biz_id}
        return self.make_authenticated_request(
            "POST", self.config.endpoint("extract_watermark_task"), payload
        )

    def health_check(self) -> Dict[str, Any]:
        """
        Unauthenticated reachability probe of the base URL.

        Any response below 500 counts as accessible; a transport failure
        reports the service as unhealthy instead of raising.
        """
        try:
            response = self._client.get(
                self.config.base_url, timeout=self.config.health_check_timeout
            )
        except httpx.HTTPError as e:
            return {
                "status": "unhealthy",
                "base_url": self.config.base_url,
                "error": str(e) or e.__class__.__name__,
            }

        return {
            "status": "healthy",
            "base_url": self.config.base_url,
            "accessible": response.status_code < 500,
        }
