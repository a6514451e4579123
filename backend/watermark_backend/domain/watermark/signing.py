"""
Request Signing

HMAC-SHA256 request signatures for the watermark service.

The canonical string is ``METHOD\\nPATH\\nDATE\\nBODY``; the signature is the
Base64 encoded HMAC-SHA256 of it keyed with the shared secret. The same
captured date value goes into the canonical string and the ``Date`` header.
"""

import base64
import hashlib
import hmac
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Dict, Optional

HMAC_ALGORITHM = "hmac-sha256"


def http_date(moment: Optional[datetime] = None) -> str:
    """
    Render a moment as an RFC 1123 HTTP-date, e.g. ``Mon, 01 Jan 2024 00:00:00 GMT``.

    Args:
        moment: Time to render (default: now). Naive values are taken as UTC.
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


def serialize_body(data: Optional[Dict[str, Any]]) -> str:
    """
    Serialize a request payload exactly as it is sent and signed.

    Returns an empty string when there is no payload.
    """
    if data is None:
        return ""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def build_canonical_string(method: str, endpoint_path: str, date: str, body: str = "") -> str:
    return f"{method.upper()}\n{endpoint_path}\n{date}\n{body}"


def compute_signature(secret_key: str, canonical_string: str) -> str:
    """Base64(HMAC-SHA256(secret_key, canonical_string))."""
    digest = hmac.new(
        secret_key.encode("utf-8"), canonical_string.encode("utf-8"), hashlib.sha256
    ).digest()
    return base64.b64encode(digest).decode("ascii")


@dataclass(frozen=True)
class SigningRequest:
    """One outbound call's signing input."""

    method: str
    endpoint_path: str
    date_header: str
    body: str = ""

    @classmethod
    def capture(
        cls,
        method: str,
        endpoint_path: str,
        data: Optional[Dict[str, Any]] = None,
        moment: Optional[datetime] = None,
    ) -> "SigningRequest":
        """
        Build a signing request, capturing the date once.

        Args:
            method: HTTP method
            endpoint_path: Path relative to the service base URL
            data: JSON payload, or None for no body
            moment: Time override for the Date header
        """
        return cls(
            method=method.upper(),
            endpoint_path=endpoint_path,
            date_header=http_date(moment),
            body=serialize_body(data),
        )

    @property
    def canonical_string(self) -> str:
        return build_canonical_string(self.method, self.endpoint_path, self.date_header, self.body)


@dataclass(frozen=True)
class SignedEnvelope:
    """A signing request plus its signature and access key."""

    request: SigningRequest
    signature: str
    access_key: str

    def headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Date": self.request.date_header,
            "X-HMAC-ALGORITHM": HMAC_ALGORITHM,
            "X-HMAC-ACCESS-KEY": self.access_key,
            "X-HMAC-SIGNATURE": self.signature,
        }


class RequestSigner:
    """
    Signs requests with a shared secret.

    Holds the access key and secret; callers never see the secret again after
    construction.
    """

    def __init__(self, access_key: str, secret_key: str):
        if not secret_key:
            raise ValueError("secret_key is required for request signing")
        self.access_key = access_key
        self._secret_key = secret_key

    def sign(self, request: SigningRequest) -> SignedEnvelope:
        signature = compute_signature(self._secret_key, request.canonical_string)
        return SignedEnvelope(request=request, signature=signature, access_key=self.access_key)

