"""
Watermark Domain

Request signing and retry policy for calls to the watermark service.
"""

from .retry import backoff_delay, is_retryable_error, retry_all_errors, retry_request
from .signing import (
    RequestSigner,
    SignedEnvelope,
    SigningRequest,
    build_canonical_string,
    compute_signature,
    http_date,
    serialize_body,
)

__all__ = [
    "RequestSigner",
    "SignedEnvelope",
    "SigningRequest",
    "backoff_delay",
    "build_canonical_string",
    "compute_signature",
    "http_date",
    "is_retryable_error",
    "retry_all_errors",
    "retry_request",
    "serialize_body",
]
