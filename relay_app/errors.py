# relay_app/errors.py
# -*- coding: utf-8 -*-
"""
Error taxonomy for the relay.

Every error raised by a pipeline stage carries an ``ErrorKind`` tag. The HTTP
layer never inspects exception classes directly; it asks
:func:`http_status_for` what a tag maps to.
"""
import enum
from typing import Optional

import requests
import redis


class ErrorKind(str, enum.Enum):
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    UPSTREAM = "upstream"
    STREAM = "stream"
    CACHE = "cache"
    INTERNAL = "internal"


class RelayError(Exception):
    kind: ErrorKind = ErrorKind.CONFIGURATION

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(RelayError):
    """The provider credential (or another required setting) is missing."""
    kind = ErrorKind.CONFIGURATION


class ValidationError(RelayError):
    """The inbound request is missing something the relay needs."""
    kind = ErrorKind.VALIDATION


class UpstreamError(RelayError):
    """The assistant provider answered with a non-success status."""
    kind = ErrorKind.UPSTREAM

    def __init__(self, operation: str, status_code: int, body: str):
        super().__init__(f"{operation} failed: {status_code} {body}")
        self.operation = operation
        self.status_code = status_code
        self.body = body


class StreamTranscodeError(RelayError):
    """Raised inside the transcoder; only ever surfaced as an in-band frame."""
    kind = ErrorKind.STREAM


# Pre-stream failures all surface as a single JSON 500. STREAM errors happen
# after the headers are sent, so they have no status.
_STATUS_BY_KIND = {
    ErrorKind.CONFIGURATION: 500,
    ErrorKind.VALIDATION: 500,
    ErrorKind.UPSTREAM: 500,
    ErrorKind.STREAM: None,
    ErrorKind.CACHE: 500,
    ErrorKind.INTERNAL: 500,
}


def http_status_for(kind: ErrorKind) -> Optional[int]:
    return _STATUS_BY_KIND[kind]


def error_payload(details: str) -> dict:
    return {"error": "Internal server error", "details": details}


def kind_for_exception(error: Exception) -> ErrorKind:
    """Tags an exception that did not come from the relay's own taxonomy."""
    if isinstance(error, RelayError):
        return error.kind
    if isinstance(error, requests.RequestException):
        return ErrorKind.UPSTREAM
    if isinstance(error, redis.RedisError):
        return ErrorKind.CACHE
    return ErrorKind.INTERNAL
