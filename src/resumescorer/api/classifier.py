"""Map transport and provider errors onto the typed error taxonomy."""

import asyncio
import errno
import json
import socket
from typing import Optional

import aiohttp
import openai

from resumescorer.exceptions import (
    ApiRequestError,
    InvalidCredentialError,
    MalformedProviderResponseError,
    NetworkUnreachableError,
    RateLimitedError,
    UnknownProviderError,
)

UNAUTHORIZED_STATUS = 401
RATE_LIMIT_STATUS = 429

_NETWORK_ERRNOS = {
    errno.ECONNREFUSED,
    errno.EHOSTUNREACH,
    errno.ENETUNREACH,
    errno.ETIMEDOUT,
}


def _status_of(error: BaseException) -> Optional[int]:
    """Extract an HTTP status code from a provider or transport error."""
    if isinstance(error, openai.APIStatusError):
        return error.status_code
    if isinstance(error, aiohttp.ClientResponseError):
        return error.status
    for attr in ("status_code", "status"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def _is_network_error(error: BaseException) -> bool:
    """Return True for connection refused, DNS failure and connect timeouts."""
    if isinstance(error, openai.APIConnectionError):
        # APITimeoutError is a subclass
        return True
    if isinstance(error, (aiohttp.ClientConnectorError, aiohttp.ServerTimeoutError)):
        return True
    if isinstance(
        error, (ConnectionRefusedError, socket.gaierror, asyncio.TimeoutError, TimeoutError)
    ):
        return True
    if isinstance(error, OSError) and error.errno in _NETWORK_ERRNOS:
        return True
    return False


def _message_of(error: BaseException) -> str:
    if isinstance(error, openai.APIError) and error.message:
        return error.message
    return str(error) or error.__class__.__name__


def classify_error(error: BaseException) -> ApiRequestError:
    """Convert ``error`` into an :class:`ApiRequestError`.

    Rules, first match wins:

    * already-typed errors (including a missing credential) are returned as is
    * HTTP 401 becomes :class:`InvalidCredentialError`
    * HTTP 429 becomes :class:`RateLimitedError`
    * connection refused, DNS failure and timeouts become
      :class:`NetworkUnreachableError`
    * JSON decoding failures become :class:`MalformedProviderResponseError`
    * anything else becomes :class:`UnknownProviderError` carrying the
      original message

    Classification is pure: it performs no I/O and never retries.
    """
    if isinstance(error, ApiRequestError):
        return error

    status = _status_of(error)
    if status == UNAUTHORIZED_STATUS:
        return InvalidCredentialError(status=status)
    if status == RATE_LIMIT_STATUS:
        return RateLimitedError(status=status)

    if _is_network_error(error):
        return NetworkUnreachableError()

    if isinstance(error, json.JSONDecodeError):
        return MalformedProviderResponseError(
            f"Invalid JSON response: {error.msg}", raw_payload=error.doc
        )

    return UnknownProviderError(_message_of(error), status=status)
