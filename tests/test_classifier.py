"""Tests for error classification."""

import asyncio
import errno
import json
import socket
from unittest.mock import MagicMock

import aiohttp
import pytest

from conftest import make_connection_error, make_status_error
from resumescorer.api.classifier import classify_error
from resumescorer.exceptions import (
    ErrorKind,
    InvalidCredentialError,
    MalformedProviderResponseError,
    MissingCredentialError,
    NetworkUnreachableError,
    RateLimitedError,
    UnknownProviderError,
)


def test_typed_errors_pass_through():
    error = MissingCredentialError()
    assert classify_error(error) is error
    assert not classify_error(error).retryable


def test_unauthorized_is_invalid_credential():
    typed = classify_error(make_status_error(401, "Incorrect API key provided"))
    assert isinstance(typed, InvalidCredentialError)
    assert typed.status == 401
    assert not typed.retryable


def test_too_many_requests_is_rate_limited():
    typed = classify_error(make_status_error(429))
    assert isinstance(typed, RateLimitedError)
    assert typed.retryable


def test_aiohttp_status_errors():
    error = aiohttp.ClientResponseError(
        request_info=MagicMock(), history=(), status=429, message="Too Many Requests"
    )
    assert isinstance(classify_error(error), RateLimitedError)


@pytest.mark.parametrize(
    "error",
    [
        make_connection_error(),
        ConnectionRefusedError("refused"),
        socket.gaierror(-2, "Name or service not known"),
        asyncio.TimeoutError(),
        aiohttp.ClientConnectorError(MagicMock(), OSError(errno.ECONNREFUSED, "refused")),
        OSError(errno.EHOSTUNREACH, "No route to host"),
    ],
)
def test_network_errors(error):
    typed = classify_error(error)
    assert isinstance(typed, NetworkUnreachableError)
    assert typed.kind is ErrorKind.NETWORK_UNREACHABLE


@pytest.mark.parametrize(
    "error",
    [
        ConnectionResetError(errno.ECONNRESET, "Connection reset by peer"),
        BrokenPipeError(errno.EPIPE, "Broken pipe"),
        aiohttp.ServerDisconnectedError(),
    ],
)
def test_dropped_connections_are_unknown(error):
    typed = classify_error(error)
    assert isinstance(typed, UnknownProviderError)
    assert typed.retryable


def test_json_decode_error_is_malformed():
    with pytest.raises(json.JSONDecodeError) as exc_info:
        json.loads("{not json")

    typed = classify_error(exc_info.value)
    assert isinstance(typed, MalformedProviderResponseError)
    assert typed.raw_payload == "{not json"
    assert not typed.retryable


def test_anything_else_is_unknown_with_original_message():
    typed = classify_error(RuntimeError("The server had an error"))
    assert isinstance(typed, UnknownProviderError)
    assert str(typed) == "The server had an error"
    assert typed.user_message == "OpenAI API error: The server had an error"
    assert typed.retryable


def test_server_error_status_is_unknown():
    typed = classify_error(make_status_error(500, "Internal error"))
    assert isinstance(typed, UnknownProviderError)
    assert typed.status == 500
