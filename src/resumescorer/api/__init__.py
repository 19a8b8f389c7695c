"""Resilient request pipeline: rate limiting, retry, classification, formatting."""

from resumescorer.api.classifier import classify_error
from resumescorer.api.pipeline import RequestOptions, make_api_request
from resumescorer.api.rate_limiter import RateLimiter
from resumescorer.api.retry import RetryController, is_retryable
from resumescorer.api.validation import (
    FieldSpec,
    FieldType,
    ResponseSchema,
    extract_tool_arguments,
    format_response,
)

__all__ = [
    "FieldSpec",
    "FieldType",
    "RateLimiter",
    "RequestOptions",
    "ResponseSchema",
    "RetryController",
    "classify_error",
    "extract_tool_arguments",
    "format_response",
    "is_retryable",
    "make_api_request",
]
