"""Request pipeline composing rate limiting, retry, classification and formatting.

Every call to :func:`make_api_request` ends in exactly one of two ways: it
returns the formatted response, or it raises one terminal
:class:`~resumescorer.exceptions.ApiRequestError`.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from opentelemetry import trace
from pydantic import BaseModel, ConfigDict, Field

from resumescorer.api.classifier import classify_error
from resumescorer.api.rate_limiter import RateLimiter
from resumescorer.api.retry import RetryController
from resumescorer.api.validation import ResponseSchema, format_response
from resumescorer.config import RateLimitConfig, RetryConfig
from resumescorer.utils.logging_config import get_request_logger

logger = logging.getLogger(__name__)
request_logger = get_request_logger()
tracer = trace.get_tracer(__name__)

RequestFn = Callable[[], Awaitable[Any]]


class RequestOptions(BaseModel):
    """Options for a single :func:`make_api_request` call."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    response_schema: Optional[Dict[str, Any]] = Field(
        None, description="Mapping of field name to FieldSpec; None skips formatting"
    )
    attempt_timeout: Optional[float] = Field(
        None, gt=0, description="Deadline in seconds for one request_fn call"
    )


async def _call(request_fn: RequestFn, timeout: Optional[float]) -> Any:
    if timeout is None:
        return await request_fn()
    return await asyncio.wait_for(request_fn(), timeout)


async def make_api_request(
    request_fn: RequestFn,
    options: Optional[RequestOptions] = None,
    *,
    limiter: Optional[RateLimiter] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> Any:
    """Run ``request_fn`` under rate limiting and retry, then format its result.

    Args:
        request_fn: Zero-argument coroutine function performing the external
            call. It is invoked once per attempt.
        options: Rate limit, retry, schema and deadline settings.
        limiter: Shared limiter to schedule attempts through. When omitted a
            limiter is built from ``options.rate_limit`` for this call only.
        sleep: Coroutine used for backoff delays.

    Returns:
        The formatted response, or the raw result when no schema is given.

    Raises:
        ApiRequestError: The terminal classified error.
    """
    options = options or RequestOptions()
    limiter = limiter or RateLimiter.from_config(options.rate_limit)
    controller = RetryController(options.retry, sleep=sleep)
    schema: Optional[ResponseSchema] = options.response_schema

    async def run_attempt(attempt_number: int) -> Any:
        with tracer.start_as_current_span("api_request.attempt") as span:
            span.set_attribute("attempt", attempt_number)
            try:
                # Each attempt, retries included, re-enters the limiter queue
                result = await limiter.schedule(_call, request_fn, options.attempt_timeout)
                if schema is None:
                    formatted = result
                else:
                    formatted = format_response(result, schema)
            except Exception as exc:
                typed = classify_error(exc)
                span.set_attribute("error.kind", typed.kind.value)
                request_logger.info(
                    "Attempt %d failed: kind=%s status=%s message=%s",
                    attempt_number,
                    typed.kind.value,
                    typed.status,
                    typed,
                )
                if typed is exc:
                    raise
                raise typed from exc

            request_logger.debug("Attempt %d succeeded", attempt_number)
            return formatted

    try:
        return await controller.attempt(run_attempt)
    except Exception as exc:
        logger.error(
            "Request failed after %d attempt(s): %s", controller.attempts, exc
        )
        raise
