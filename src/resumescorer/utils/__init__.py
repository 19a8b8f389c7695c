"""Utility helpers for resumescorer."""

from resumescorer.utils.async_utils import gather_with_concurrency, run_async
from resumescorer.utils.logging_config import setup_logging

__all__ = ["gather_with_concurrency", "run_async", "setup_logging"]
