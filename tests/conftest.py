"""
Configuration and fixtures for tests.
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from resumescorer.config import AnalysisConfig, OpenAIConfig, RateLimitConfig, RetryConfig
from resumescorer.llm.client import OpenAIClientContext
from resumescorer.storage import CredentialStore, MemoryStore, ModelSelection

API_URL = "https://api.openai.com/v1/chat/completions"

VALID_ANALYSIS = {
    "score": 85,
    "matchPercentage": 85,
    "keywordMatches": ["React"],
    "missingKeywords": ["Python"],
    "suggestions": ["Learn Python"],
    "detailedAnalysis": "Good fit.",
}


# --- Provider response and error builders ---


def make_completion(
    arguments: Union[Dict[str, Any], str, None] = None,
    name: str = "analyze_resume",
) -> Dict[str, Any]:
    """Build a chat completion carrying one tool call."""
    if arguments is None:
        arguments = VALID_ANALYSIS
    if not isinstance(arguments, str):
        arguments = json.dumps(arguments)
    return {
        "id": "chatcmpl-test",
        "choices": [
            {
                "index": 0,
                "finish_reason": "tool_calls",
                "message": {
                    "role": "assistant",
                    "content": None,
                    "tool_calls": [
                        {
                            "id": "call_1",
                            "type": "function",
                            "function": {"name": name, "arguments": arguments},
                        }
                    ],
                },
            }
        ],
    }


def make_status_error(status: int, message: str = "error") -> openai.APIStatusError:
    """Build the openai SDK error raised for an HTTP error status."""
    request = httpx.Request("POST", API_URL)
    response = httpx.Response(status, request=request)
    error_classes = {
        401: openai.AuthenticationError,
        429: openai.RateLimitError,
        500: openai.InternalServerError,
    }
    error_class = error_classes.get(status, openai.APIStatusError)
    return error_class(message, response=response, body=None)


def make_connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(request=httpx.Request("POST", API_URL))


def make_pdf(pages: List[str]) -> bytes:
    """Build a minimal PDF with one line of Helvetica text per page."""
    page_count = len(pages)
    page_ids = [4 + 2 * i for i in range(page_count)]

    objects: List[bytes] = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        (
            "<< /Type /Pages /Kids [%s] /Count %d >>"
            % (" ".join(f"{pid} 0 R" for pid in page_ids), page_count)
        ).encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for pid, text in zip(page_ids, pages):
        escaped = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        stream = f"BT /F1 12 Tf 72 720 Td ({escaped}) Tj ET".encode("latin-1")
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {pid + 1} 0 R >>"
            ).encode()
        )
        objects.append(
            b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream"
        )

    out = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1,
        xref_offset,
    )
    return out


# --- Fixtures for storage ---


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def credentials(memory_store) -> CredentialStore:
    """Credential store holding a stored test key and an empty environment."""
    store = CredentialStore(memory_store, environ={})
    store.store_credential("sk-test-key-1234")
    return store


@pytest.fixture
def models(memory_store) -> ModelSelection:
    return ModelSelection(memory_store)


# --- Fixtures for the OpenAI client ---


@pytest.fixture
def fake_openai() -> MagicMock:
    """Stand-in for an AsyncOpenAI client returning a valid analysis."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=make_completion())
    client.close = AsyncMock()
    return client


@pytest.fixture
def client_factory(fake_openai) -> MagicMock:
    return MagicMock(return_value=fake_openai)


@pytest.fixture
def client_context(credentials, models, client_factory) -> OpenAIClientContext:
    return OpenAIClientContext(credentials, models, OpenAIConfig(), client_factory=client_factory)


@pytest.fixture
def fast_analysis_config() -> AnalysisConfig:
    """Analysis settings without limiter spacing."""
    return AnalysisConfig(
        rate_limit=RateLimitConfig(max_concurrent=5, min_time_ms=0),
        retry=RetryConfig(max_retries=3, backoff_factor=2, min_timeout_ms=1000, max_timeout_ms=5000),
    )


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Replacement for asyncio.sleep recording backoff delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def pdf_factory(tmp_path) -> Callable[..., Path]:
    """Write a text PDF into the temporary directory and return its path."""

    def factory(pages: Optional[List[str]] = None, name: str = "resume.pdf") -> Path:
        path = tmp_path / name
        path.write_bytes(make_pdf(["Jane Doe React developer"] if pages is None else pages))
        return path

    return factory


# Configure pytest to use asyncio for async tests
def pytest_configure(config):
    """Configure pytest for asyncio tests."""
    config.option.asyncio_mode = "auto"
