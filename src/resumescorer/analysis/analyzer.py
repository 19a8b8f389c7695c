"""Resume analysis against a job description using the OpenAI API."""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import ValidationError

from resumescorer.analysis.tools import (
    ANALYSIS_RESPONSE_SCHEMA,
    ANALYZE_RESUME_TOOL,
    TOOL_CHOICE,
)
from resumescorer.analysis.transformers import transform_analysis_response
from resumescorer.api.pipeline import RequestOptions, make_api_request
from resumescorer.api.rate_limiter import RateLimiter
from resumescorer.api.validation import extract_tool_arguments
from resumescorer.config import AnalysisConfig, AppConfig
from resumescorer.constants import ANALYZE_RESUME_TOOL_NAME
from resumescorer.exceptions import InputValidationError
from resumescorer.llm.client import OpenAIClientContext
from resumescorer.models import AnalysisRequest, AnalysisResult
from resumescorer.prompts import get_prompt
from resumescorer.storage import CredentialStore, JsonFileStore, ModelSelection
from resumescorer.utils.logging_config import get_analysis_logger

logger = logging.getLogger(__name__)
analysis_logger = get_analysis_logger()


def build_messages(resume_text: str, job_description: str) -> List[Dict[str, str]]:
    """Build the system and user messages for the analysis request."""
    return [
        {"role": "system", "content": get_prompt("resume_analysis_system")},
        {
            "role": "user",
            "content": get_prompt(
                "resume_analysis_user",
                resume_text=resume_text,
                job_description=job_description,
            ),
        },
    ]


class ResumeAnalysisClient:
    """Score resumes against job descriptions.

    The client owns one rate limiter for its lifetime, so every analysis it
    runs shares the same concurrency and spacing budget.
    """

    def __init__(
        self,
        context: OpenAIClientContext,
        config: Optional[AnalysisConfig] = None,
        *,
        settings_store: Optional[JsonFileStore] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.context = context
        self.settings_store = settings_store
        self.config = config or AnalysisConfig()
        self.limiter = RateLimiter.from_config(self.config.rate_limit)
        self._sleep = sleep

    @classmethod
    def from_config(cls, config: AppConfig) -> "ResumeAnalysisClient":
        """Build a client that reads settings from the configured data directory."""
        store = JsonFileStore(config.settings_file)
        context = OpenAIClientContext(
            CredentialStore(store),
            ModelSelection(store, default_model=config.openai.model),
            config.openai,
        )
        context.watch(store)
        return cls(context, config.analysis, settings_store=store)

    @property
    def request_options(self) -> RequestOptions:
        return RequestOptions(
            rate_limit=self.config.rate_limit,
            retry=self.config.retry,
            response_schema=ANALYSIS_RESPONSE_SCHEMA,
            attempt_timeout=self.config.attempt_timeout,
        )

    def _validate_request(
        self, resume_text: Any, job_description: Any, credential: Optional[str]
    ) -> AnalysisRequest:
        model = self.context.models.get_model()
        try:
            return AnalysisRequest(
                resume_text=resume_text,
                job_description=job_description,
                model=model,
                credential=credential,
            )
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise InputValidationError(f"Invalid analysis input: {problems}") from e

    async def analyze_resume_against_job(
        self,
        resume_text: str,
        job_description: str,
        credential: Optional[str] = None,
    ) -> AnalysisResult:
        """Analyze a resume against a job description.

        Args:
            resume_text: Plain text of the resume.
            job_description: Job description text.
            credential: API key to use instead of the stored one.

        Returns:
            The scored analysis with derived feedback.

        Raises:
            InputValidationError: If either text is empty.
            ModelError: If the selected model is not usable.
            ApiRequestError: The terminal error of the provider call.
        """
        if self.settings_store is not None:
            # Pick up keys and models changed by other sessions
            self.settings_store.sync()
        request = self._validate_request(resume_text, job_description, credential)
        openai_config = self.context.config
        messages = build_messages(request.resume_text, request.job_description)

        async def request_fn() -> Dict[str, Any]:
            # Resolved per attempt so a key removed mid-retry is noticed
            client, model = await self.context.get_client(request.credential)
            completion = await client.chat.completions.create(
                model=model,
                messages=messages,
                tools=[ANALYZE_RESUME_TOOL],
                tool_choice=TOOL_CHOICE,
                temperature=openai_config.temperature,
                max_tokens=openai_config.max_tokens,
            )
            usage = getattr(completion, "usage", None)
            if usage is not None:
                analysis_logger.debug(
                    "Token usage: prompt=%s completion=%s total=%s",
                    usage.prompt_tokens,
                    usage.completion_tokens,
                    usage.total_tokens,
                )
            return extract_tool_arguments(completion, ANALYZE_RESUME_TOOL_NAME)

        started = time.monotonic()
        analysis_logger.info(
            "Analyzing resume (%d chars) with %s", len(request.resume_text), request.model
        )
        formatted = await make_api_request(
            request_fn, self.request_options, limiter=self.limiter, sleep=self._sleep
        )
        result = transform_analysis_response(formatted)
        analysis_logger.info(
            "Analysis complete: score=%s match=%s%% in %.2fs",
            result.score,
            result.match_percentage,
            time.monotonic() - started,
        )
        return result

    async def aclose(self) -> None:
        await self.context.aclose()

    async def __aenter__(self) -> "ResumeAnalysisClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


async def analyze_resume_against_job(
    resume_text: str,
    job_description: str,
    credential: Optional[str] = None,
    config: Optional[AppConfig] = None,
) -> AnalysisResult:
    """Analyze a resume with a client built from ``config`` for this call."""
    async with ResumeAnalysisClient.from_config(config or AppConfig()) as client:
        return await client.analyze_resume_against_job(
            resume_text, job_description, credential
        )
