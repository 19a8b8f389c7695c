"""End-to-end resume processing: validate, extract, analyze."""

import logging
from pathlib import Path
from typing import AsyncIterator, Awaitable, Callable, List, Optional, Sequence, Union

from resumescorer.analysis.analyzer import ResumeAnalysisClient
from resumescorer.api.rate_limiter import RateLimiter
from resumescorer.config import AppConfig, ProcessingConfig
from resumescorer.exceptions import (
    InputValidationError,
    MissingCredentialError,
    ResumeScorerError,
)
from resumescorer.models import (
    AnalysisResult,
    BatchItemResult,
    BatchResult,
    ProcessingEvent,
    ProcessingStage,
)
from resumescorer.services.files import validate_resume_file
from resumescorer.services.pdf_service import iter_pdf_pages, join_pages
from resumescorer.storage import CredentialStore
from resumescorer.utils.async_utils import gather_with_concurrency

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ResumeProcessor:
    """Run the full resume scoring flow.

    Extraction and analysis of each resume run inside one slot of the
    processor's rate limiter. Errors propagate unchanged; the analysis
    request already retries what can be retried.
    """

    def __init__(
        self,
        analysis_client: ResumeAnalysisClient,
        credentials: Optional[CredentialStore] = None,
        config: Optional[ProcessingConfig] = None,
    ) -> None:
        self.analysis_client = analysis_client
        self.credentials = credentials or analysis_client.context.credentials
        self.config = config or ProcessingConfig()
        self.limiter = RateLimiter.from_config(self.config.rate_limit)

    async def events(
        self, file_path: PathLike, job_description: str
    ) -> AsyncIterator[ProcessingEvent]:
        """Process a resume, yielding an event for each step.

        The last event has stage ``completed`` and carries the result.
        Closing the iterator early abandons processing and frees the
        limiter slot.

        Raises:
            MissingCredentialError: If no API key is configured.
            FileValidationError: If the file is not an acceptable PDF.
            PDFExtractionError: If no text can be extracted.
            ApiRequestError: The terminal error of the analysis request.
        """
        yield ProcessingEvent(stage=ProcessingStage.VALIDATING)

        credential = self.credentials.get_credential()
        if not credential:
            raise MissingCredentialError()
        if not isinstance(job_description, str) or not job_description.strip():
            raise InputValidationError("Invalid jobDescription: Must be a non-empty string")
        file_path = validate_resume_file(file_path, self.config.max_file_size)

        async with self.limiter.slot():
            pages: List[str] = []
            async for page in iter_pdf_pages(file_path):
                pages.append(page.text)
                yield ProcessingEvent(stage=ProcessingStage.EXTRACTING, progress=page.progress)
            resume_text = join_pages(pages)

            yield ProcessingEvent(stage=ProcessingStage.ANALYZING)
            result = await self.analysis_client.analyze_resume_against_job(
                resume_text, job_description, credential
            )

        logger.info(f"Processed {file_path.name}: score {result.score}")
        yield ProcessingEvent(stage=ProcessingStage.COMPLETED, result=result)

    async def process_resume(
        self,
        file_path: PathLike,
        job_description: str,
        on_event: Optional[Callable[[ProcessingEvent], None]] = None,
    ) -> AnalysisResult:
        """Process a resume and return its analysis.

        Args:
            file_path: Path to the PDF resume.
            job_description: Job description text.
            on_event: Optional callback receiving each processing event.
        """
        result: Optional[AnalysisResult] = None
        async for event in self.events(file_path, job_description):
            if on_event is not None:
                on_event(event)
            if event.stage is ProcessingStage.COMPLETED:
                result = event.result

        if result is None:  # pragma: no cover
            raise ResumeScorerError("Processing finished without a result")
        return result

    async def batch_process_resumes(
        self, file_paths: Sequence[PathLike], job_description: str
    ) -> BatchResult:
        """Process several resumes, recording each failure without stopping.

        Only :class:`ResumeScorerError` failures are recorded; anything else
        propagates.
        """

        def make_task(path: PathLike) -> Callable[[], Awaitable[BatchItemResult]]:
            async def run() -> BatchItemResult:
                try:
                    result = await self.process_resume(path, job_description)
                except ResumeScorerError as e:
                    logger.warning(f"Failed to process {path}: {e}")
                    return BatchItemResult(
                        file_path=Path(path), success=False, error=e.user_message
                    )
                return BatchItemResult(file_path=Path(path), success=True, result=result)

            return run

        items = await gather_with_concurrency(
            self.config.batch_concurrency, *(make_task(path) for path in file_paths)
        )
        return BatchResult(results=items)


async def process_resume(
    file_path: PathLike, job_description: str, config: Optional[AppConfig] = None
) -> AnalysisResult:
    """Process one resume with clients built from ``config`` for this call."""
    config = config or AppConfig()
    async with ResumeAnalysisClient.from_config(config) as client:
        processor = ResumeProcessor(client, config=config.processing)
        return await processor.process_resume(file_path, job_description)


async def batch_process_resumes(
    file_paths: Sequence[PathLike], job_description: str, config: Optional[AppConfig] = None
) -> BatchResult:
    """Process several resumes with clients built from ``config`` for this call."""
    config = config or AppConfig()
    async with ResumeAnalysisClient.from_config(config) as client:
        processor = ResumeProcessor(client, config=config.processing)
        return await processor.batch_process_resumes(file_paths, job_description)
