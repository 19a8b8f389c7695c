"""Tests for end-to-end resume processing."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import VALID_ANALYSIS
from resumescorer.analysis.transformers import transform_analysis_response
from resumescorer.config import ProcessingConfig, RateLimitConfig
from resumescorer.exceptions import (
    FileValidationError,
    InputValidationError,
    InvalidCredentialError,
    MissingCredentialError,
)
from resumescorer.models import ProcessingStage
from resumescorer.services.resume_processor import ResumeProcessor
from resumescorer.storage import CredentialStore


@pytest.fixture
def analysis_result():
    return transform_analysis_response(VALID_ANALYSIS)


@pytest.fixture
def analysis_client(analysis_result):
    client = MagicMock()
    client.analyze_resume_against_job = AsyncMock(return_value=analysis_result)
    return client


@pytest.fixture
def processor(analysis_client, credentials):
    config = ProcessingConfig(rate_limit=RateLimitConfig(max_concurrent=2, min_time_ms=0))
    return ResumeProcessor(analysis_client, credentials, config)


async def test_events_in_order(processor, pdf_factory, analysis_result):
    path = pdf_factory(["Jane Doe", "React developer"])

    events = [event async for event in processor.events(path, "React dev")]

    assert [event.stage for event in events] == [
        ProcessingStage.VALIDATING,
        ProcessingStage.EXTRACTING,
        ProcessingStage.EXTRACTING,
        ProcessingStage.ANALYZING,
        ProcessingStage.COMPLETED,
    ]
    assert events[2].progress.percent_complete == 100
    assert events[-1].result == analysis_result


async def test_process_resume(processor, analysis_client, pdf_factory, analysis_result):
    seen = []

    result = await processor.process_resume(pdf_factory(), "React dev", on_event=seen.append)

    assert result == analysis_result
    assert seen[-1].stage is ProcessingStage.COMPLETED
    resume_text, job, credential = analysis_client.analyze_resume_against_job.await_args.args
    assert "Jane Doe" in resume_text
    assert job == "React dev"
    assert credential == "sk-test-key-1234"


async def test_missing_credential_is_checked_first(analysis_client, memory_store, tmp_path):
    processor = ResumeProcessor(analysis_client, CredentialStore(memory_store, environ={}))

    with pytest.raises(MissingCredentialError):
        await processor.process_resume(tmp_path / "missing.pdf", "job")

    analysis_client.analyze_resume_against_job.assert_not_awaited()


async def test_invalid_file(processor, analysis_client, tmp_path):
    path = tmp_path / "resume.pdf"
    path.write_text("plain text")

    with pytest.raises(FileValidationError):
        await processor.process_resume(path, "job")

    analysis_client.analyze_resume_against_job.assert_not_awaited()


async def test_empty_job_description(processor, pdf_factory):
    with pytest.raises(InputValidationError):
        await processor.process_resume(pdf_factory(), "  ")


async def test_errors_propagate_unchanged(processor, analysis_client, pdf_factory):
    error = InvalidCredentialError(status=401)
    analysis_client.analyze_resume_against_job.side_effect = error

    with pytest.raises(InvalidCredentialError) as exc_info:
        await processor.process_resume(pdf_factory(), "job")

    assert exc_info.value is error
    analysis_client.analyze_resume_against_job.assert_awaited_once()
    assert processor.limiter.running == 0


async def test_abandoned_events_release_limiter(processor, pdf_factory):
    events = processor.events(pdf_factory(["one", "two"]), "job")
    async for event in events:
        if event.stage is ProcessingStage.EXTRACTING:
            break
    await events.aclose()

    assert processor.limiter.running == 0


async def test_batch_collects_failures(processor, pdf_factory, tmp_path):
    good = pdf_factory(name="good.pdf")
    bad = tmp_path / "bad.pdf"
    bad.write_text("nope")

    batch = await processor.batch_process_resumes([good, bad], "job")

    assert not batch.success
    assert [item.success for item in batch.results] == [True, False]
    assert batch.results[0].result.score == 85
    assert batch.errors[0].file_path == bad
    assert batch.errors[0].error == "Invalid PDF file format"
