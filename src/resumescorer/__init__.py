"""resumescorer - Score PDF resumes against job descriptions with OpenAI."""

__version__ = "1.0.0"

from resumescorer.analysis import ResumeAnalysisClient, analyze_resume_against_job
from resumescorer.api import RequestOptions, make_api_request
from resumescorer.config import AppConfig, load_config
from resumescorer.exceptions import ApiRequestError, ErrorKind, ResumeScorerError
from resumescorer.models import AnalysisResult
from resumescorer.services import ResumeProcessor, batch_process_resumes, process_resume

__all__ = [
    "AnalysisResult",
    "ApiRequestError",
    "AppConfig",
    "ErrorKind",
    "RequestOptions",
    "ResumeAnalysisClient",
    "ResumeProcessor",
    "ResumeScorerError",
    "__version__",
    "analyze_resume_against_job",
    "batch_process_resumes",
    "load_config",
    "make_api_request",
    "process_resume",
]
