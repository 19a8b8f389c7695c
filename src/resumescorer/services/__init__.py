"""Services for resumescorer."""

from resumescorer.services.files import is_pdf, is_valid_file_size, validate_resume_file
from resumescorer.services.pdf_service import extract_text_from_pdf, iter_pdf_pages
from resumescorer.services.resume_processor import (
    ResumeProcessor,
    batch_process_resumes,
    process_resume,
)

__all__ = [
    "ResumeProcessor",
    "batch_process_resumes",
    "extract_text_from_pdf",
    "is_pdf",
    "is_valid_file_size",
    "iter_pdf_pages",
    "process_resume",
    "validate_resume_file",
]
