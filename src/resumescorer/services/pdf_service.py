"""Page-by-page text extraction from PDF resumes."""

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Iterable, Union

from opentelemetry import trace
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from resumescorer.exceptions import PDFExtractionError
from resumescorer.models import ExtractionProgress
from resumescorer.utils.async_utils import run_async

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass(frozen=True)
class PageText:
    """Text of one PDF page with the extraction progress it completes."""

    text: str
    progress: ExtractionProgress

    @property
    def page_number(self) -> int:
        return self.progress.current_page

    @property
    def total_pages(self) -> int:
        return self.progress.total_pages


def _open_reader(file_path: Path) -> PdfReader:
    with open(file_path, "rb") as f:
        data = f.read()
    return PdfReader(io.BytesIO(data))


def _page_text(reader: PdfReader, index: int) -> str:
    return reader.pages[index].extract_text() or ""


async def iter_pdf_pages(file_path: Union[str, Path]) -> AsyncIterator[PageText]:
    """Yield the text of each page in order.

    The sequence is lazy and can be consumed once. Parsing runs in a worker
    thread.

    Raises:
        PDFExtractionError: If the file cannot be parsed or has no pages.
    """
    file_path = Path(file_path)
    # The span covers opening only; it must not stay current across yields
    with tracer.start_as_current_span("open_pdf") as span:
        span.set_attribute("file.path", str(file_path))
        try:
            reader = await run_async(_open_reader, file_path)
            total_pages = len(reader.pages)
        except (PyPdfError, OSError, ValueError, KeyError, TypeError) as e:
            span.record_exception(e)
            raise PDFExtractionError(f"Failed to read PDF {file_path.name}: {e}") from e
        span.set_attribute("pdf.pages", total_pages)

    if total_pages == 0:
        raise PDFExtractionError(f"PDF {file_path.name} has no pages")

    for index in range(total_pages):
        try:
            text = await run_async(_page_text, reader, index)
        except (PyPdfError, ValueError, KeyError) as e:
            logger.debug(f"pypdf failed on page {index + 1}", exc_info=True)
            raise PDFExtractionError(
                f"Failed to extract page {index + 1} of {file_path.name}: {e}"
            ) from e
        yield PageText(text, ExtractionProgress.for_page(index + 1, total_pages))


def join_pages(pages: Iterable[str]) -> str:
    """Join page texts into the resume text.

    Raises:
        PDFExtractionError: If no page produced any text.
    """
    text = "\n".join(pages).strip()
    if not text:
        raise PDFExtractionError(
            "No text could be extracted from the PDF. It may be a scanned image."
        )
    return text


async def extract_text_from_pdf(file_path: Union[str, Path]) -> str:
    """Extract the full text of a PDF."""
    pages = [page.text async for page in iter_pdf_pages(file_path)]
    text = join_pages(pages)
    logger.debug(f"Extracted {len(text)} characters from {len(pages)} page(s)")
    return text
