"""Resume file validation."""

import logging
from pathlib import Path
from typing import Union

from resumescorer.constants import ALLOWED_EXTENSIONS, MAX_FILE_SIZE, PDF_MAGIC
from resumescorer.exceptions import FileValidationError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def get_file_extension(filename: PathLike) -> str:
    """Return the lower-cased extension of ``filename`` including the dot."""
    return Path(filename).suffix.lower()


def is_pdf(file_path: PathLike) -> bool:
    """Check the extension and the ``%PDF-`` signature of a file.

    Raises:
        FileValidationError: If the file cannot be read.
    """
    file_path = Path(file_path)
    if get_file_extension(file_path) not in ALLOWED_EXTENSIONS:
        return False
    try:
        with open(file_path, "rb") as f:
            header = f.read(1024)
    except OSError as e:
        raise FileValidationError(f"Could not read file {file_path}: {e}") from e
    # Some writers put junk before the signature; readers accept it within 1KB
    return PDF_MAGIC in header


def is_valid_file_size(file_path: PathLike, max_size: int = MAX_FILE_SIZE) -> bool:
    """Return True if the file is no larger than ``max_size`` bytes."""
    try:
        return Path(file_path).stat().st_size <= max_size
    except OSError as e:
        raise FileValidationError(f"Could not read file {file_path}: {e}") from e


def validate_resume_file(file_path: PathLike, max_size: int = MAX_FILE_SIZE) -> Path:
    """Validate that ``file_path`` is a PDF of an acceptable size.

    Returns:
        The file path as a :class:`Path`.

    Raises:
        FileValidationError: If the file is missing, not a PDF, or too large.
    """
    file_path = Path(file_path).expanduser()
    if not file_path.is_file():
        raise FileValidationError(f"File not found: {file_path}")
    if not is_pdf(file_path):
        raise FileValidationError("Invalid PDF file format")
    if not is_valid_file_size(file_path, max_size):
        raise FileValidationError(
            f"File size exceeds maximum limit of {max_size // (1024 * 1024)}MB"
        )
    logger.debug(f"Validated resume file: {file_path}")
    return file_path
