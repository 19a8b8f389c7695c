"""Turn a formatted provider response into an :class:`AnalysisResult`."""

import logging
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from resumescorer.constants import FEEDBACK_TITLES
from resumescorer.exceptions import SchemaViolationError
from resumescorer.models import AnalysisResult, FeedbackItem

logger = logging.getLogger(__name__)


def parse_detailed_analysis(analysis: str) -> List[FeedbackItem]:
    """Split the detailed analysis into one feedback item per paragraph."""
    return [
        FeedbackItem(title=FEEDBACK_TITLES["ANALYSIS"], description=paragraph.strip())
        for paragraph in analysis.split("\n\n")
        if paragraph.strip()
    ]


def build_feedback(formatted: Mapping[str, Any]) -> List[FeedbackItem]:
    """Derive the feedback list shown alongside the score."""
    return [
        FeedbackItem(
            title=FEEDBACK_TITLES["MATCHING_SKILLS"],
            description=", ".join(formatted["keywordMatches"]),
        ),
        FeedbackItem(
            title=FEEDBACK_TITLES["MISSING_SKILLS"],
            description=", ".join(formatted["missingKeywords"]),
        ),
        *parse_detailed_analysis(formatted["detailedAnalysis"]),
    ]


def transform_analysis_response(formatted: Mapping[str, Any]) -> AnalysisResult:
    """Build the analysis result from a response that passed schema checks.

    Args:
        formatted: Output of ``format_response`` against the analysis schema.

    Returns:
        The result with its derived ``feedback`` attached.

    Raises:
        SchemaViolationError: If the response does not fit the result model.
    """
    data: Dict[str, Any] = dict(formatted)
    try:
        data["feedback"] = build_feedback(formatted)
        return AnalysisResult.model_validate(data)
    except (KeyError, ValidationError) as e:
        logger.debug("Could not transform analysis response: %s", e)
        raise SchemaViolationError(f"Failed to transform OpenAI response: {e}") from e
