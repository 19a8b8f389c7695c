"""Resume analysis for resumescorer."""

from resumescorer.analysis.analyzer import (
    ResumeAnalysisClient,
    analyze_resume_against_job,
)
from resumescorer.analysis.transformers import (
    parse_detailed_analysis,
    transform_analysis_response,
)

__all__ = [
    "ResumeAnalysisClient",
    "analyze_resume_against_job",
    "parse_detailed_analysis",
    "transform_analysis_response",
]
