"""Resume analysis models for resumescorer."""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from resumescorer.constants import SCORE_RANGES


class CamelModel(BaseModel):
    """Base model exposing snake_case attributes with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalysisRequest(CamelModel):
    """Input of a single resume analysis call."""

    resume_text: str = Field(..., description="Plain text extracted from the resume")
    job_description: str = Field(..., description="Job description to match against")
    model: str = Field(..., description="Provider model id")
    credential: Optional[str] = Field(
        None, repr=False, description="API key overriding the stored one"
    )

    @field_validator("resume_text", "job_description")
    @classmethod
    def check_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Must be a non-empty string")
        return v


class FeedbackItem(CamelModel):
    """A titled block of feedback derived from the analysis."""

    title: str
    description: str


class AnalysisResult(CamelModel):
    """Scored analysis of a resume against a job description."""

    score: float = Field(
        ..., ge=SCORE_RANGES["MIN"], le=SCORE_RANGES["MAX"], description="Overall match score"
    )
    match_percentage: float = Field(
        ...,
        ge=SCORE_RANGES["MIN"],
        le=SCORE_RANGES["MAX"],
        description="Percentage match for key requirements",
    )
    keyword_matches: List[str] = Field(default_factory=list)
    missing_keywords: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    detailed_analysis: str = Field(..., min_length=1)
    feedback: List[FeedbackItem] = Field(default_factory=list)

    def to_response(self) -> dict:
        """Dump with the provider's camelCase keys."""
        return self.model_dump(by_alias=True)


class ExtractionProgress(CamelModel):
    """Progress of PDF text extraction after a page has been read."""

    current_page: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=1)
    percent_complete: int = Field(..., ge=0, le=100)

    @classmethod
    def for_page(cls, current_page: int, total_pages: int) -> "ExtractionProgress":
        return cls(
            current_page=current_page,
            total_pages=total_pages,
            percent_complete=round(current_page / total_pages * 100),
        )


class ProcessingStage(str, Enum):
    """Stages reported while a resume is processed."""

    VALIDATING = "validating"
    EXTRACTING = "extracting"
    ANALYZING = "analyzing"
    COMPLETED = "completed"


class ProcessingEvent(CamelModel):
    """One step of resume processing."""

    stage: ProcessingStage
    progress: Optional[ExtractionProgress] = None
    result: Optional[AnalysisResult] = None


class BatchItemResult(CamelModel):
    """Outcome of processing one resume in a batch."""

    file_path: Path
    success: bool
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None


class BatchResult(CamelModel):
    """Outcome of processing several resumes."""

    results: List[BatchItemResult] = Field(default_factory=list)

    @property
    def errors(self) -> List[BatchItemResult]:
        return [item for item in self.results if not item.success]

    @property
    def success(self) -> bool:
        return not self.errors


class ModelInfo(CamelModel):
    """A selectable provider model."""

    id: str
    name: str
