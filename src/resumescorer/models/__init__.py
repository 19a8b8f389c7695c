"""Data models for resumescorer."""

from resumescorer.models.analysis import (
    AnalysisRequest,
    AnalysisResult,
    BatchItemResult,
    BatchResult,
    ExtractionProgress,
    FeedbackItem,
    ModelInfo,
    ProcessingEvent,
    ProcessingStage,
)

__all__ = [
    "AnalysisRequest",
    "AnalysisResult",
    "BatchItemResult",
    "BatchResult",
    "ExtractionProgress",
    "FeedbackItem",
    "ModelInfo",
    "ProcessingEvent",
    "ProcessingStage",
]
