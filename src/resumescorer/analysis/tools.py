"""Tool definition and response schema for the resume analysis call."""

from resumescorer.api.validation import FieldSpec, FieldType, ResponseSchema
from resumescorer.constants import ANALYZE_RESUME_TOOL_NAME, SCORE_RANGES

REQUIRED_FIELDS = [
    "score",
    "matchPercentage",
    "keywordMatches",
    "missingKeywords",
    "suggestions",
    "detailedAnalysis",
]

ANALYZE_RESUME_TOOL = {
    "type": "function",
    "function": {
        "name": ANALYZE_RESUME_TOOL_NAME,
        "description": (
            "Analyzes a resume against a job description to provide matching "
            "analysis and recommendations"
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "score": {
                    "type": "number",
                    "description": "Overall match score between 0-100",
                },
                "matchPercentage": {
                    "type": "number",
                    "description": "Percentage match for key requirements",
                },
                "keywordMatches": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "List of matching keywords and skills found",
                },
                "missingKeywords": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "List of important missing keywords and skills",
                },
                "suggestions": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "List of specific suggestions for improvement",
                },
                "detailedAnalysis": {
                    "type": "string",
                    "description": "Detailed analysis of qualifications and match",
                },
            },
            "required": REQUIRED_FIELDS,
        },
    },
}

TOOL_CHOICE = {"type": "function", "function": {"name": ANALYZE_RESUME_TOOL_NAME}}

_SCORE = FieldSpec(
    FieldType.NUMBER,
    required=True,
    minimum=SCORE_RANGES["MIN"],
    maximum=SCORE_RANGES["MAX"],
)
_STRINGS = FieldSpec(FieldType.ARRAY, required=True, items=FieldType.STRING)

ANALYSIS_RESPONSE_SCHEMA: ResponseSchema = {
    "score": _SCORE,
    "matchPercentage": _SCORE,
    "keywordMatches": _STRINGS,
    "missingKeywords": _STRINGS,
    "suggestions": _STRINGS,
    "detailedAnalysis": FieldSpec(FieldType.STRING, required=True, min_length=1),
}
