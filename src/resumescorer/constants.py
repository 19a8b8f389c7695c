"""Constants shared across resumescorer."""

# Models the analysis request may use, keyed by id
AVAILABLE_MODELS = {
    "gpt-4o-mini": "GPT-4o Mini",
    "gpt-4o": "GPT-4o",
    "gpt-4-turbo": "GPT-4 Turbo",
    "gpt-3.5-turbo": "GPT-3.5 Turbo",
}
DEFAULT_MODEL = "gpt-4o-mini"

# Key-value store keys
STORAGE_KEYS = {
    "API_KEY": "openai_api_key",
    "KEY_SOURCE": "api_key_source",
    "MODEL": "openai_model",
}
CREDENTIAL_ENV_VAR = "OPENAI_API_KEY"

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
ALLOWED_EXTENSIONS = [".pdf"]
PDF_MAGIC = b"%PDF-"

ANALYZE_RESUME_TOOL_NAME = "analyze_resume"

FEEDBACK_TITLES = {
    "MATCHING_SKILLS": "Matching Skills",
    "MISSING_SKILLS": "Missing Skills",
    "ANALYSIS": "Analysis",
}

SCORE_RANGES = {
    "MIN": 0,
    "MAX": 100,
    "POOR": 30,
    "FAIR": 50,
    "GOOD": 70,
    "EXCELLENT": 90,
}
