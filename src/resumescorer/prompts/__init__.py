"""
Prompt templates for resumescorer.

This package contains the prompt templates sent with the resume analysis
request.
"""

from pathlib import Path
from typing import Any, Dict

# Get the directory containing this file
PACKAGE_DIR = Path(__file__).parent

# Dictionary to store loaded prompt templates
_loaded_prompts: Dict[str, str] = {}


def load_prompt(prompt_name: str) -> str:
    """
    Load a prompt template by name.

    Args:
        prompt_name: Name of the prompt file (with or without .prompt extension)

    Returns:
        The content of the prompt template as a string

    Raises:
        FileNotFoundError: If the prompt file does not exist
    """
    if not prompt_name.endswith(".prompt"):
        prompt_name = f"{prompt_name}.prompt"

    if prompt_name in _loaded_prompts:
        return _loaded_prompts[prompt_name]

    prompt_path = PACKAGE_DIR / prompt_name
    if not prompt_path.is_file():
        available = [f.name for f in PACKAGE_DIR.glob("*.prompt")]
        raise FileNotFoundError(
            f"Prompt '{prompt_name}' not found. "
            f"Available prompts: {', '.join(available)}"
        )

    with open(prompt_path, "r", encoding="utf-8") as f:
        content = f.read().strip()

    _loaded_prompts[prompt_name] = content
    return content


def get_prompt(prompt_name: str, **kwargs: Any) -> str:
    """Load a prompt template and fill in its ``str.format`` placeholders."""
    template = load_prompt(prompt_name)
    return template.format(**kwargs) if kwargs else template
