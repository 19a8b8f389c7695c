"""LLM provider access for resumescorer."""

from resumescorer.llm.client import OpenAIClientContext

__all__ = ["OpenAIClientContext"]
