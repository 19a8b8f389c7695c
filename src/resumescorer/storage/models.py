"""Model selection persistence."""

import logging
from typing import Dict, List, Optional

from resumescorer.constants import AVAILABLE_MODELS, DEFAULT_MODEL, STORAGE_KEYS
from resumescorer.exceptions import ModelStorageError, ModelValidationError
from resumescorer.models import ModelInfo
from resumescorer.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


def validate_model(model: Optional[str], available: Optional[Dict[str, str]] = None) -> str:
    """Check that ``model`` is a known model id.

    Returns:
        The model id.

    Raises:
        ModelValidationError: If the model is empty or unknown.
    """
    available = AVAILABLE_MODELS if available is None else available
    if not model:
        raise ModelValidationError("Model is required", "MISSING_MODEL")
    if model not in available:
        raise ModelValidationError(f"Invalid model selection: {model}", "INVALID_MODEL")
    return model


class ModelSelection:
    """Selected provider model, falling back to a default."""

    def __init__(
        self,
        store: KeyValueStore,
        default_model: str = DEFAULT_MODEL,
        available: Optional[Dict[str, str]] = None,
    ) -> None:
        self.store = store
        self.available = dict(AVAILABLE_MODELS if available is None else available)
        self.default_model = default_model

    def validate_model(self, model: Optional[str]) -> str:
        return validate_model(model, self.available)

    def get_model(self) -> str:
        """Return the stored model, or the default when none is stored.

        Raises:
            ModelStorageError: If the stored model is no longer available.
            ModelValidationError: If the default model is not available.
        """
        stored = self.store.get(STORAGE_KEYS["MODEL"])
        if stored:
            try:
                return self.validate_model(stored)
            except ModelValidationError as e:
                raise ModelStorageError(
                    "The previously selected model is no longer available. "
                    "Reverting to default model.",
                    "STORAGE_INVALID_STORED_MODEL",
                ) from e

        try:
            return self.validate_model(self.default_model)
        except ModelValidationError as e:
            raise ModelValidationError(
                "The default model is not available. Please check your configuration.",
                "INVALID_DEFAULT_MODEL",
            ) from e

    def store_model(self, model: str) -> None:
        self.store.set(STORAGE_KEYS["MODEL"], self.validate_model(model))
        logger.info(f"Selected model: {model}")

    def clear_model(self) -> None:
        self.store.remove(STORAGE_KEYS["MODEL"])

    def has_stored_model(self) -> bool:
        return self.store.get(STORAGE_KEYS["MODEL"]) is not None

    def get_available_models(self) -> List[ModelInfo]:
        return [ModelInfo(id=model_id, name=name) for model_id, name in self.available.items()]

    def get_model_display_order(self) -> List[ModelInfo]:
        """Return the available models with the selected one first."""
        selected = self.get_model()
        models = self.get_available_models()
        return sorted(models, key=lambda m: m.id != selected)
