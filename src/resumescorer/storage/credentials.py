"""API key persistence."""

import logging
import os
from typing import Mapping, Optional

from resumescorer.constants import CREDENTIAL_ENV_VAR, STORAGE_KEYS
from resumescorer.exceptions import CredentialError
from resumescorer.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

SOURCE_STORE = "store"
SOURCE_ENV = "env"
KEY_SOURCES = (SOURCE_STORE, SOURCE_ENV)


class CredentialStore:
    """Read and write the OpenAI API key.

    The key comes either from the store or, when the key source is ``env``,
    from the ``OPENAI_API_KEY`` environment variable. Storing a key switches
    the source to ``store``.
    """

    def __init__(self, store: KeyValueStore, environ: Optional[Mapping[str, str]] = None) -> None:
        self.store = store
        self._environ = os.environ if environ is None else environ

    @property
    def key_source(self) -> str:
        return self.store.get(STORAGE_KEYS["KEY_SOURCE"]) or SOURCE_ENV

    def set_key_source(self, source: str) -> None:
        if source not in KEY_SOURCES:
            raise CredentialError(f"Invalid key source: {source}")
        self.store.set(STORAGE_KEYS["KEY_SOURCE"], source)

    def get_credential(self) -> Optional[str]:
        """Return the API key from the active source, or None."""
        if self.key_source == SOURCE_STORE:
            stored = self.store.get(STORAGE_KEYS["API_KEY"])
            if stored:
                return stored
        return self._environ.get(CREDENTIAL_ENV_VAR) or None

    def store_credential(self, api_key: str) -> None:
        api_key = (api_key or "").strip()
        if not api_key:
            raise CredentialError("API key is required")
        self.store.set(STORAGE_KEYS["API_KEY"], api_key)
        self.set_key_source(SOURCE_STORE)
        logger.info("Stored API key")

    def remove_credential(self) -> None:
        self.store.remove(STORAGE_KEYS["API_KEY"])
        self.store.remove(STORAGE_KEYS["KEY_SOURCE"])
        logger.info("Removed stored API key")

    def has_credential(self) -> bool:
        return bool(self.get_credential())


def mask_credential(api_key: str) -> str:
    """Return ``api_key`` with all but its first and last four characters hidden."""
    if len(api_key) <= 8:
        return "*" * len(api_key)
    return f"{api_key[:4]}{'*' * (len(api_key) - 8)}{api_key[-4:]}"
