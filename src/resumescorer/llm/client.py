"""OpenAI client context shared by analysis calls."""

import logging
from typing import Callable, List, Optional, Tuple

from openai import AsyncOpenAI

from resumescorer.config import OpenAIConfig
from resumescorer.constants import STORAGE_KEYS
from resumescorer.exceptions import MissingCredentialError
from resumescorer.storage import CredentialStore, KeyValueStore, ModelSelection
from resumescorer.storage.base import Unsubscribe

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., AsyncOpenAI]


class OpenAIClientContext:
    """Hand out ``AsyncOpenAI`` clients for the current API key and model.

    Only the client for the most recently used API key is cached; a client
    for another key replaces it and the old one is closed. The cache is
    dropped by :meth:`invalidate`, which :meth:`watch` wires to external
    changes of the stored key. The SDK's own retries are disabled because
    the request pipeline retries.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        models: ModelSelection,
        config: Optional[OpenAIConfig] = None,
        client_factory: ClientFactory = AsyncOpenAI,
    ) -> None:
        self.credentials = credentials
        self.models = models
        self.config = config or OpenAIConfig()
        self._client_factory = client_factory
        self._client: Optional[AsyncOpenAI] = None
        self._client_key: Optional[str] = None
        # Invalidated clients, closed on the next await point
        self._stale: List[AsyncOpenAI] = []
        self._unsubscribe: Optional[Unsubscribe] = None

    def _create_client(self, api_key: str) -> AsyncOpenAI:
        logger.debug("Creating OpenAI client")
        return self._client_factory(
            api_key=api_key,
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            max_retries=0,
        )

    async def _close_stale(self) -> None:
        stale, self._stale = self._stale, []
        for client in stale:
            await client.close()

    async def get_client(self, credential: Optional[str] = None) -> Tuple[AsyncOpenAI, str]:
        """Return a client and the selected model.

        Args:
            credential: API key to use instead of the stored one.

        Raises:
            MissingCredentialError: If no API key is available.
            ModelError: If the selected model is not usable.
        """
        api_key = credential or self.credentials.get_credential()
        if not api_key:
            raise MissingCredentialError()

        model = self.models.get_model()
        if self._client is None or self._client_key != api_key:
            self.invalidate()
            self._client = self._create_client(api_key)
            self._client_key = api_key
        await self._close_stale()
        return self._client, model

    def invalidate(self) -> None:
        """Drop the cached client so the next call builds a fresh one."""
        if self._client is not None:
            logger.debug("Invalidating cached OpenAI client")
            self._stale.append(self._client)
        self._client = None
        self._client_key = None

    def watch(self, store: KeyValueStore) -> Unsubscribe:
        """Invalidate the cache whenever another session changes the API key."""
        self.unwatch()
        self._unsubscribe = store.on_external_change(
            STORAGE_KEYS["API_KEY"], lambda key, value: self.invalidate()
        )
        return self.unwatch

    def unwatch(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def aclose(self) -> None:
        """Close cached clients and stop watching the store."""
        self.unwatch()
        self.invalidate()
        await self._close_stale()

    async def __aenter__(self) -> "OpenAIClientContext":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
