"""Persistence of the API key and model selection."""

from resumescorer.storage.base import JsonFileStore, KeyValueStore, MemoryStore
from resumescorer.storage.credentials import CredentialStore, mask_credential
from resumescorer.storage.models import ModelSelection, validate_model

__all__ = [
    "CredentialStore",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "ModelSelection",
    "mask_credential",
    "validate_model",
]
