from ingest.storage.base import BaseStorageBackend
from ingest.storage.factory import StorageFactory
from ingest.storage.registry import StorageRegistry

__all__ = ["BaseStorageBackend", "StorageFactory", "StorageRegistry"]
