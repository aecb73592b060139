from ingest.upload.exceptions import ConfigurationError


class StorageError(Exception):
    """Raised when a storage backend fails to check, create or write a path."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Storage operation failed for '{path}': {reason}")


class StoragePathError(StorageError):
    """Raised when a path resolves outside the backend root."""


class UnknownStorageBackendError(ConfigurationError):
    """Raised when no backend is registered under the requested name."""
