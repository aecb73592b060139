from abc import ABC, abstractmethod
from typing import BinaryIO

from ingest.upload.models import Visibility


class BaseStorageBackend(ABC):
    """Contract for all storage backends.

    Paths are backend-relative and use `/` as the separator.
    """

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return True if a file or directory exists at `path`."""

    @abstractmethod
    def make_directory(self, path: str, visibility: Visibility | str = Visibility.PUBLIC) -> None:
        """Create a directory and its parents with the given visibility. Idempotent."""

    @abstractmethod
    def put(self, path: str, data: bytes, visibility: Visibility | str = Visibility.PUBLIC) -> bool:
        """Write `data` to `path` with the given visibility.

        Raises:
            StorageError: if the write fails.
        """

    @abstractmethod
    def put_file_as(
        self,
        directory: str,
        source: BinaryIO,
        name: str,
        visibility: Visibility | str = Visibility.PUBLIC,
    ) -> bool:
        """Copy the whole of `source` to `{directory}/{name}`.

        Raises:
            StorageError: if the write fails.
        """
