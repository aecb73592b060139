from collections.abc import Iterator, Mapping

from ingest.storage.base import BaseStorageBackend
from ingest.storage.exceptions import UnknownStorageBackendError


class StorageRegistry(Mapping[str, BaseStorageBackend]):
    """Named storage backends, looked up by identifier."""

    def __init__(self, backends: Mapping[str, BaseStorageBackend] | None = None) -> None:
        self._backends: dict[str, BaseStorageBackend] = dict(backends or {})

    def register(self, name: str, backend: BaseStorageBackend) -> None:
        self._backends[name] = backend

    def get_backend(self, name: str) -> BaseStorageBackend:
        """Return the backend registered under `name`.

        Raises:
            UnknownStorageBackendError: if no backend has that name.
        """
        backend = self._backends.get(name)
        if backend is None:
            raise UnknownStorageBackendError(
                f"Unknown storage backend '{name}'. Choose from: {sorted(self._backends)}"
            )
        return backend

    def __getitem__(self, name: str) -> BaseStorageBackend:
        return self._backends[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._backends)

    def __len__(self) -> int:
        return len(self._backends)
