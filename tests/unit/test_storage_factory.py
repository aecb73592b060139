from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from ingest.config.settings import Settings
from ingest.storage.exceptions import UnknownStorageBackendError
from ingest.storage.factory import StorageFactory
from ingest.storage.local_adapter import LocalStorageBackend
from ingest.storage.registry import StorageRegistry
from ingest.upload.exceptions import ConfigurationError


def _make_settings(tmp_path: Path, s3_bucket: str = "") -> Mock:
    return Mock(
        spec=Settings,
        storage_root=str(tmp_path),
        s3_bucket=s3_bucket,
        s3_region="us-east-1",
        s3_endpoint_url=None,
        s3_access_key=None,
        s3_secret_key=None,
    )


class TestStorageFactory:
    def test_registers_local_and_public(self, tmp_path: Path) -> None:
        registry = StorageFactory.create_registry(_make_settings(tmp_path))

        assert sorted(registry) == ["local", "public"]
        public = registry.get_backend("public")
        assert isinstance(public, LocalStorageBackend)
        assert public.root == (tmp_path / "public").resolve()

    def test_registers_s3_when_bucket_set(self, tmp_path: Path) -> None:
        with patch("ingest.storage.factory.S3StorageBackend") as mock_s3:
            registry = StorageFactory.create_registry(_make_settings(tmp_path, "uploads"))

        assert registry.get_backend("s3") is mock_s3.return_value
        assert mock_s3.call_args.kwargs["bucket"] == "uploads"


class TestStorageRegistry:
    def test_unknown_name_raises_configuration_error(self) -> None:
        registry = StorageRegistry()
        with pytest.raises(UnknownStorageBackendError, match="Unknown storage backend 'ftp'"):
            registry.get_backend("ftp")
        assert issubclass(UnknownStorageBackendError, ConfigurationError)

    def test_register_adds_backend(self, tmp_path: Path) -> None:
        registry = StorageRegistry()
        backend = LocalStorageBackend(tmp_path)
        registry.register("scratch", backend)
        assert registry.get_backend("scratch") is backend
        assert len(registry) == 1
