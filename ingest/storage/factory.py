from pathlib import Path

from ingest.config.settings import Settings
from ingest.storage.local_adapter import LocalStorageBackend
from ingest.storage.registry import StorageRegistry
from ingest.storage.s3_adapter import S3StorageBackend


class StorageFactory:
    """Builds the named storage backends from settings."""

    @classmethod
    def create_registry(cls, settings: Settings) -> StorageRegistry:
        """Register `local`, `public` and, when a bucket is configured, `s3`."""
        root = Path(settings.storage_root)
        registry = StorageRegistry(
            {
                "local": LocalStorageBackend(root / "private"),
                "public": LocalStorageBackend(root / "public"),
            }
        )
        if settings.s3_bucket:
            registry.register(
                "s3",
                S3StorageBackend(
                    bucket=settings.s3_bucket,
                    region=settings.s3_region,
                    endpoint_url=settings.s3_endpoint_url,
                    access_key=settings.s3_access_key,
                    secret_key=settings.s3_secret_key,
                ),
            )
        return registry
