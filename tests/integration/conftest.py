from pathlib import Path

import pytest

from ingest.imaging.pillow_adapter import PillowImageProcessor
from ingest.storage.local_adapter import LocalStorageBackend
from ingest.storage.registry import StorageRegistry
from ingest.upload.processor import UploadProcessor


@pytest.fixture
def public_root(tmp_path: Path) -> Path:
    return tmp_path / "public"


@pytest.fixture
def registry(public_root: Path) -> StorageRegistry:
    return StorageRegistry({"public": LocalStorageBackend(public_root)})


@pytest.fixture
def make_processor(registry: StorageRegistry):  # type: ignore[no-untyped-def]
    def _make() -> UploadProcessor:
        return UploadProcessor(storage=registry, image_processor=PillowImageProcessor())

    return _make
