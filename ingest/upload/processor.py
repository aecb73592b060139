from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from io import BytesIO

from ingest.config.settings import Settings
from ingest.imaging.base import BaseImageProcessor
from ingest.imaging.exceptions import ProcessingError
from ingest.imaging.factory import ImageProcessorFactory
from ingest.logging.logger import Log
from ingest.storage.base import BaseStorageBackend
from ingest.storage.factory import StorageFactory
from ingest.storage.registry import StorageRegistry
from ingest.upload.exceptions import ConfigurationError
from ingest.upload.models import (
    GeneratedIdentity,
    ProcessedImage,
    ProcessingFailure,
    ProcessingOutcome,
    UploadConfiguration,
    UploadRequest,
    UploadResult,
    Visibility,
)
from ingest.upload.naming import generate_identity


class UploadProcessor:
    """Stores one uploaded file under a generated, collision-resistant name.

    Lifecycle: configure -> generate_identity -> upload.
    Resizing is best effort: when the image cannot be processed the original
    bytes are stored under the same name instead.

    An instance handles a single upload and is not safe for concurrent use.
    """

    def __init__(
        self,
        storage: StorageRegistry,
        image_processor: BaseImageProcessor,
        configuration: UploadConfiguration | None = None,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._storage = storage
        self._image_processor = image_processor
        self._configuration = configuration or UploadConfiguration()
        self._now = now
        self._request: UploadRequest | None = None
        self._identity: GeneratedIdentity | None = None
        self._result: UploadResult | None = None

    @property
    def configuration(self) -> UploadConfiguration:
        return self._configuration

    def set_file(self, request: UploadRequest | None) -> "UploadProcessor":
        """Attach the file to upload.

        Raises:
            ConfigurationError: if no request is given or its stream cannot be read.
        """
        if request is None:
            raise ConfigurationError("No file attached to the upload")
        stream = request.stream
        if stream is None or stream.closed or not stream.readable():
            raise ConfigurationError(f"File '{request.filename}' is not readable")
        self._ensure_not_frozen()
        self._request = request
        return self

    def set_path(self, path: str) -> "UploadProcessor":
        return self._configure(path=path)

    def set_storage_backend(self, storage_backend: str) -> "UploadProcessor":
        return self._configure(storage_backend=storage_backend)

    def set_visibility(self, visibility: Visibility | str) -> "UploadProcessor":
        return self._configure(visibility=visibility)

    def set_resize_height(self, resize_height: int) -> "UploadProcessor":
        return self._configure(resize_height=resize_height)

    def set_quality(self, quality: int) -> "UploadProcessor":
        return self._configure(quality=quality)

    def generate_identity(self) -> "UploadProcessor":
        """Generate the file name and final path. Freezes the configuration.

        Raises:
            ConfigurationError: if no file is attached or an identity already exists.
        """
        request = self._require_request()
        if self._identity is not None:
            raise ConfigurationError(
                f"Identity already generated for this upload: {self._identity.path}"
            )
        self._identity = generate_identity(request, self._configuration.path, now=self._now)
        return self

    @property
    def file_name(self) -> str:
        return self._require_identity().file_name

    @property
    def path(self) -> str:
        return self._require_identity().path

    def upload(self) -> UploadResult:
        """Process and store the attached file.

        Processing failures fall back to storing the original bytes.
        Storage failures propagate to the caller.

        Raises:
            ConfigurationError: if the file, identity or backend is missing.
            StorageError: if the backend fails to create the directory or write.
        """
        request = self._require_request()
        identity = self._require_identity()
        if self._result is not None:
            raise ConfigurationError(f"Upload already completed: {self._result.path}")
        backend = self._storage.get_backend(self._configuration.storage_backend)

        original = request.read_bytes()
        outcome = self._process(request, original)

        if isinstance(outcome, ProcessedImage):
            stored = self._store_processed(backend, identity, outcome)
            Log.info(
                f"Stored resized upload {identity.path} ({outcome.width}x{outcome.height})"
            )
            self._result = UploadResult(
                path=identity.path,
                file_name=identity.file_name,
                resized=True,
                stored=stored,
            )
            return self._result

        Log.error(
            f"Image processing failed for {identity.path}: {outcome.reason}",
            path=identity.path,
            cause=str(outcome.reason),
        )
        stored = self._store_original(backend, identity, original)
        Log.info(f"Stored original upload {identity.path}")
        self._result = UploadResult(
            path=identity.path,
            file_name=identity.file_name,
            resized=False,
            stored=stored,
        )
        return self._result

    def _process(self, request: UploadRequest, data: bytes) -> ProcessingOutcome:
        """Resize to the configured height and re-encode with the original codec."""
        config = self._configuration
        try:
            image = self._image_processor.decode(data)
            if image.width <= 0 or image.height <= 0:
                raise ProcessingError(f"Invalid image size {image.width}x{image.height}")
            width = max(1, int(image.width / image.height * config.resize_height))
            resized = self._image_processor.resize(
                image,
                width,
                config.resize_height,
                preserve_aspect=True,
                no_upscale=True,
            )
            encoded = self._image_processor.encode_by_extension(
                resized, request.extension, config.quality
            )
        except ProcessingError as exc:
            return ProcessingFailure(reason=exc)
        return ProcessedImage(data=encoded, width=resized.width, height=resized.height)

    def _store_processed(
        self,
        backend: BaseStorageBackend,
        identity: GeneratedIdentity,
        image: ProcessedImage,
    ) -> bool:
        self._ensure_directory(backend, identity.directory, self._configuration.visibility)
        return backend.put(identity.path, image.data, self._configuration.visibility)

    def _store_original(
        self,
        backend: BaseStorageBackend,
        identity: GeneratedIdentity,
        original: bytes,
    ) -> bool:
        self._ensure_directory(backend, identity.directory, self._configuration.visibility)
        return backend.put_file_as(
            identity.directory,
            BytesIO(original),
            identity.file_name,
            self._configuration.visibility,
        )

    @staticmethod
    def _ensure_directory(
        backend: BaseStorageBackend, directory: str, visibility: Visibility | str
    ) -> None:
        if directory and not backend.exists(directory):
            backend.make_directory(directory, visibility)

    def _configure(self, **changes: object) -> "UploadProcessor":
        self._ensure_not_frozen()
        self._configuration = replace(self._configuration, **changes)  # type: ignore[arg-type]
        return self

    def _ensure_not_frozen(self) -> None:
        if self._identity is not None:
            raise ConfigurationError(
                "Upload configuration cannot change after the identity is generated"
            )

    def _require_request(self) -> UploadRequest:
        if self._request is None:
            raise ConfigurationError("No file attached to the upload")
        return self._request

    def _require_identity(self) -> GeneratedIdentity:
        if self._identity is None:
            raise ConfigurationError("Identity not generated. Call generate_identity() first.")
        return self._identity


def build_upload_processor(settings: Settings) -> UploadProcessor:
    """Build an UploadProcessor with the configured backends and image engine."""
    return UploadProcessor(
        storage=StorageFactory.create_registry(settings),
        image_processor=ImageProcessorFactory.create(settings),
        configuration=UploadConfiguration.from_settings(settings),
    )
