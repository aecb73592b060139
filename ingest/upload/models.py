import io
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import BinaryIO

from ingest.config.settings import Settings
from ingest.imaging.exceptions import ProcessingError


class Visibility(str, Enum):
    """Access-control hint passed to the storage backend."""

    PUBLIC = "public"
    PRIVATE = "private"


@dataclass(frozen=True)
class UploadRequest:
    """A single incoming file. The caller owns and closes `stream`."""

    stream: BinaryIO
    filename: str
    extension: str = ""
    size: int = 0

    def __post_init__(self) -> None:
        if not self.extension:
            suffix = PurePosixPath(self.filename).suffix
            object.__setattr__(self, "extension", suffix[1:])

    @classmethod
    def from_bytes(cls, data: bytes, filename: str) -> "UploadRequest":
        """Wrap in-memory content as an upload request."""
        return cls(stream=io.BytesIO(data), filename=filename, size=len(data))

    def read_bytes(self) -> bytes:
        """Read the whole stream.

        Seekable streams are read from the start and rewound afterwards.
        Non-seekable streams are read from their current position once.
        """
        if not self.stream.seekable():
            return self.stream.read()
        self.stream.seek(0)
        data = self.stream.read()
        self.stream.seek(0)
        return data


@dataclass(frozen=True)
class UploadConfiguration:
    """Where and how a single upload is stored."""

    path: str = ""
    storage_backend: str = "public"
    visibility: Visibility | str = Visibility.PUBLIC
    resize_height: int = 300
    quality: int = 75

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadConfiguration":
        return cls(
            storage_backend=settings.default_storage_backend,
            visibility=settings.default_visibility,
            resize_height=settings.default_resize_height,
            quality=settings.default_quality,
        )


@dataclass(frozen=True)
class GeneratedIdentity:
    """Generated file name and the final storage path it lives under."""

    file_name: str
    path: str

    @property
    def directory(self) -> str:
        """Directory part of `path`, empty when the file sits at the backend root."""
        directory, _, _ = self.path.rpartition("/")
        return directory


@dataclass(frozen=True)
class UploadResult:
    """Outcome of `UploadProcessor.upload()`."""

    path: str
    file_name: str
    resized: bool
    stored: bool


@dataclass(frozen=True)
class ProcessedImage:
    """Encoded resized variant ready to be written."""

    data: bytes
    width: int
    height: int


@dataclass(frozen=True)
class ProcessingFailure:
    """Processing did not produce a variant; the original is stored instead."""

    reason: ProcessingError


ProcessingOutcome = ProcessedImage | ProcessingFailure
