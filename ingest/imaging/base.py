from abc import ABC, abstractmethod

from ingest.imaging.exceptions import ProcessingError
from ingest.imaging.models import DecodedImage


class BaseImageProcessor(ABC):
    """Contract for all image processing adapters."""

    @abstractmethod
    def decode(self, data: bytes) -> DecodedImage:
        """Decode raw image bytes.

        Raises:
            ProcessingError: if the bytes are not a readable image.
        """

    @abstractmethod
    def resize(
        self,
        image: DecodedImage,
        width: int,
        height: int,
        preserve_aspect: bool = True,
        no_upscale: bool = True,
    ) -> DecodedImage:
        """Resize to fit inside width x height.

        Args:
            image: Image returned by `decode`.
            width: Target width in pixels.
            height: Target height in pixels.
            preserve_aspect: Keep the original aspect ratio.
            no_upscale: Never grow past the original dimensions.

        Raises:
            ProcessingError: if the engine fails to resize.
        """

    @abstractmethod
    def encode_by_extension(self, image: DecodedImage, extension: str, quality: int) -> bytes:
        """Encode with the codec matching a file extension.

        Raises:
            UnsupportedImageFormatError: if no codec matches the extension.
            ProcessingError: if encoding fails.
        """


def fit_within(
    width: int,
    height: int,
    target_width: int,
    target_height: int,
    preserve_aspect: bool = True,
    no_upscale: bool = True,
) -> tuple[int, int]:
    """Compute output dimensions shared by all adapters."""
    if target_width <= 0 or target_height <= 0:
        raise ProcessingError(f"Invalid target size {target_width}x{target_height}")
    if not preserve_aspect:
        new_width, new_height = target_width, target_height
        if no_upscale:
            new_width, new_height = min(new_width, width), min(new_height, height)
        return new_width, new_height
    scale = min(target_width / width, target_height / height)
    if no_upscale:
        scale = min(scale, 1.0)
    return max(1, round(width * scale)), max(1, round(height * scale))
