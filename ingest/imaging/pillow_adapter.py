import io

from PIL import Image

from ingest.imaging.base import BaseImageProcessor, fit_within
from ingest.imaging.exceptions import ProcessingError, UnsupportedImageFormatError
from ingest.imaging.models import DecodedImage

PILLOW_FORMATS: dict[str, str] = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
    "gif": "GIF",
    "webp": "WEBP",
    "bmp": "BMP",
    "tif": "TIFF",
    "tiff": "TIFF",
}

# Formats that accept a lossy `quality` save option.
LOSSY_FORMATS = {"JPEG", "WEBP"}


class PillowImageProcessor(BaseImageProcessor):
    """Decodes, resizes and encodes images using Pillow."""

    def decode(self, data: bytes) -> DecodedImage:
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except Exception as exc:
            raise ProcessingError(f"Pillow decode failed: {exc}") from exc
        return DecodedImage(width=image.width, height=image.height, handle=image)

    def resize(
        self,
        image: DecodedImage,
        width: int,
        height: int,
        preserve_aspect: bool = True,
        no_upscale: bool = True,
    ) -> DecodedImage:
        size = fit_within(
            image.width,
            image.height,
            width,
            height,
            preserve_aspect=preserve_aspect,
            no_upscale=no_upscale,
        )
        source: Image.Image = image.handle  # type: ignore[assignment]
        if size == source.size:
            return image
        try:
            resized = source.resize(size, Image.Resampling.LANCZOS)
        except Exception as exc:
            raise ProcessingError(f"Pillow resize failed: {exc}") from exc
        return DecodedImage(width=resized.width, height=resized.height, handle=resized)

    def encode_by_extension(self, image: DecodedImage, extension: str, quality: int) -> bytes:
        image_format = PILLOW_FORMATS.get(extension.lower())
        if image_format is None:
            raise UnsupportedImageFormatError(f"No Pillow codec for extension '{extension}'")
        source: Image.Image = image.handle  # type: ignore[assignment]
        options: dict[str, object] = {}
        if image_format in LOSSY_FORMATS:
            options["quality"] = quality
        if image_format == "JPEG" and source.mode not in ("RGB", "L", "CMYK"):
            source = source.convert("RGB")
        buf = io.BytesIO()
        try:
            source.save(buf, format=image_format, **options)
        except Exception as exc:
            raise ProcessingError(f"Pillow encode failed: {exc}") from exc
        return buf.getvalue()
