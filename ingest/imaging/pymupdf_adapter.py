import pymupdf

from ingest.imaging.base import BaseImageProcessor, fit_within
from ingest.imaging.exceptions import ProcessingError, UnsupportedImageFormatError
from ingest.imaging.models import DecodedImage

PYMUPDF_OUTPUTS: dict[str, str] = {
    "jpg": "jpg",
    "jpeg": "jpg",
    "png": "png",
}


class PyMuPdfImageProcessor(BaseImageProcessor):
    """Decodes, resizes and encodes images using PyMuPDF pixmaps."""

    def decode(self, data: bytes) -> DecodedImage:
        try:
            pixmap = pymupdf.Pixmap(data)  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise ProcessingError(f"pymupdf decode failed: {exc}") from exc
        return DecodedImage(width=pixmap.width, height=pixmap.height, handle=pixmap)

    def resize(
        self,
        image: DecodedImage,
        width: int,
        height: int,
        preserve_aspect: bool = True,
        no_upscale: bool = True,
    ) -> DecodedImage:
        new_width, new_height = fit_within(
            image.width,
            image.height,
            width,
            height,
            preserve_aspect=preserve_aspect,
            no_upscale=no_upscale,
        )
        if (new_width, new_height) == (image.width, image.height):
            return image
        try:
            pixmap = pymupdf.Pixmap(image.handle, new_width, new_height)  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise ProcessingError(f"pymupdf resize failed: {exc}") from exc
        return DecodedImage(width=pixmap.width, height=pixmap.height, handle=pixmap)

    def encode_by_extension(self, image: DecodedImage, extension: str, quality: int) -> bytes:
        output = PYMUPDF_OUTPUTS.get(extension.lower())
        if output is None:
            raise UnsupportedImageFormatError(f"No pymupdf codec for extension '{extension}'")
        pixmap = image.handle
        try:
            if output == "jpg":
                if pixmap.alpha:  # type: ignore[attr-defined]
                    pixmap = pymupdf.Pixmap(pixmap, 0)  # type: ignore[no-untyped-call]
                return pixmap.tobytes(output="jpg", jpg_quality=quality)  # type: ignore[attr-defined, no-any-return]
            return pixmap.tobytes(output="png")  # type: ignore[attr-defined, no-any-return]
        except Exception as exc:
            raise ProcessingError(f"pymupdf encode failed: {exc}") from exc
