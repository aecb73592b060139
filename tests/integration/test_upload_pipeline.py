import io
import logging
import os
import stat
from pathlib import Path

import pytest
from PIL import Image

from ingest.upload.models import UploadRequest


class TestResizedUpload:
    def test_wide_image_is_resized_to_600x300(
        self, make_processor, public_root: Path, wide_jpeg_bytes: bytes  # type: ignore[no-untyped-def]
    ) -> None:
        processor = make_processor()
        request = UploadRequest.from_bytes(wide_jpeg_bytes, "wide.jpg")

        result = processor.set_file(request).set_path("images").generate_identity().upload()

        assert result.resized is True
        with Image.open(public_root / result.path) as stored:
            assert stored.size == (600, 300)
            assert stored.format == "JPEG"

    def test_small_image_is_not_upscaled(
        self, make_processor, public_root: Path, small_png_bytes: bytes  # type: ignore[no-untyped-def]
    ) -> None:
        processor = make_processor()
        request = UploadRequest.from_bytes(small_png_bytes, "small.png")

        result = processor.set_file(request).set_path("images").generate_identity().upload()

        with Image.open(public_root / result.path) as stored:
            assert stored.size == (100, 50)
            assert stored.format == "PNG"

    def test_transparent_png_keeps_png_codec(
        self, make_processor, public_root: Path, rgba_png_bytes: bytes  # type: ignore[no-untyped-def]
    ) -> None:
        processor = make_processor()
        request = UploadRequest.from_bytes(rgba_png_bytes, "logo.png")

        result = processor.set_file(request).set_path("logos").generate_identity().upload()

        with Image.open(public_root / result.path) as stored:
            assert stored.size == (300, 300)
            assert stored.mode == "RGBA"


class TestDirectoryProvisioning:
    def test_creates_missing_directory(
        self, make_processor, public_root: Path, wide_jpeg_bytes: bytes  # type: ignore[no-untyped-def]
    ) -> None:
        assert not (public_root / "a" / "b").exists()
        processor = make_processor()

        result = (
            processor.set_file(UploadRequest.from_bytes(wide_jpeg_bytes, "x.jpg"))
            .set_path("a/b")
            .generate_identity()
            .upload()
        )

        assert (public_root / "a" / "b").is_dir()
        assert (public_root / result.path).is_file()

    def test_second_upload_to_same_directory(
        self, make_processor, public_root: Path, wide_jpeg_bytes: bytes  # type: ignore[no-untyped-def]
    ) -> None:
        first = (
            make_processor()
            .set_file(UploadRequest.from_bytes(wide_jpeg_bytes, "x.jpg"))
            .set_path("shared")
            .generate_identity()
            .upload()
        )
        second = (
            make_processor()
            .set_file(UploadRequest.from_bytes(wide_jpeg_bytes, "x.jpg"))
            .set_path("shared")
            .generate_identity()
            .upload()
        )

        assert first.path != second.path
        assert (public_root / first.path).is_file()
        assert (public_root / second.path).is_file()

    def test_private_upload_creates_private_directory(
        self, make_processor, public_root: Path, wide_jpeg_bytes: bytes  # type: ignore[no-untyped-def]
    ) -> None:
        result = (
            make_processor()
            .set_file(UploadRequest.from_bytes(wide_jpeg_bytes, "x.jpg"))
            .set_path("secret")
            .set_visibility("private")
            .generate_identity()
            .upload()
        )

        assert stat.S_IMODE((public_root / "secret").stat().st_mode) == 0o700
        assert stat.S_IMODE((public_root / result.path).stat().st_mode) == 0o600


class TestFallbackGuarantee:
    def test_corrupt_jpeg_is_stored_unmodified(
        self,
        make_processor,  # type: ignore[no-untyped-def]
        public_root: Path,
        corrupt_jpeg_bytes: bytes,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        processor = make_processor()
        request = UploadRequest.from_bytes(corrupt_jpeg_bytes, "broken.jpg")

        with caplog.at_level(logging.ERROR, logger="ingest"):
            result = processor.set_file(request).set_path("images").generate_identity().upload()

        assert result.resized is False
        assert result.stored is True
        assert result.path.endswith(".jpg")
        assert (public_root / result.path).read_bytes() == corrupt_jpeg_bytes

        failures = [r for r in caplog.records if "Image processing failed" in r.getMessage()]
        assert len(failures) == 1
        assert failures[0].context["path"] == result.path  # type: ignore[attr-defined]
        assert failures[0].context["cause"]  # type: ignore[attr-defined]

    def test_non_image_file_is_stored(
        self, make_processor, public_root: Path  # type: ignore[no-untyped-def]
    ) -> None:
        processor = make_processor()
        request = UploadRequest(
            stream=io.BytesIO(b"name,score\nada,10\n"), filename="scores.csv", size=18
        )

        result = processor.set_file(request).set_path("docs").generate_identity().upload()

        assert (public_root / result.path).read_bytes() == b"name,score\nada,10\n"

    def test_image_with_unsupported_codec_extension_is_stored(
        self, make_processor, public_root: Path, square_png_bytes: bytes  # type: ignore[no-untyped-def]
    ) -> None:
        data = square_png_bytes
        processor = make_processor()

        result = (
            processor.set_file(UploadRequest.from_bytes(data, "image.heic"))
            .generate_identity()
            .upload()
        )

        assert result.resized is False
        assert (public_root / result.path).read_bytes() == data

    def test_corrupt_jpeg_from_pipe_is_stored_unmodified(
        self, make_processor, public_root: Path, corrupt_jpeg_bytes: bytes  # type: ignore[no-untyped-def]
    ) -> None:
        read_fd, write_fd = os.pipe()
        with open(write_fd, "wb") as writer:
            writer.write(corrupt_jpeg_bytes)

        with open(read_fd, "rb") as stream:
            assert stream.seekable() is False
            request = UploadRequest(stream=stream, filename="broken.jpg")
            processor = make_processor().set_file(request).set_path("pipes")
            result = processor.generate_identity().upload()

        assert result.resized is False
        assert (public_root / result.path).read_bytes() == corrupt_jpeg_bytes
