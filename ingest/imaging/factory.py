from ingest.config.settings import Settings
from ingest.imaging.base import BaseImageProcessor
from ingest.imaging.pillow_adapter import PillowImageProcessor
from ingest.imaging.pymupdf_adapter import PyMuPdfImageProcessor


class ImageProcessorFactory:
    """Creates the correct image processor based on settings."""

    ADAPTERS: dict[str, type[BaseImageProcessor]] = {
        "pillow": PillowImageProcessor,
        "pymupdf": PyMuPdfImageProcessor,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseImageProcessor:
        engine = settings.image_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown image engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
