import argparse
import json
import sys
from pathlib import Path

from ingest.config.settings import Settings
from ingest.logging.logger import Log
from ingest.reporting.error_reporter import ErrorReporter
from ingest.storage.exceptions import StorageError
from ingest.upload.exceptions import ConfigurationError
from ingest.upload.models import UploadRequest
from ingest.upload.processor import build_upload_processor


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ingest",
        description="Store a file under a unique name, resizing it when it is an image.",
    )
    parser.add_argument("file", type=Path, help="file to upload")
    parser.add_argument("--path", default="", help="base storage path")
    parser.add_argument("--disk", default=None, help="storage backend name")
    parser.add_argument("--visibility", default=None, help="public or private")
    parser.add_argument("--height", type=int, default=None, help="resize target height")
    parser.add_argument("--quality", type=int, default=None, help="encode quality (0-100)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> build processor -> upload one file."""
    args = parse_args(argv)
    reporter = ErrorReporter()

    try:
        settings = Settings()
        Log.configure(settings.log_level)
        with args.file.open("rb") as stream:
            request = UploadRequest(
                stream=stream,
                filename=args.file.name,
                size=args.file.stat().st_size,
            )
            processor = build_upload_processor(settings)
            processor.set_file(request).set_path(args.path)
            if args.disk is not None:
                processor.set_storage_backend(args.disk)
            if args.visibility is not None:
                processor.set_visibility(args.visibility)
            if args.height is not None:
                processor.set_resize_height(args.height)
            if args.quality is not None:
                processor.set_quality(args.quality)
            result = processor.generate_identity().upload()
    except (ConfigurationError, StorageError, OSError, ValueError) as exc:
        failure = reporter.report_exception(exc, {"file": str(args.file)})
        print(json.dumps(failure.payload))
        return 1

    print(result.path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
